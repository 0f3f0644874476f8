"""Resolve scanned QR text to a member lookup key.

QR codes in circulation come in four shapes, depending on when they were
printed: encrypted tokens, plain JSON, URL-encoded JSON and bare
id numbers. The scanner cannot tell which one it read, so the resolver
tries them in a fixed order and stops at the first stage that yields a
key:

1. decrypt   (only when a passphrase is configured)
2. json      working text parsed as {"id_number": ...}
3. url_json  working text percent-decoded, then parsed
4. raw       the scanned text itself

Stage 4 always succeeds. A key that matches nothing is the caller's
"member not found", never an error here.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import Callable, NewType
from urllib.parse import unquote

from qrguard.codec import Codec
from qrguard.errors import AuthenticationFailed, InvalidFormat

logger = logging.getLogger("qrguard.resolver")

LookupKey = NewType("LookupKey", str)

ID_FIELD = "id_number"


class Stage(str, enum.Enum):
    """Parse stage that produced a lookup key."""

    JSON = "json"
    URL_JSON = "url_json"
    RAW = "raw"


@dataclass(frozen=True)
class Resolution:
    """Lookup key plus the stage that produced it."""

    key: LookupKey
    stage: Stage
    decrypted: bool = False


def extract_id(text: str) -> LookupKey | None:
    """Read id_number from a JSON object, or None if there is none.

    Numeric ids are accepted and stringified; booleans, nulls, nested
    values and empty strings are not ids.
    """
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError):
        return None
    if not isinstance(payload, dict):
        return None
    value = payload.get(ID_FIELD)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        value = str(value)
    if isinstance(value, str) and value:
        return LookupKey(value)
    return None


def extract_id_url_encoded(text: str) -> LookupKey | None:
    return extract_id(unquote(text))


_PARSE_STAGES: tuple[tuple[Stage, Callable[[str], LookupKey | None]], ...] = (
    (Stage.JSON, extract_id),
    (Stage.URL_JSON, extract_id_url_encoded),
)


class Resolver:
    """Fallback chain from scanned text to LookupKey. Never raises."""

    def __init__(self, passphrase: str = "") -> None:
        self._codec = Codec(passphrase)

    @property
    def decrypts(self) -> bool:
        return self._codec.enabled

    def resolve(self, scanned: str) -> LookupKey:
        return self.resolve_with_stage(scanned).key

    def resolve_with_stage(self, scanned: str) -> Resolution:
        working = self._try_decrypt(scanned)
        decrypted = working is not None
        if working is None:
            working = scanned

        for stage, attempt in _PARSE_STAGES:
            key = attempt(working)
            if key is not None:
                logger.debug("Resolved scan at stage %s", stage.value)
                return Resolution(key=key, stage=stage, decrypted=decrypted)

        logger.debug("No id_number in scan, using raw text")
        return Resolution(key=LookupKey(scanned), stage=Stage.RAW, decrypted=decrypted)

    def _try_decrypt(self, scanned: str) -> str | None:
        if not self._codec.enabled:
            return None
        try:
            return self._codec.decode(scanned)
        except (InvalidFormat, AuthenticationFailed) as exc:
            # A wrong passphrase looks exactly like a legacy unencrypted code here.
            logger.debug("Scan is not a valid token (%s), falling back", type(exc).__name__)
            return None

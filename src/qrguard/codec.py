"""The token codec: passphrase-derived AES-256-GCM over member payloads.

Container layout, base64-encoded for the QR code:

    salt (16) | nonce (12) | ciphertext (N) | tag (16)

There is no magic number or version byte. The key is re-derived from the
passphrase and the embedded salt on every call; nothing is cached.

An empty passphrase means encryption is disabled and both directions
pass text through untouched.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from qrguard.errors import (
    AuthenticationFailed,
    EncryptionFailed,
    InvalidFormat,
    KeyDerivationFailed,
)

logger = logging.getLogger("qrguard.codec")

SALT_SIZE = 16
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32
PBKDF2_ITERATIONS = 100_000

HEADER_SIZE = SALT_SIZE + NONCE_SIZE
MIN_CONTAINER_SIZE = HEADER_SIZE + TAG_SIZE

# Scanners append line breaks; atob-style decoders drop ASCII whitespace.
_ASCII_WHITESPACE = dict.fromkeys(map(ord, " \t\n\r\f"))


def derive_key(passphrase: str, salt: bytes) -> bytes:
    """PBKDF2-HMAC-SHA256 of the passphrase, 32 bytes."""
    try:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=salt,
            iterations=PBKDF2_ITERATIONS,
        )
        return kdf.derive(passphrase.encode("utf-8"))
    except (UnsupportedAlgorithm, ValueError, TypeError) as exc:
        logger.exception("Key derivation failed")
        raise KeyDerivationFailed(str(exc)) from exc


def encode(plaintext: str, passphrase: str) -> str:
    """Encrypt plaintext into a base64 token.

    Salt and nonce are drawn from os.urandom on every call, so the same
    plaintext never produces the same token twice.
    """
    if not passphrase:
        return plaintext

    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    key = derive_key(passphrase, salt)
    try:
        sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    except (OverflowError, ValueError, TypeError) as exc:
        logger.exception("Token encryption failed")
        raise EncryptionFailed(str(exc)) from exc
    return base64.b64encode(salt + nonce + sealed).decode("ascii")


def decode(token: str, passphrase: str) -> str:
    """Decrypt a token produced by encode().

    Raises InvalidFormat when the token cannot be a container and
    AuthenticationFailed when the tag does not verify.
    """
    if not passphrase:
        return token

    try:
        raw = base64.b64decode(token.translate(_ASCII_WHITESPACE), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidFormat("token is not base64") from exc
    if len(raw) < MIN_CONTAINER_SIZE:
        raise InvalidFormat(
            f"token holds {len(raw)} bytes, need at least {MIN_CONTAINER_SIZE}"
        )

    salt = raw[:SALT_SIZE]
    nonce = raw[SALT_SIZE:HEADER_SIZE]
    sealed = raw[HEADER_SIZE:]

    key = derive_key(passphrase, salt)
    try:
        data = AESGCM(key).decrypt(nonce, sealed, None)
    except InvalidTag as exc:
        raise AuthenticationFailed("wrong passphrase or corrupted token") from exc

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidFormat("decrypted payload is not UTF-8") from exc


class Codec:
    """Token codec bound to one deployment passphrase."""

    def __init__(self, passphrase: str = "") -> None:
        self._passphrase = passphrase

    @property
    def enabled(self) -> bool:
        return bool(self._passphrase)

    def encode(self, plaintext: str) -> str:
        """Member payload to QR token. Pass-through when disabled."""
        return encode(plaintext, self._passphrase)

    def decode(self, token: str) -> str:
        """QR token to member payload. Pass-through when disabled."""
        return decode(token, self._passphrase)

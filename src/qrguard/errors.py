"""Error taxonomy for the token codec and the member store.

KeyDerivationFailed and EncryptionFailed mean a cryptographic primitive
misbehaved. They are fatal and propagate to whoever asked for a token.

InvalidFormat and AuthenticationFailed are ordinary outcomes of scanning
noisy or foreign QR codes. The resolver swallows them and moves on to
the next fallback stage.
"""

from __future__ import annotations


class CryptoError(Exception):
    """Base for all codec failures."""


class KeyDerivationFailed(CryptoError):
    """PBKDF2 could not derive a key."""


class EncryptionFailed(CryptoError):
    """AES-GCM refused to encrypt."""


class InvalidFormat(CryptoError):
    """Token is not base64, is too short, or does not hold UTF-8 text."""


class AuthenticationFailed(CryptoError):
    """GCM tag did not verify: wrong passphrase or tampered token."""


class NotFoundError(LookupError):
    """No member is stored under the requested id_number."""

    def __init__(self, id_number: str) -> None:
        super().__init__(f"Member {id_number!r} not found")
        self.id_number = id_number

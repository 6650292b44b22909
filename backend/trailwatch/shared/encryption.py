"""
Symmetric encryption for secrets stored in the database.

Fernet needs a 32-byte urlsafe-base64 key; we derive it from the
configured DB_ENCRYPTION_KEY so any passphrase can be used.
"""

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from .errors import TrailwatchError


class DecryptionError(TrailwatchError):
    """Stored value could not be decrypted with the configured key."""
    pass


def _fernet(secret: str) -> Fernet:
    key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode()).digest())
    return Fernet(key)


def encrypt(value: str, secret: str) -> bytes:
    """Encrypt a string for storage."""
    return _fernet(secret).encrypt(value.encode("utf-8"))


def decrypt(value: bytes, secret: str) -> str:
    """
    Decrypt a value produced by encrypt().

    Raises:
        DecryptionError: If the key is wrong or the value was tampered with
    """
    try:
        return _fernet(secret).decrypt(value).decode("utf-8")
    except (InvalidToken, UnicodeDecodeError) as e:
        raise DecryptionError("Failed to decrypt stored value") from e

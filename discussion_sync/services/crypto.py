"""Symmetric encryption for source config credentials stored at rest."""

import base64
import hashlib
import secrets
from typing import Any, Mapping, Optional

from cryptography.fernet import Fernet, InvalidToken

from discussion_sync.logging_config import get_logger

logger = get_logger(__name__)

# Source config columns holding third-party credentials
ENCRYPTED_FIELDS = ("api_token", "notion_token", "anthropic_api_key")

# Every Fernet token starts with the version byte 0x80 followed by a
# big-endian timestamp, which base64-encodes to this prefix.
FERNET_TOKEN_PREFIX = "gAAAAA"


def generate_encryption_key() -> str:
    """Return a random secret suitable for ``ENCRYPTION_KEY``."""
    return secrets.token_urlsafe(32)


def _derive_key(secret_key: str) -> bytes:
    """Derive a Fernet key from the application secret using SHA-256."""
    digest = hashlib.sha256(secret_key.encode()).digest()
    return base64.urlsafe_b64encode(digest)


def encrypt_value(plaintext: str, secret_key: str) -> str:
    """Encrypt a string and return the ciphertext as a URL-safe string."""
    f = Fernet(_derive_key(secret_key))
    return f.encrypt(plaintext.encode()).decode()


def decrypt_value(ciphertext: str, secret_key: str) -> str:
    """Decrypt a ciphertext string. Raises ValueError on failure."""
    f = Fernet(_derive_key(secret_key))
    try:
        return f.decrypt(ciphertext.encode()).decode()
    except InvalidToken as exc:
        raise ValueError("Failed to decrypt credential data") from exc


def is_encrypted(value: Any) -> bool:
    """Check whether a stored value looks like a Fernet token."""
    return isinstance(value, str) and value.startswith(FERNET_TOKEN_PREFIX)


def encrypt_secrets(data: Mapping[str, Any], secret_key: str) -> dict[str, Any]:
    """Return a copy of ``data`` with its credential fields encrypted.

    Only non-empty strings are encrypted. Values that are already
    encrypted are stored as they are, so a record read back and written
    again is not encrypted twice. Keys absent from ``data`` stay absent.
    """
    prepared = dict(data)
    for field in ENCRYPTED_FIELDS:
        value = prepared.get(field)
        if isinstance(value, str) and value and not is_encrypted(value):
            prepared[field] = encrypt_value(value, secret_key)
    return prepared


def decrypt_secret(value: Optional[str], secret_key: str, field: str = "credential") -> Optional[str]:
    """Decrypt one stored credential.

    Plaintext values pass through. A token that cannot be decrypted (for
    example after the key was rotated) is logged and returned unchanged.
    """
    if not is_encrypted(value):
        return value
    try:
        return decrypt_value(value, secret_key)
    except ValueError:
        logger.error("Failed to decrypt source config credential", field=field)
        return value


def decrypt_secrets(source: Any, secret_key: str) -> dict[str, Optional[str]]:
    """Decrypt the credential fields of a source config for use."""
    return {
        field: decrypt_secret(getattr(source, field, None), secret_key, field=field)
        for field in ENCRYPTED_FIELDS
    }

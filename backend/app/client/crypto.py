"""At-rest protection for API keys kept in local settings."""

import base64
import logging

from cryptography.fernet import Fernet, InvalidToken

from app.config import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_KEY = "change-me-in-production"


def _get_fernet(encryption_key: str | None) -> Fernet | None:
    """Return Fernet instance if a real encryption key is configured, else None."""
    if not encryption_key or encryption_key == PLACEHOLDER_KEY:
        return None
    try:
        return Fernet(encryption_key.encode())
    except ValueError:
        logger.warning("Ignoring malformed encryption key; falling back to base64")
        return None


class KeyCipher:
    """Encrypts with Fernet when a key is configured, else base64-encodes."""

    def __init__(self, encryption_key: str | None = None):
        self._fernet = _get_fernet(
            settings.encryption_key if encryption_key is None else encryption_key
        )

    def encrypt(self, raw_key: str) -> str:
        if self._fernet:
            return self._fernet.encrypt(raw_key.encode()).decode()
        return base64.b64encode(raw_key.encode()).decode()

    def decrypt(self, encrypted: str) -> str:
        """Raises ValueError when the value cannot be decoded."""
        if self._fernet:
            try:
                return self._fernet.decrypt(encrypted.encode()).decode()
            except InvalidToken:
                # Written before a key was configured.
                pass
        return base64.b64decode(encrypted.encode(), validate=True).decode()


def mask_key(raw_key: str) -> str:
    """Mask an API key, showing only last 4 chars."""
    if len(raw_key) <= 4:
        return "****"
    return "*" * (len(raw_key) - 4) + raw_key[-4:]

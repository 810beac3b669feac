"""Journal content encryption using Fernet symmetric encryption."""

from __future__ import annotations

import logging

from cryptography.fernet import Fernet, InvalidToken

from aurasync.config import Settings

logger = logging.getLogger("aurasync.encryption")


class JournalDecryptionError(Exception):
    """Stored journal content could not be decrypted with the configured key.

    Usually means ``JOURNAL_ENCRYPTION_KEY`` changed since the entry was
    written.
    """


class JournalCipher:
    """Encrypt and decrypt journal entry bodies.

    Usage::

        cipher = JournalCipher.from_settings(settings)
        token = cipher.encrypt("dear diary")
        cipher.decrypt(token)  # "dear diary"
    """

    def __init__(self, key: str | bytes) -> None:
        self._fernet = Fernet(key.encode() if isinstance(key, str) else key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "JournalCipher":
        return cls(settings.journal_encryption_key)

    def encrypt(self, content: str) -> str:
        return self._fernet.encrypt(content.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        try:
            return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except InvalidToken as exc:
            logger.error("Journal entry decryption failed: wrong key or corrupted content")
            raise JournalDecryptionError("Unable to decrypt journal entry") from exc

"""
Encryption adapters for sensitive report fields.

The reporting engine treats encryption as a black box: anything with an
``encrypt(plaintext) -> str`` method can be injected. Two adapters ship here:

- FernetEncryptor: the primary primitive, backed by the ``cryptography`` package.
- Base64Obfuscator: a reversible transform kept only as the document
  renderer's fallback. It is NOT encryption.
"""
import base64
import logging
from enum import Enum
from typing import Optional, Protocol

from cryptography.fernet import Fernet

from src.core.config import settings

logger = logging.getLogger(__name__)


class EncryptionPath(str, Enum):
    PRIMARY = "primary"
    OBFUSCATION_FALLBACK = "obfuscation-fallback"


class Encryptor(Protocol):
    def encrypt(self, plaintext: str) -> str:
        ...


class FernetEncryptor:
    """Symmetric encryption of single field values."""

    def __init__(self, key: str):
        self._fernet = Fernet(key.encode("utf-8"))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")


class Base64Obfuscator:
    """Legacy reversible transform used by document reports as a fallback."""

    def encrypt(self, plaintext: str) -> str:
        return base64.b64encode(plaintext.encode("utf-8")).decode("ascii")


def generate_key() -> str:
    """Generate a new key suitable for REPORT_ENCRYPTION_KEY."""
    return Fernet.generate_key().decode("ascii")


def default_encryptor() -> Optional[Encryptor]:
    """Build the primary encryptor from settings, or None if no key is configured."""
    if not settings.report_encryption_key:
        logger.warning("REPORT_ENCRYPTION_KEY not set. Customer data sections will need a fallback.")
        return None
    return FernetEncryptor(settings.report_encryption_key)

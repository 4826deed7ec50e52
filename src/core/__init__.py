"""
Core Module - Shared Infrastructure.
"""

from src.core.config import settings, Settings
from src.core.security import Encryptor, EncryptionPath, FernetEncryptor, Base64Obfuscator

__all__ = [
    "settings",
    "Settings",
    "Encryptor",
    "EncryptionPath",
    "FernetEncryptor",
    "Base64Obfuscator",
]

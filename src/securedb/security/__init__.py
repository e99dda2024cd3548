"""Security helpers: the password-keyed cipher used for the database file.

This package provides:
- EVP_BytesToKey derivation of an AES-256 key and IV from the caller's key
- AES-256-CBC encryption of text to a hex blob, and back
"""

from .cipher import ENCRYPTION_ALGORITHM, derive_key_and_iv, encrypt, decrypt

__all__ = [
    "ENCRYPTION_ALGORITHM",
    "derive_key_and_iv",
    "encrypt",
    "decrypt",
]

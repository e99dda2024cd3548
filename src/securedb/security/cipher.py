"""Password-keyed AES-256-CBC cipher for the database file.

Stored format: the lowercase hex encoding of
``AES-256-CBC(key, iv, PKCS7(utf8(plaintext)))`` with no header.

Key and IV are both derived from the password with OpenSSL's
``EVP_BytesToKey`` (MD5, one round, no salt). This matches the legacy
password-based cipher the database format was first written with, so
existing files stay readable.

Known weakness: there is no per-write IV, so the same plaintext under the
same password always encrypts to the same bytes, and there is no MAC.
Switching to AES-GCM changes the on-disk format and needs a migration path.
"""

from __future__ import annotations

import hashlib
from typing import Tuple, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..core.exceptions import DecryptionError


ENCRYPTION_ALGORITHM = "aes-256-cbc"
KEY_SIZE = 32
IV_SIZE = 16
BLOCK_SIZE_BITS = algorithms.AES.block_size

Password = Union[str, bytes]


def _password_bytes(password: Password) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    if not password:
        raise ValueError("encryption key must not be empty")
    return password


def derive_key_and_iv(password: Password) -> Tuple[bytes, bytes]:
    """
    Derive the AES key and IV from ``password`` using ``EVP_BytesToKey``.

    Each round hashes the previous digest followed by the password; digests
    are concatenated until ``KEY_SIZE + IV_SIZE`` bytes are available.
    """
    secret = _password_bytes(password)
    material = b""
    block = b""
    while len(material) < KEY_SIZE + IV_SIZE:
        block = hashlib.md5(block + secret).digest()
        material += block
    return material[:KEY_SIZE], material[KEY_SIZE:KEY_SIZE + IV_SIZE]


def _cipher(password: Password) -> Cipher:
    key, iv = derive_key_and_iv(password)
    return Cipher(algorithms.AES(key), modes.CBC(iv))


def encrypt(plaintext: str, password: Password) -> str:
    """Encrypt ``plaintext`` and return the hex text written to disk."""
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
    encryptor = _cipher(password).encryptor()
    ct = encryptor.update(padded) + encryptor.finalize()
    return ct.hex()


def decrypt(stored: str, password: Password) -> str:
    """
    Decrypt hex text produced by :func:`encrypt`.

    Raises ``DecryptionError`` for anything that is not a valid ciphertext
    under ``password``. A wrong key nearly always shows up as bad padding;
    the rare wrong-key result with valid padding usually fails UTF-8 or JSON
    decoding further up.
    """
    try:
        ct = bytes.fromhex(stored.strip())
    except ValueError as e:
        raise DecryptionError("stored data is not valid hex") from e

    block_bytes = BLOCK_SIZE_BITS // 8
    if not ct or len(ct) % block_bytes:
        raise DecryptionError(
            f"ciphertext length {len(ct)} is not a positive multiple of {block_bytes}"
        )

    decryptor = _cipher(password).decryptor()
    padded = decryptor.update(ct) + decryptor.finalize()

    unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
    try:
        raw = unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        # bad padding: wrong key or corrupted ciphertext
        raise DecryptionError("bad decrypt (wrong key or corrupted data)") from e

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionError("decrypted data is not valid UTF-8") from e


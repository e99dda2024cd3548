"""
Exceptions for SecureDB core module
Everything raised by the store derives from SecureDatabaseError so callers
of the strict API can catch one type.
"""


class SecureDatabaseError(Exception):
    # general container for errors
    pass


class StorageIOError(SecureDatabaseError):
    # raised when the database file is missing, unreadable or unwritable
    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class DecryptionError(SecureDatabaseError):
    # raised on malformed ciphertext, key mismatch or unparseable plaintext
    pass


class SerializationError(SecureDatabaseError):
    # raised when a document cannot be encoded as JSON
    pass


class RecordNotFoundError(SecureDatabaseError, KeyError):
    # raised internally when deleting a key that is not in the document
    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Record with key {self.key!r} does not exist."

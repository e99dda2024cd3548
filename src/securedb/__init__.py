"""SecureDB: an encrypted, file-persisted JSON key-value store.

    from securedb import SecureDatabase, DatabaseEvent

    db = SecureDatabase("/var/lib/app", "secrets.db", "my key")
    db.on(DatabaseEvent.ERROR, lambda err: print("db error:", err))
    db.add_record("token", {"value": "abc", "expires": 3600})
    db.get_all_keys()  # ['token']
"""

from .core.database import SecureDatabase
from .core.events import DatabaseEvent, EventEmitter
from .core.exceptions import (
    SecureDatabaseError,
    StorageIOError,
    DecryptionError,
    SerializationError,
    RecordNotFoundError,
)
from .config import DatabaseConfig, build_database
from .logging_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    "SecureDatabase",
    "DatabaseEvent",
    "EventEmitter",
    "SecureDatabaseError",
    "StorageIOError",
    "DecryptionError",
    "SerializationError",
    "RecordNotFoundError",
    "DatabaseConfig",
    "build_database",
    "configure_logging",
]

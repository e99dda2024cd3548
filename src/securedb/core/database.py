"""
SecureDatabase: an encrypted single-file key-value store.

Structure on disk:
==============================
 - <folder_path>/
      - <filename>    hex(AES-256-CBC(canonical JSON of the whole document))
==============================

Every mutating call is a full read-modify-write of the document:

    load (read -> decrypt -> parse) -> mutate -> save (serialize -> encrypt -> write) -> notify

so cost grows with the size of the whole document, not the size of the
change. Fine for settings and small secrets; not for many keys or high write
rates.

There is no locking. Two handles on the same file race, last writer wins.

Two API flavours:
> Fail-soft (save_data, load_data, add_record, ...): never raise on I/O or
  decryption problems; failures are emitted as ``error`` events and
  load_data returns an empty document.
> Strict (read, write): raise SecureDatabaseError subclasses and emit nothing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..security import cipher
from .events import DatabaseEvent, EventEmitter, EventName
from .exceptions import (
    DecryptionError,
    RecordNotFoundError,
    SecureDatabaseError,
    SerializationError,
)
from .storage import atomic_write_text, read_text


logger = logging.getLogger(__name__)

Document = Dict[str, Any]
ListenerSpec = Union[Callable[..., Any], Iterable[Callable[..., Any]]]


def serialize_document(document: Document) -> str:
    """Encode ``document`` as compact JSON (the form that gets encrypted)."""
    if not isinstance(document, dict):
        raise SerializationError(f"document must be a dict, got {type(document).__name__}")
    try:
        text = json.dumps(document, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        # lone surrogates survive dumps but cannot be written as UTF-8
        text.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"document is not JSON serializable: {e}") from e
    except RecursionError as e:
        raise SerializationError("document is nested too deeply to serialize") from e
    return text


def parse_document(text: str) -> Document:
    """Parse decrypted text back into a document."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise DecryptionError(f"decrypted data is not valid JSON: {e}") from e
    except RecursionError as e:
        raise DecryptionError("decrypted JSON is nested too deeply to parse") from e
    if not isinstance(data, dict):
        raise DecryptionError(f"decrypted data is a JSON {type(data).__name__}, expected an object")
    return data


class SecureDatabase(EventEmitter):
    """Encrypted JSON document persisted at ``folder_path / filename``."""

    def __init__(
        self,
        folder_path: Union[str, Path],
        filename: str,
        encryption_key: Union[str, bytes],
        *,
        listeners: Optional[Mapping[EventName, ListenerSpec]] = None,
    ):
        super().__init__()
        if not isinstance(encryption_key, (str, bytes)):
            raise TypeError(
                f"encryption_key must be str or bytes, got {type(encryption_key).__name__}"
            )
        if not encryption_key:
            raise ValueError("encryption_key must not be empty")
        self._file_path = Path(folder_path) / filename
        self._encryption_key = encryption_key

        # subscribe before the bootstrap save so its events are observable
        for event, spec in (listeners or {}).items():
            for listener in ([spec] if callable(spec) else spec):
                self.on(event, listener)

        if not self._file_path.exists():
            logger.debug("Initializing empty database at %s", self._file_path)
            self.save_data({})

    @property
    def file_path(self) -> Path:
        return self._file_path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._file_path)!r})"

    # ------------------------------------------------------------------
    # Strict API
    # ------------------------------------------------------------------

    def read(self) -> Document:
        """
        Load and decrypt the document.

        Raises StorageIOError if the file cannot be read and DecryptionError
        if its content is not a document encrypted with this handle's key.
        """
        stored = read_text(self._file_path)
        document = parse_document(cipher.decrypt(stored, self._encryption_key))
        logger.debug("Loaded %d record(s) from %s", len(document), self._file_path)
        return document

    def write(self, document: Document) -> None:
        """
        Encrypt ``document`` and replace the file with it.

        Raises SerializationError or StorageIOError.
        """
        stored = cipher.encrypt(serialize_document(document), self._encryption_key)
        atomic_write_text(self._file_path, stored)
        logger.debug("Saved %d record(s) to %s", len(document), self._file_path)

    # ------------------------------------------------------------------
    # Fail-soft API
    # ------------------------------------------------------------------

    def save_data(self, data: Document) -> None:
        """Persist ``data``; emits ``saved`` on success, ``error`` on failure."""
        try:
            self.write(data)
        except SecureDatabaseError as e:
            self.emit(DatabaseEvent.ERROR, e)
            return
        self.emit(DatabaseEvent.SAVED, str(self._file_path))

    def load_data(self) -> Document:
        """
        Return the stored document.

        On failure emits ``error`` and returns an empty dict, so an empty
        store and a failed load look the same unless you listen for errors.
        """
        try:
            return self.read()
        except SecureDatabaseError as e:
            self.emit(DatabaseEvent.ERROR, e)
            return {}

    def add_record(self, key: str, value: Any) -> None:
        # recordAdded fires even if the save failed; the error event tells them apart
        data = self.load_data()
        data[key] = value
        self.save_data(data)
        self.emit(DatabaseEvent.RECORD_ADDED, key, value)

    def delete_record(self, key: str) -> None:
        data = self.load_data()
        try:
            _pop_record(data, key)
        except RecordNotFoundError as e:
            logger.warning("%s", e)
            return
        self.save_data(data)
        self.emit(DatabaseEvent.RECORD_DELETED, key)

    def clear_database(self) -> None:
        self.save_data({})
        self.emit(DatabaseEvent.DATABASE_CLEARED)

    def get_all_keys(self) -> List[str]:
        return list(self.load_data().keys())

    def __contains__(self, key: object) -> bool:
        return key in self.load_data()


def _pop_record(data: Document, key: str) -> Any:
    if key not in data:
        raise RecordNotFoundError(key)
    return data.pop(key)

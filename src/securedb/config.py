"""Small helper to build a SecureDatabase from a config object."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from .core.database import ListenerSpec, SecureDatabase
from .core.events import EventName


@dataclass(frozen=True)
class DatabaseConfig:
    """Where the database lives and which key opens it."""

    folder_path: Union[str, Path]
    filename: str
    encryption_key: Union[str, bytes] = field(repr=False)

    @property
    def file_path(self) -> Path:
        return Path(self.folder_path) / self.filename


def build_database(
    config: DatabaseConfig,
    listeners: Optional[Mapping[EventName, ListenerSpec]] = None,
) -> SecureDatabase:
    """
    Construct a SecureDatabase for ``config``.

    ``listeners`` maps an event (``DatabaseEvent`` or its name) to a callable
    or a list of callables. They are subscribed before the first-run
    bootstrap write, so a ``saved`` or ``error`` from creating the file is
    delivered to them.
    """
    return SecureDatabase(
        config.folder_path,
        config.filename,
        config.encryption_key,
        listeners=listeners,
    )

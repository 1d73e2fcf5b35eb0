"""Public SDK surface for recordstore.

This module provides a stable import path for library users.
It re-exports the storage context, config, and error types.
"""

from __future__ import annotations

from core.config import StoreConfig
from core.errors import (
    DuplicateRecordError,
    InvalidArgumentError,
    ItemNotFoundError,
    RecordCodecError,
    RecordStoreConfigError,
    RecordStoreError,
    ReservedTableError,
    StorageIOError,
    TableBindingError,
    TableNotFoundError,
    WrongDatatypeError,
)
from core.types import CollectionInformation
from store.storage_context import StorageContext

__all__ = [
    "CollectionInformation",
    "DuplicateRecordError",
    "InvalidArgumentError",
    "ItemNotFoundError",
    "RecordCodecError",
    "RecordStoreConfigError",
    "RecordStoreError",
    "ReservedTableError",
    "StorageContext",
    "StorageIOError",
    "StoreConfig",
    "TableBindingError",
    "TableNotFoundError",
    "WrongDatatypeError",
]

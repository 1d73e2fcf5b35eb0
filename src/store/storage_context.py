"""Storage context over a directory of typed JSON tables.

This module owns the table registry, the reserved master table and
the read-modify-write CRUD flow for every client table.
"""

from __future__ import annotations

from pathlib import Path
import threading
from typing import Any

from core.config import StoreConfig
from core.constants import MASTER_TABLE_NAME, TABLE_FILE_EXTENSION
from core.errors import (
    DuplicateRecordError,
    InvalidArgumentError,
    ItemNotFoundError,
    RecordStoreError,
    ReservedTableError,
    StorageIOError,
    WrongDatatypeError,
)
from core.logging_config import get_logger
from core.types import CollectionEntry, CollectionInformation, type_identifier
from store.record_equality import find_equal_index
from store.table_file import TableFile
from store.table_registry import TableRegistry

_LOGGER = get_logger(__name__)
_RESERVED_RECORD_TYPES = (CollectionInformation, CollectionEntry)


class StorageContext:
    """File-backed record store.

    Each table is one JSON array file bound to a single dataclass type.
    Bindings are persisted in the master table and reloaded on start,
    so a new context on the same directory sees the same tables.
    """

    def __init__(
        self,
        storage_dir: str | Path | None = None,
        *,
        config: StoreConfig | None = None,
    ) -> None:
        """Open or bootstrap a storage directory.

        Args:
            storage_dir: Optional directory; falls back to config, then
                ``<cwd>/databaseFiles``.
            config: Optional storage configuration.

        Raises:
            StorageIOError: If the directory or master table cannot be created.
        """
        self._config = config or StoreConfig.default()
        self._storage_dir = Path(storage_dir) if storage_dir else self._config.storage_dir
        self._registry = TableRegistry()
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise StorageIOError(
                f"Failed to create storage directory {self._storage_dir}: {error}."
            ) from error
        self._master_file = self._table_file(MASTER_TABLE_NAME)
        self._ensure_master_table()
        self._load_registry()
        _LOGGER.info(
            "storage_initialized",
            storage_dir=str(self._storage_dir),
            table_count=len(self._registry.bindings()),
        )

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    def create_table(
        self,
        record_type: type,
        table_name: str,
        overwrite_existing: bool = False,
    ) -> None:
        """Bind a record type to a table and ensure its file exists.

        An existing file is kept untouched unless ``overwrite_existing`` is
        set, so re-declaring a table never loses records.

        Args:
            record_type: Dataclass stored in the table.
            table_name: Non-empty table name, also the file stem.
            overwrite_existing: Replace an existing file with an empty table.

        Raises:
            InvalidArgumentError: If table_name is empty.
            ReservedTableError: If the master table is targeted.
            TableBindingError: If type or name is already bound elsewhere.
            StorageIOError: If the table file cannot be created.
        """
        if not isinstance(table_name, str) or not table_name.strip():
            raise InvalidArgumentError("table_name", "must be a non-empty string")
        if record_type in _RESERVED_RECORD_TYPES or table_name == MASTER_TABLE_NAME:
            raise ReservedTableError(
                f'Table "{MASTER_TABLE_NAME}" and its record type are reserved for metadata.'
            )
        table_file = self._table_file(table_name)
        with self._lock_for(table_name):
            reuse_existing = table_file.exists() and not overwrite_existing
            added = self._registry.bind(record_type, table_name)
            try:
                if not reuse_existing:
                    table_file.create_empty()
                self._record_binding(record_type, table_name)
            except RecordStoreError:
                if added:
                    self._registry.unbind(record_type)
                    _LOGGER.warning("table_binding_rolled_back", table_name=table_name)
                raise
        _LOGGER.info(
            "table_reused" if reuse_existing else "table_created",
            table_name=table_name,
            record_type=type_identifier(record_type),
            overwritten=overwrite_existing and not reuse_existing,
        )

    def add(
        self,
        record: Any,
        throw_if_already_exists: bool = True,
        *,
        record_type: type | None = None,
    ) -> None:
        """Append a record unless an equal one is already stored.

        Args:
            record: Record to add.
            throw_if_already_exists: Raise on duplicates instead of skipping.
            record_type: Declared type; defaults to the record's own class.

        Raises:
            InvalidArgumentError: If record is None.
            WrongDatatypeError: If record is not an instance of record_type.
            TableNotFoundError: If the type has no table.
            DuplicateRecordError: If an equal record exists and throwing is on.
        """
        if record is None:
            raise InvalidArgumentError("record")
        declared_type = _declared_type(record, record_type)
        table_name = self._resolve(declared_type)
        table_file = self._table_file(table_name)
        with self._lock_for(table_name):
            records = table_file.read_records(declared_type)
            if find_equal_index(records, record, self._config.reserved_field_names) is not None:
                if throw_if_already_exists:
                    raise DuplicateRecordError(table_name)
                _LOGGER.debug("duplicate_record_skipped", table_name=table_name)
                return
            records.append(record)
            table_file.write_records(records)
        _LOGGER.debug("record_added", table_name=table_name, record_count=len(records))

    def remove(self, record: Any, *, record_type: type | None = None) -> None:
        """Remove the first stored record equal to ``record``.

        Args:
            record: Record to remove.
            record_type: Declared type; defaults to the record's own class.

        Raises:
            InvalidArgumentError: If record is None.
            WrongDatatypeError: If record is not an instance of record_type.
            TableNotFoundError: If the type has no table.
            ItemNotFoundError: If no stored record is equal.
        """
        if record is None:
            raise InvalidArgumentError("record")
        declared_type = _declared_type(record, record_type)
        table_name = self._resolve(declared_type)
        table_file = self._table_file(table_name)
        with self._lock_for(table_name):
            records = table_file.read_records(declared_type)
            index = find_equal_index(records, record, self._config.reserved_field_names)
            if index is None:
                raise ItemNotFoundError(table_name)
            del records[index]
            table_file.write_records(records)
        _LOGGER.debug("record_removed", table_name=table_name, record_count=len(records))

    def get_all(self, record_type: type) -> list[Any]:
        """Return every stored record of a type in file order.

        Raises:
            TableNotFoundError: If the type has no table.
            StorageIOError: If the backing file is missing.
        """
        table_name = self._resolve(record_type)
        with self._lock_for(table_name):
            return self._table_file(table_name).read_records(record_type)

    def has_table(self, record_type: type) -> bool:
        return record_type not in _RESERVED_RECORD_TYPES and self._registry.contains(record_type)

    def tables(self) -> dict[str, str]:
        """Return client table bindings keyed by record type identifier."""
        return self._registry.bindings()

    def collections(self) -> list[CollectionInformation]:
        """Return client table metadata with record types resolved to classes.

        Raises:
            RecordCodecError: If a stored record type cannot be imported.
        """
        with self._lock_for(MASTER_TABLE_NAME):
            entries = self._master_file.read_records(CollectionInformation)
        return [entry for entry in entries if entry.collection_name != MASTER_TABLE_NAME]

    def _ensure_master_table(self) -> None:
        """Create and self-register the master table on first run."""
        if self._master_file.exists():
            return
        self._master_file.create_empty()
        self._record_binding(CollectionInformation, MASTER_TABLE_NAME)
        _LOGGER.info("metadata_table_created", path=str(self._master_file.path))

    def _load_registry(self) -> None:
        """Rebuild in-memory bindings from master table rows."""
        for entry in self._master_file.read_records(CollectionEntry):
            if entry.collection_name == MASTER_TABLE_NAME:
                continue
            self._registry.bind_name(entry.collection_type, entry.collection_name)

    def _record_binding(self, record_type: type, table_name: str) -> None:
        """Insert a master table row unless an equal one already exists."""
        entry = CollectionEntry(
            collection_type=type_identifier(record_type),
            collection_name=table_name,
        )
        with self._lock_for(MASTER_TABLE_NAME):
            entries = self._master_file.read_records(CollectionEntry)
            if find_equal_index(entries, entry) is not None:
                return
            entries.append(entry)
            self._master_file.write_records(entries)

    def _resolve(self, record_type: type) -> str:
        if record_type in _RESERVED_RECORD_TYPES:
            raise ReservedTableError(
                f'Table "{MASTER_TABLE_NAME}" cannot be read or modified directly.'
            )
        return self._registry.resolve(record_type)

    def _table_file(self, table_name: str) -> TableFile:
        return TableFile(
            self._storage_dir / f"{table_name}{TABLE_FILE_EXTENSION}",
            json_indent=self._config.json_indent,
        )

    def _lock_for(self, table_name: str) -> threading.RLock:
        with self._locks_guard:
            return self._locks.setdefault(table_name, threading.RLock())


def _declared_type(record: Any, record_type: type | None) -> type:
    """Return the table type for a record, checking an explicit declaration."""
    if record_type is None:
        return type(record)
    if not isinstance(record, record_type):
        raise WrongDatatypeError(type_identifier(record_type), type_identifier(type(record)))
    return record_type

"""Recordstore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure kind raises a specific error type for debuggability.
"""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base exception for all recordstore failures."""


class RecordStoreConfigError(RecordStoreError):
    """Raised for invalid runtime configuration."""


class InvalidArgumentError(RecordStoreError, ValueError):
    """Raised when a required argument is missing or empty."""

    def __init__(self, param_name: str, reason: str = "must not be None") -> None:
        super().__init__(f"Invalid argument '{param_name}': {reason}.")
        self.param_name = param_name


class TableNotFoundError(RecordStoreError):
    """Raised when a record type was never bound to a table."""

    def __init__(self, type_name: str) -> None:
        super().__init__(
            f'No table found for datatype "{type_name}". '
            "Call create_table for this record type first."
        )
        self.type_name = type_name


class DuplicateRecordError(RecordStoreError):
    """Raised when an equal record already exists in the table."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f'Item already exists in table "{table_name}".')
        self.table_name = table_name


class ItemNotFoundError(RecordStoreError):
    """Raised when no stored record matches the record to remove."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f'No matching item found in table "{table_name}".')
        self.table_name = table_name


class WrongDatatypeError(RecordStoreError):
    """Raised when a record does not match the declared record type."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Wrong datatype: expected {expected}, got {actual}.")
        self.expected = expected
        self.actual = actual


class TableBindingError(RecordStoreError):
    """Raised when a type or table name is already bound elsewhere."""


class ReservedTableError(RecordStoreError):
    """Raised when a client call targets the reserved metadata table."""


class RecordCodecError(RecordStoreError):
    """Raised for malformed table content or unencodable record values."""


class StorageIOError(RecordStoreError):
    """Raised for storage directory and table file I/O failures."""

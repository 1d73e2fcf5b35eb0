"""Table file persistence helpers.

This module isolates whole-file JSON table IO and atomic rewrites.
It keeps the storage context focused on registry and CRUD flow.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from core.constants import DEFAULT_JSON_INDENT, EMPTY_TABLE_CONTENT, TEMP_FILE_SUFFIX
from core.errors import StorageIOError
from store.record_codec import decode_records, encode_records


class TableFile:
    """One JSON array file holding the records of a single table."""

    def __init__(self, path: Path, json_indent: int = DEFAULT_JSON_INDENT) -> None:
        self.path = path
        self._json_indent = json_indent

    def exists(self) -> bool:
        """Return whether the backing file is present."""
        return self.path.is_file()

    def create_empty(self) -> None:
        """Create or truncate the file to an empty JSON array.

        Raises:
            StorageIOError: If the file cannot be written.
        """
        self.write_text(EMPTY_TABLE_CONTENT + "\n")

    def read_records(self, record_type: type) -> list[Any]:
        """Read and decode all records in file order.

        Args:
            record_type: Dataclass declared for this table.

        Returns:
            Decoded records.

        Raises:
            StorageIOError: If the file is missing or unreadable.
            RecordCodecError: If file content is malformed.
        """
        return decode_records(self.read_text(), record_type)

    def write_records(self, records: list[Any]) -> None:
        """Encode records and replace the whole file content."""
        self.write_text(encode_records(records, indent=self._json_indent))

    def read_text(self) -> str:
        """Read raw file text with traceable errors."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError as error:
            raise StorageIOError(
                f"Missing table file at {self.path}. "
                "The storage directory was modified outside this process."
            ) from error
        except OSError as error:
            raise StorageIOError(f"Failed to read table file {self.path}: {error}.") from error

    def write_text(self, text: str) -> None:
        """Write text through a temp file and atomic rename.

        Raises:
            StorageIOError: If writing or renaming fails.
        """
        temp_path = self.path.with_name(self.path.name + TEMP_FILE_SUFFIX)
        try:
            temp_path.write_text(text, encoding="utf-8")
            os.replace(temp_path, self.path)
        except OSError as error:
            temp_path.unlink(missing_ok=True)
            raise StorageIOError(f"Failed to write table file {self.path}: {error}.") from error

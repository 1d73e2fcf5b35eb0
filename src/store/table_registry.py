"""In-memory binding of record types to table names."""

from __future__ import annotations

from core.errors import TableBindingError, TableNotFoundError
from core.types import type_identifier


class TableRegistry:
    """Map of record type identifier to table name.

    The registry is a cache of the master table. Each storage context
    owns its own instance.
    """

    def __init__(self) -> None:
        self._tables: dict[str, str] = {}

    def resolve(self, record_type: type) -> str:
        """Return the table name bound to a record type.

        Raises:
            TableNotFoundError: If the type was never bound.
        """
        type_name = type_identifier(record_type)
        table_name = self._tables.get(type_name)
        if table_name is None:
            raise TableNotFoundError(type_name)
        return table_name

    def contains(self, record_type: type) -> bool:
        return type_identifier(record_type) in self._tables

    def bind(self, record_type: type, table_name: str) -> bool:
        """Bind a record type to a table name.

        Args:
            record_type: Record class.
            table_name: Table backing the type.

        Returns:
            True if a new binding was added, False if it already existed.

        Raises:
            TableBindingError: If either side is bound to something else.
        """
        return self.bind_name(type_identifier(record_type), table_name)

    def bind_name(self, type_name: str, table_name: str) -> bool:
        """Bind a type identifier to a table name; see ``bind``."""
        existing_table = self._tables.get(type_name)
        if existing_table == table_name:
            return False
        if existing_table is not None:
            raise TableBindingError(
                f'Record type "{type_name}" is already bound to table "{existing_table}".'
            )
        for bound_type, bound_table in self._tables.items():
            if bound_table == table_name:
                raise TableBindingError(
                    f'Table "{table_name}" already stores record type "{bound_type}".'
                )
        self._tables[type_name] = table_name
        return True

    def unbind(self, record_type: type) -> None:
        """Drop a binding; used only to roll back a failed table creation."""
        self._tables.pop(type_identifier(record_type), None)

    def bindings(self) -> dict[str, str]:
        """Return a copy of all bindings keyed by type identifier."""
        return dict(self._tables)

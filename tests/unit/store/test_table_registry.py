"""Unit tests for the in-memory table registry."""

from __future__ import annotations

import pytest

from core.errors import TableBindingError, TableNotFoundError
from store.table_registry import TableRegistry
from tests.record_models import Contact, Note


def test_resolve_returns_bound_table() -> None:
    """A bound type should resolve to its table name."""
    registry = TableRegistry()
    registry.bind(Note, "notes")

    assert registry.resolve(Note) == "notes"


def test_resolve_unknown_type_names_the_type() -> None:
    """Unbound types should fail with the type name in the error."""
    registry = TableRegistry()

    with pytest.raises(TableNotFoundError) as error_info:
        registry.resolve(Note)

    assert error_info.value.type_name == "tests.record_models.Note"


def test_bind_is_idempotent_for_same_pair() -> None:
    """Re-binding the same pair should report no new binding."""
    registry = TableRegistry()
    registry.bind(Note, "notes")

    assert registry.bind(Note, "notes") is False


def test_bind_rejects_second_table_for_type() -> None:
    """A type can back only one table."""
    registry = TableRegistry()
    registry.bind(Note, "notes")

    with pytest.raises(TableBindingError):
        registry.bind(Note, "other_notes")


def test_bind_rejects_second_type_for_table() -> None:
    """A table can store only one type."""
    registry = TableRegistry()
    registry.bind(Note, "shared")

    with pytest.raises(TableBindingError):
        registry.bind(Contact, "shared")


def test_unbind_removes_binding() -> None:
    """Rollback should drop the binding."""
    registry = TableRegistry()
    registry.bind(Note, "notes")

    registry.unbind(Note)

    assert not registry.contains(Note)


def test_bindings_returns_copy_keyed_by_identifier() -> None:
    """Bindings should be keyed by qualified type name."""
    registry = TableRegistry()
    registry.bind(Note, "notes")

    assert registry.bindings() == {"tests.record_models.Note": "notes"}

"""Field-equality rule for duplicate detection and removal.

Two records are equal when every non-reserved field renders to the
same trimmed string. Comparison is shallow: nested values compare by
their rendered text.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Iterable

from core.types import type_identifier


def record_projection(record: Any) -> list[tuple[str, str]]:
    """Return ordered (field name, string value) pairs for a record.

    Record types may define ``record_projection()`` to supply their own
    pairs; dataclass fields are used otherwise.

    Args:
        record: Record instance.

    Returns:
        Field projection pairs in declaration order.
    """
    custom_projection = getattr(record, "record_projection", None)
    if callable(custom_projection):
        return [(str(name), project_value(value)) for name, value in custom_projection()]
    if not is_dataclass(record):
        return [("", project_value(record))]
    return [
        (record_field.name, project_value(getattr(record, record_field.name)))
        for record_field in fields(record)
    ]


def project_value(value: Any) -> str:
    """Render one field value for comparison."""
    if value is None:
        return ""
    if isinstance(value, type):
        return type_identifier(value).strip()
    return str(value).strip()


def records_equal(
    first: Any,
    second: Any,
    reserved_field_names: Iterable[str] = (),
) -> bool:
    """Compare two records with the field-equality rule.

    Args:
        first: Stored record.
        second: Candidate record.
        reserved_field_names: Field names that never take part in comparison.

    Returns:
        True when all non-reserved projections match.
    """
    if first is None or second is None:
        return False
    reserved = {_fold(name) for name in reserved_field_names}
    first_pairs = [pair for pair in record_projection(first) if _fold(pair[0]) not in reserved]
    second_pairs = [pair for pair in record_projection(second) if _fold(pair[0]) not in reserved]
    return first_pairs == second_pairs


def find_equal_index(
    records: list[Any],
    candidate: Any,
    reserved_field_names: Iterable[str] = (),
) -> int | None:
    """Return the first index holding a record equal to the candidate."""
    reserved = tuple(reserved_field_names)
    for index, record in enumerate(records):
        if records_equal(record, candidate, reserved):
            return index
    return None


def _fold(name: str) -> str:
    return name.replace("_", "").lower()

"""Shared typed models.

This module defines the metadata record persisted in the reserved
master table and the helpers that name record types stably.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.constants import JSON_NAME_METADATA_KEY


@dataclass(frozen=True)
class CollectionInformation:
    """Binding of one record type to one table, stored in the master table.

    Attributes:
        collection_type: Record type class backing the table.
        collection_name: Table name, also the file stem on disk.
    """

    collection_type: type = field(metadata={JSON_NAME_METADATA_KEY: "CollectionType"})
    collection_name: str = field(metadata={JSON_NAME_METADATA_KEY: "CollectionName"})


def type_identifier(record_type: type) -> str:
    """Return the fully qualified, stable name of a record type.

    Args:
        record_type: Record class.

    Returns:
        ``<module>.<qualname>`` string used as registry key and stored value.
    """
    return f"{record_type.__module__}.{record_type.__qualname__}"


@dataclass(frozen=True)
class CollectionEntry:
    """Master table row with the record type kept as its stored name.

    Reading bindings through this model never imports record modules,
    so the registry can be rebuilt before client types are loaded.
    """

    collection_type: str = field(metadata={JSON_NAME_METADATA_KEY: "CollectionType"})
    collection_name: str = field(metadata={JSON_NAME_METADATA_KEY: "CollectionName"})

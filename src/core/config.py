"""Runtime configuration model for recordstore.

This module owns environment variable parsing and validation.
Storage code consumes a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_JSON_INDENT,
    DEFAULT_RESERVED_FIELD_NAMES,
    DEFAULT_STORAGE_DIR_NAME,
    JSON_INDENT_ENV_VAR,
    STORAGE_DIR_ENV_VAR,
)
from core.errors import RecordStoreConfigError


@dataclass(frozen=True)
class StoreConfig:
    """Validated storage configuration.

    Attributes:
        storage_dir: Directory holding one JSON file per table.
        reserved_field_names: Field names ignored by record equality.
        json_indent: Indentation used when writing table files.
    """

    storage_dir: Path
    reserved_field_names: tuple[str, ...] = DEFAULT_RESERVED_FIELD_NAMES
    json_indent: int = DEFAULT_JSON_INDENT

    @classmethod
    def default(cls) -> "StoreConfig":
        """Build config rooted at the current working directory.

        Returns:
            Config pointing at ``<cwd>/databaseFiles``.
        """
        return cls(storage_dir=default_storage_dir())

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            RecordStoreConfigError: If environment values are invalid.
        """
        storage_dir_value = os.getenv(STORAGE_DIR_ENV_VAR)
        storage_dir = (
            Path(storage_dir_value).expanduser().resolve()
            if storage_dir_value
            else default_storage_dir()
        )
        json_indent = _parse_json_indent(os.getenv(JSON_INDENT_ENV_VAR, str(DEFAULT_JSON_INDENT)))
        return cls(storage_dir=storage_dir, json_indent=json_indent)


def default_storage_dir() -> Path:
    """Return the default storage directory under the working directory."""
    return Path.cwd() / DEFAULT_STORAGE_DIR_NAME


def _parse_json_indent(raw_value: str) -> int:
    """Parse the JSON indent environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed non-negative indent.

    Raises:
        RecordStoreConfigError: If value is not a non-negative integer.
    """
    try:
        indent = int(raw_value)
    except ValueError as error:
        raise RecordStoreConfigError(
            f"Invalid {JSON_INDENT_ENV_VAR} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {JSON_INDENT_ENV_VAR} to a numeric value."
        ) from error
    if indent < 0:
        raise RecordStoreConfigError(
            f"Invalid {JSON_INDENT_ENV_VAR} value: expected non-negative integer, got {indent}."
        )
    return indent

"""Core constants used across recordstore modules.

This module centralizes storage layout names and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_STORAGE_DIR_NAME = "databaseFiles"
MASTER_TABLE_NAME = "__master"
TABLE_FILE_EXTENSION = ".json"
TEMP_FILE_SUFFIX = ".tmp"
EMPTY_TABLE_CONTENT = "[]"
DEFAULT_JSON_INDENT = 2
EXTENSION_DATA_FIELD_NAME = "extension_data"
DEFAULT_RESERVED_FIELD_NAMES = (EXTENSION_DATA_FIELD_NAME,)
JSON_NAME_METADATA_KEY = "json_name"
STORAGE_DIR_ENV_VAR = "RECORDSTORE_STORAGE_DIR"
JSON_INDENT_ENV_VAR = "RECORDSTORE_JSON_INDENT"

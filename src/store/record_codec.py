"""JSON serialization for typed table records.

This module converts dataclass records to JSON-safe payloads and back.
Keys match case-insensitively on read, and fields holding a record
type are stored as fully qualified type names.
"""

from __future__ import annotations

from dataclasses import MISSING, Field, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
import importlib
import json
import types
from typing import Any, Mapping, Union, get_args, get_origin, get_type_hints

from core.constants import DEFAULT_JSON_INDENT, EXTENSION_DATA_FIELD_NAME, JSON_NAME_METADATA_KEY
from core.errors import RecordCodecError
from core.types import type_identifier


def encode_records(records: list[Any], indent: int = DEFAULT_JSON_INDENT) -> str:
    """Serialize records into JSON array text.

    Args:
        records: Dataclass records in table order.
        indent: JSON indentation width.

    Returns:
        JSON array text with trailing newline.

    Raises:
        RecordCodecError: If a record holds values JSON cannot encode.
    """
    payloads = [record_to_payload(record) for record in records]
    try:
        return json.dumps(payloads, indent=indent) + "\n"
    except (TypeError, ValueError) as error:
        raise RecordCodecError(f"Failed to encode records: {error}.") from error


def decode_records(text: str, record_type: type) -> list[Any]:
    """Deserialize JSON array text into records of one type.

    Args:
        text: Table file content.
        record_type: Dataclass to build for every array element.

    Returns:
        Decoded records in file order.

    Raises:
        RecordCodecError: If content is not a JSON array of objects.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise RecordCodecError(f"Failed to parse table content: {error.msg}.") from error
    if not isinstance(payload, list):
        raise RecordCodecError("Failed to parse table content: expected JSON array at top level.")
    records: list[Any] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise RecordCodecError(
                f"Failed to parse table content: expected JSON object at index {index}."
            )
        records.append(record_from_payload(item, record_type))
    return records


def record_to_payload(record: Any) -> dict[str, Any]:
    """Serialize one dataclass record into a JSON-safe dictionary.

    Args:
        record: Dataclass instance.

    Returns:
        Payload keyed by serialized field name.

    Raises:
        RecordCodecError: If record is not a dataclass instance.
    """
    if not is_dataclass(record) or isinstance(record, type):
        raise RecordCodecError(
            f"Cannot encode {type(record).__name__}: records must be dataclass instances."
        )
    payload: dict[str, Any] = {}
    extension_data: Mapping[str, Any] = {}
    modeled_keys: set[str] = set()
    for record_field in fields(record):
        value = getattr(record, record_field.name)
        if _is_extension_field(record_field):
            extension_data = value if isinstance(value, Mapping) else {}
            continue
        payload[_serialized_name(record_field)] = _encode_value(value)
        modeled_keys.update(_field_keys(record_field))
    for key, value in extension_data.items():
        # Keys folding onto a modeled field would shadow it on read.
        if _normalize_key(str(key)) not in modeled_keys:
            payload.setdefault(str(key), value)
    return payload


def record_from_payload(payload: Mapping[str, Any], record_type: type) -> Any:
    """Deserialize one payload into a dataclass record.

    Args:
        payload: Parsed JSON object.
        record_type: Target dataclass.

    Returns:
        Record instance.

    Raises:
        RecordCodecError: If a required field is missing or values are invalid.
    """
    if not is_dataclass(record_type):
        raise RecordCodecError(
            f"Cannot decode into {record_type!r}: record types must be dataclasses."
        )
    hints = _type_hints(record_type)
    remaining = {_normalize_key(str(key)): (str(key), value) for key, value in payload.items()}
    kwargs: dict[str, Any] = {}
    extension_field: Field[Any] | None = None
    for record_field in fields(record_type):
        if not record_field.init:
            continue
        if _is_extension_field(record_field):
            extension_field = record_field
            continue
        raw_value = _pop_field_value(remaining, record_field)
        if raw_value is MISSING:
            if not _has_default(record_field):
                raise RecordCodecError(
                    f"Missing required field '{_serialized_name(record_field)}' "
                    f"for {record_type.__name__}."
                )
            continue
        kwargs[record_field.name] = _decode_value(raw_value, hints.get(record_field.name, Any))
    if extension_field is not None:
        kwargs[extension_field.name] = {key: value for key, value in remaining.values()}
    try:
        return record_type(**kwargs)
    except TypeError as error:
        raise RecordCodecError(f"Failed to build {record_type.__name__}: {error}.") from error


def resolve_type_name(type_name: str) -> type:
    """Resolve a fully qualified type name back to its class.

    Args:
        type_name: ``<module>.<qualname>`` string.

    Returns:
        Resolved class.

    Raises:
        RecordCodecError: If no importable class carries that name.
    """
    parts = type_name.split(".")
    for split_index in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split_index])
        try:
            resolved: Any = importlib.import_module(module_name)
        except ImportError:
            continue
        for attribute in parts[split_index:]:
            resolved = getattr(resolved, attribute, None)
            if resolved is None:
                break
        if isinstance(resolved, type):
            return resolved
    raise RecordCodecError(
        f"Cannot resolve record type '{type_name}'. "
        "Ensure the module defining it is importable."
    )


def _encode_value(value: Any) -> Any:
    if isinstance(value, type):
        return type_identifier(value)
    if is_dataclass(value):
        return record_to_payload(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    if isinstance(value, Mapping):
        return {_encode_key(key): _encode_value(item) for key, item in value.items()}
    return value


def _encode_key(key: Any) -> str:
    if isinstance(key, Enum):
        return str(key.value)
    if isinstance(key, (datetime, date)):
        return key.isoformat()
    return str(key)


def _decode_value(value: Any, hint: Any) -> Any:
    if value is None or hint is Any:
        return value
    origin = get_origin(hint)
    if origin in (Union, types.UnionType):
        candidates = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(candidates) == 1:
            return _decode_value(value, candidates[0])
        return _decode_union(value, candidates)
    if hint is type or origin is type:
        return resolve_type_name(str(value))
    if origin in (list, tuple) and isinstance(value, list):
        return _decode_sequence(value, hint, origin)
    if origin is dict and isinstance(value, dict):
        args = get_args(hint)
        key_hint, item_hint = args if len(args) == 2 else (Any, Any)
        return {
            _decode_key(key, key_hint): _decode_value(item, item_hint)
            for key, item in value.items()
        }
    if isinstance(hint, type):
        return _decode_class_value(value, hint)
    return value


def _decode_key(key: str, hint: Any) -> Any:
    """Convert a JSON object key back into its declared key type."""
    if hint is Any or hint is str:
        return key
    if hint is bool:
        if key not in ("True", "False"):
            raise RecordCodecError(f"Invalid bool key {key!r}.")
        return key == "True"
    if hint in (int, float):
        try:
            return hint(key)
        except ValueError as error:
            raise RecordCodecError(f"Invalid {hint.__name__} key {key!r}: {error}.") from error
    if isinstance(hint, type) and issubclass(hint, Enum):
        for member in hint:
            if str(member.value) == key:
                return member
        raise RecordCodecError(f"Invalid {hint.__name__} key {key!r}.")
    return _decode_value(key, hint)


def _decode_union(value: Any, candidates: list[Any]) -> Any:
    """Decode a value against the first union member that accepts it.

    Dataclass members whose fields cover every payload key are tried
    before looser matches.

    Raises:
        RecordCodecError: If no member accepts the value.
    """
    if isinstance(value, dict):
        record_types = [candidate for candidate in candidates if is_dataclass(candidate)]
        ordered = sorted(record_types, key=lambda candidate: not _payload_fits(value, candidate))
        for candidate in ordered:
            try:
                return record_from_payload(value, candidate)
            except RecordCodecError:
                continue
    for candidate in candidates:
        if _is_plain_class(candidate):
            if isinstance(value, candidate) and not (candidate is int and isinstance(value, bool)):
                return value
    for candidate in candidates:
        if is_dataclass(candidate):
            continue
        try:
            return _decode_value(value, candidate)
        except RecordCodecError:
            continue
    raise RecordCodecError(
        f"Value {value!r} matches none of {', '.join(_hint_name(item) for item in candidates)}."
    )


def _payload_fits(payload: dict[str, Any], record_type: Any) -> bool:
    known_keys: set[str] = set()
    for record_field in fields(record_type):
        if _is_extension_field(record_field):
            return True
        known_keys.update(_field_keys(record_field))
    return all(_normalize_key(str(key)) in known_keys for key in payload)


def _hint_name(hint: Any) -> str:
    return getattr(hint, "__name__", str(hint))


def _decode_sequence(value: list[Any], hint: Any, origin: Any) -> Any:
    args = get_args(hint)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_decode_value(item, args[0]) for item in value)
        if len(args) == len(value):
            return tuple(_decode_value(item, arg) for item, arg in zip(value, args))
        return tuple(value)
    item_hint = args[0] if args else Any
    return [_decode_value(item, item_hint) for item in value]


def _decode_class_value(value: Any, hint: type) -> Any:
    if is_dataclass(hint) and isinstance(value, dict):
        return record_from_payload(value, hint)
    try:
        if issubclass(hint, Enum):
            return hint(value)
        if issubclass(hint, datetime) and isinstance(value, str):
            return datetime.fromisoformat(value)
        if issubclass(hint, date) and isinstance(value, str):
            return date.fromisoformat(value)
    except ValueError as error:
        raise RecordCodecError(f"Invalid {hint.__name__} value {value!r}: {error}.") from error
    if hint is tuple and isinstance(value, list):
        return tuple(value)
    return value


def _type_hints(record_type: type) -> dict[str, Any]:
    try:
        return get_type_hints(record_type)
    except (NameError, TypeError):
        return {}


def _pop_field_value(remaining: dict[str, tuple[str, Any]], record_field: Field[Any]) -> Any:
    for candidate in (_serialized_name(record_field), record_field.name):
        entry = remaining.pop(_normalize_key(candidate), None)
        if entry is not None:
            return entry[1]
    return MISSING


def _serialized_name(record_field: Field[Any]) -> str:
    return str(record_field.metadata.get(JSON_NAME_METADATA_KEY, record_field.name))


def _is_extension_field(record_field: Field[Any]) -> bool:
    return _normalize_key(record_field.name) == _normalize_key(EXTENSION_DATA_FIELD_NAME)


def _has_default(record_field: Field[Any]) -> bool:
    return record_field.default is not MISSING or record_field.default_factory is not MISSING


def _normalize_key(key: str) -> str:
    """Fold a field name for case and underscore insensitive matching."""
    return key.replace("_", "").lower()


def _is_plain_class(hint: Any) -> bool:
    return isinstance(hint, type) and get_origin(hint) is None and not is_dataclass(hint)


def _field_keys(record_field: Field[Any]) -> set[str]:
    """Return the folded keys a payload may use for one field."""
    return {_normalize_key(_serialized_name(record_field)), _normalize_key(record_field.name)}

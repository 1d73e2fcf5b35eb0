"""Unit tests for record JSON serialization."""

from __future__ import annotations

from datetime import date
import json

import pytest

from core.errors import RecordCodecError
from core.types import CollectionInformation
from store.record_codec import (
    decode_records,
    encode_records,
    record_from_payload,
    record_to_payload,
    resolve_type_name,
)
from tests.record_models import (
    Address,
    Contact,
    Customer,
    Holder,
    Note,
    Priority,
    Scores,
    Task,
)


def test_encode_empty_sequence_is_empty_array() -> None:
    """An empty table should serialize to an empty JSON array."""
    text = encode_records([])

    assert text == "[]\n"


def test_encode_keys_records_by_field_name() -> None:
    """Records should serialize to objects keyed by field name."""
    text = encode_records([Note(title="first", body="text")])

    assert json.loads(text) == [{"title": "first", "body": "text"}]


def test_decode_preserves_file_order() -> None:
    """Decoded records should keep array order."""
    text = encode_records([Note(title="a"), Note(title="b"), Note(title="c")])

    records = decode_records(text, Note)

    assert [record.title for record in records] == ["a", "b", "c"]


def test_decode_matches_keys_case_insensitively() -> None:
    """Field names should match regardless of case on read."""
    records = decode_records('[{"TITLE": "loud", "Body": "text"}]', Note)

    assert records == [Note(title="loud", body="text")]


def test_decode_uses_defaults_for_missing_optional_fields() -> None:
    """Missing fields with defaults should fall back to the default."""
    records = decode_records('[{"title": "only"}]', Note)

    assert records[0].body == ""


def test_decode_raises_for_missing_required_field() -> None:
    """A required field without a key should fail decoding."""
    with pytest.raises(RecordCodecError):
        decode_records('[{"body": "orphan"}]', Note)


def test_decode_raises_for_non_array_content() -> None:
    """Top-level JSON must be an array."""
    with pytest.raises(RecordCodecError):
        decode_records('{"title": "x"}', Note)


def test_decode_raises_for_invalid_json() -> None:
    """Broken JSON should surface as a codec error."""
    with pytest.raises(RecordCodecError):
        decode_records("[{", Note)


def test_decode_raises_for_non_object_element() -> None:
    """Every array element must be a JSON object."""
    with pytest.raises(RecordCodecError):
        decode_records('["title"]', Note)


def test_type_reference_is_stored_as_qualified_name() -> None:
    """Fields holding a type should serialize to its qualified name."""
    payload = record_to_payload(CollectionInformation(collection_type=Note, collection_name="notes"))

    assert payload == {"CollectionType": "tests.record_models.Note", "CollectionName": "notes"}


def test_type_reference_decodes_to_same_class() -> None:
    """Stored qualified names should decode back to the class."""
    payload = {"collectionType": "tests.record_models.Note", "collection_name": "notes"}

    information = record_from_payload(payload, CollectionInformation)

    assert information.collection_type is Note and information.collection_name == "notes"


def test_resolve_type_name_raises_for_unknown_type() -> None:
    """Unresolvable type names should fail with a codec error."""
    with pytest.raises(RecordCodecError):
        resolve_type_name("tests.record_models.Missing")


def test_nested_dataclass_roundtrip() -> None:
    """Nested dataclass fields should decode into their declared type."""
    customer = Customer(name="Ada", address=Address(street="Main 1", city="Oslo"))

    records = decode_records(encode_records([customer]), Customer)

    assert records == [customer]


def test_enum_and_date_roundtrip() -> None:
    """Enum and date fields should decode back into typed values."""
    task = Task(title="ship", priority=Priority.HIGH, due=date(2024, 1, 2))

    records = decode_records(encode_records([task]), Task)

    assert records == [task]


def test_unknown_keys_are_kept_in_extension_data() -> None:
    """Keys not modeled by the record should land in extension data."""
    records = decode_records('[{"name": "Bo", "nickname": "bobo"}]', Contact)

    assert records[0].extension_data == {"nickname": "bobo"}


def test_extension_data_is_written_back() -> None:
    """Extension data should be flattened back into the stored object."""
    contact = Contact(name="Bo", extension_data={"nickname": "bobo"})

    payload = record_to_payload(contact)

    assert payload["nickname"] == "bobo" and "extension_data" not in payload


def test_unknown_keys_are_ignored_without_extension_field() -> None:
    """Records without extension data should tolerate unknown keys."""
    records = decode_records('[{"title": "t", "color": "red"}]', Note)

    assert records == [Note(title="t")]


def test_encode_rejects_non_dataclass_records() -> None:
    """Only dataclass instances can be stored."""
    with pytest.raises(RecordCodecError):
        encode_records([{"title": "raw"}])


def test_int_dict_keys_roundtrip() -> None:
    """Dict keys should decode back into their declared key type."""
    scores = Scores(name="a", by_round={1: 10, 2: 20})

    records = decode_records(encode_records([scores]), Scores)

    assert records == [scores]


def test_invalid_int_dict_key_raises() -> None:
    """Keys that cannot convert to the declared type should fail decoding."""
    with pytest.raises(RecordCodecError):
        decode_records('[{"name": "a", "by_round": {"first": 1}}]', Scores)


def test_union_member_decodes_into_matching_dataclass() -> None:
    """A union field should decode into the member whose fields fit."""
    holders = [
        Holder(name="x", item=Address(street="s", city="c")),
        Holder(name="y", item=Note(title="t", body="b")),
    ]

    records = decode_records(encode_records(holders), Holder)

    assert records == holders


def test_union_without_matching_member_raises() -> None:
    """A payload no union member accepts should fail decoding."""
    with pytest.raises(RecordCodecError):
        decode_records('[{"name": "x", "item": {"color": "red"}}]', Holder)


def test_extension_key_shadowing_field_is_not_written() -> None:
    """Extension keys folding onto a field name must not override it."""
    contact = Contact(name="Bo", extension_data={"Name": "shadow", "nickname": "bobo"})

    records = decode_records(encode_records([contact]), Contact)

    assert records[0].name == "Bo" and records[0].extension_data == {"nickname": "bobo"}

# tests/test_wire_codec.py

from __future__ import annotations

import pytest

from todo_sync.tasks.task_models import Task, TaskUpdate
from todo_sync.tasks.wire_codec import (
    WireDocument,
    decode,
    decode_document,
    decode_update_response,
    encode,
    encode_partial,
)

DOC_NAME = "projects/p/databases/(default)/documents/TodoTable/abc123"


def test_encode_wraps_each_field_in_its_type_tag() -> None:
    task = Task(
        text="buy milk",
        completed=True,
        created_at="2024-05-01T09:00:00.000Z",
        updated_at="2024-05-01T09:10:00.000Z",
    )

    assert encode(task).to_json() == {
        "fields": {
            "text": {"stringValue": "buy milk"},
            "completed": {"booleanValue": True},
            "createdAt": {"stringValue": "2024-05-01T09:00:00.000Z"},
            "updatedAt": {"stringValue": "2024-05-01T09:10:00.000Z"},
        }
    }


@pytest.mark.parametrize("completed", [False, True])
def test_decode_encode_round_trip_ignores_id(completed: bool) -> None:
    task = Task(
        id="store-assigned",
        text="water plants",
        completed=completed,
        created_at="2024-05-01T09:00:00.000Z",
        updated_at="2024-05-02T09:00:00.000Z",
    )

    decoded = decode(encode(task))

    assert decoded is not None
    assert decoded.id is None
    assert decoded.text == task.text
    assert decoded.completed == task.completed
    assert decoded.created_at == task.created_at
    assert decoded.updated_at == task.updated_at


def test_decode_takes_id_from_last_segment_of_resource_name() -> None:
    doc = decode_document({"name": DOC_NAME, "fields": {"text": {"stringValue": "x"}}})

    task = decode(doc)

    assert task is not None
    assert task.id == "abc123"


def test_decode_applies_defaults_for_missing_optional_fields() -> None:
    doc = decode_document({"name": DOC_NAME, "fields": {"text": {"stringValue": "x"}}})

    task = decode(doc)

    assert task == Task(id="abc123", text="x", completed=False, created_at=None, updated_at=None)


def test_decode_ignores_mistyped_optional_fields() -> None:
    doc = decode_document(
        {
            "name": DOC_NAME,
            "fields": {
                "text": {"stringValue": "x"},
                "completed": {"stringValue": "true"},
                "createdAt": {"integerValue": "12"},
            },
        }
    )

    task = decode(doc)

    assert task is not None
    assert task.completed is False
    assert task.created_at is None


@pytest.mark.parametrize(
    "fields",
    [
        {},
        {"completed": {"booleanValue": True}},
        {"text": {"booleanValue": True}},
        {"text": {"nullValue": None}},
        {"text": {"stringValue": "   "}},
    ],
)
def test_decode_skips_documents_without_usable_text(fields: dict) -> None:
    doc = decode_document({"name": DOC_NAME, "fields": fields})

    assert doc is not None
    assert decode(doc) is None


@pytest.mark.parametrize("raw", [None, "doc", [], {"name": 5}, {"name": DOC_NAME, "fields": []}])
def test_decode_document_rejects_structurally_invalid_input(raw) -> None:
    assert decode_document(raw) is None


def test_encode_partial_text_only() -> None:
    doc = encode_partial(TaskUpdate(text="x", updated_at="2024-05-01T10:00:00.000Z"))

    assert list(doc.fields) == ["text", "updatedAt"]


def test_encode_partial_keeps_false_completed() -> None:
    doc = encode_partial(TaskUpdate(completed=False, updated_at="2024-05-01T10:00:00.000Z"))

    assert doc.to_json()["fields"] == {
        "completed": {"booleanValue": False},
        "updatedAt": {"stringValue": "2024-05-01T10:00:00.000Z"},
    }


def test_decode_update_response_falls_back_to_empty_values() -> None:
    assert decode_update_response("abc", WireDocument()) == Task(
        id="abc", text="", completed=False, created_at=None, updated_at=""
    )
    assert decode_update_response("abc", None).text == ""

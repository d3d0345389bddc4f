# src/todo_sync/tasks/wire_codec.py

"""
Task <-> document store wire format.

The store wraps every field value in a type tag:

    {"name": "projects/p/databases/(default)/documents/TodoTable/abc123",
     "fields": {"text": {"stringValue": "buy milk"},
                "completed": {"booleanValue": false}}}

Decoding never raises. Missing or mistyped optional fields resolve through an
explicit default table; a document without a usable `text` decodes to None and
is skipped by callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .task_models import Task, TaskUpdate

TEXT = "text"
COMPLETED = "completed"
CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"


class ValueKind(StrEnum):
    STRING = "stringValue"
    BOOLEAN = "booleanValue"


@dataclass(slots=True, frozen=True)
class TypedValue:
    """
    One tagged field value.

    `kind` is the raw tag from the wire; tags other than ValueKind members
    (integerValue, nullValue, ...) are kept as plain strings and never match a field.
    """

    kind: str
    value: Any

    @classmethod
    def string(cls, value: str) -> TypedValue:
        return cls(ValueKind.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> TypedValue:
        return cls(ValueKind.BOOLEAN, bool(value))

    def to_json(self) -> dict[str, Any]:
        return {str(self.kind): self.value}

    @classmethod
    def from_json(cls, raw: Any) -> TypedValue | None:
        if not isinstance(raw, Mapping) or len(raw) != 1:
            return None
        ((kind, value),) = raw.items()
        return cls(str(kind), value)


@dataclass(slots=True, frozen=True)
class WireDocument:
    fields: dict[str, TypedValue] = field(default_factory=dict)
    name: str | None = None

    @property
    def doc_id(self) -> str | None:
        if not self.name:
            return None
        return self.name.rstrip("/").split("/")[-1] or None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"fields": {k: v.to_json() for k, v in self.fields.items()}}
        if self.name is not None:
            out["name"] = self.name
        return out


@dataclass(slots=True, frozen=True)
class FieldSpec:
    kind: ValueKind
    default: Any = None
    required: bool = False


# Default table for documents listed from the store.
TASK_FIELDS: dict[str, FieldSpec] = {
    TEXT: FieldSpec(ValueKind.STRING, required=True),
    COMPLETED: FieldSpec(ValueKind.BOOLEAN, default=False),
    CREATED_AT: FieldSpec(ValueKind.STRING, default=None),
    UPDATED_AT: FieldSpec(ValueKind.STRING, default=None),
}

# Default table for the document echoed back by an update.
UPDATE_RESPONSE_FIELDS: dict[str, FieldSpec] = {
    TEXT: FieldSpec(ValueKind.STRING, default=""),
    COMPLETED: FieldSpec(ValueKind.BOOLEAN, default=False),
    CREATED_AT: FieldSpec(ValueKind.STRING, default=None),
    UPDATED_AT: FieldSpec(ValueKind.STRING, default=""),
}


def _typed_ok(tv: TypedValue | None, kind: ValueKind) -> bool:
    if tv is None or tv.kind != kind:
        return False
    if kind == ValueKind.STRING:
        return isinstance(tv.value, str)
    return isinstance(tv.value, bool)


def resolve_field(doc: WireDocument, name: str, table: Mapping[str, FieldSpec]) -> Any:
    spec = table[name]
    tv = doc.fields.get(name)
    if _typed_ok(tv, spec.kind):
        return tv.value  # type: ignore[union-attr]
    return spec.default


def decode_document(raw: Any) -> WireDocument | None:
    """Parse raw JSON into a WireDocument; None if it is not shaped like one."""
    if not isinstance(raw, Mapping):
        return None

    name = raw.get("name")
    if name is not None and not isinstance(name, str):
        return None

    raw_fields = raw.get("fields")
    if raw_fields is None:
        raw_fields = {}
    if not isinstance(raw_fields, Mapping):
        return None

    fields: dict[str, TypedValue] = {}
    for key, raw_value in raw_fields.items():
        tv = TypedValue.from_json(raw_value)
        if tv is not None:
            fields[str(key)] = tv
    return WireDocument(fields=fields, name=name)


def encode(task: Task) -> WireDocument:
    fields: dict[str, TypedValue] = {
        TEXT: TypedValue.string(task.text),
        COMPLETED: TypedValue.boolean(task.completed),
    }
    if task.created_at is not None:
        fields[CREATED_AT] = TypedValue.string(task.created_at)
    if task.updated_at is not None:
        fields[UPDATED_AT] = TypedValue.string(task.updated_at)
    return WireDocument(fields=fields)


def decode(doc: WireDocument) -> Task | None:
    text = doc.fields.get(TEXT)
    if not _typed_ok(text, ValueKind.STRING) or not text.value.strip():  # type: ignore[union-attr]
        return None

    return Task(
        id=doc.doc_id,
        text=resolve_field(doc, TEXT, TASK_FIELDS),
        completed=resolve_field(doc, COMPLETED, TASK_FIELDS),
        created_at=resolve_field(doc, CREATED_AT, TASK_FIELDS),
        updated_at=resolve_field(doc, UPDATED_AT, TASK_FIELDS),
    )


def encode_partial(updates: TaskUpdate) -> WireDocument:
    fields: dict[str, TypedValue] = {}
    if updates.text is not None:
        fields[TEXT] = TypedValue.string(updates.text)
    if updates.completed is not None:
        fields[COMPLETED] = TypedValue.boolean(updates.completed)
    fields[UPDATED_AT] = TypedValue.string(updates.updated_at)
    return WireDocument(fields=fields)


def decode_update_response(task_id: str, doc: WireDocument | None) -> Task:
    if doc is None:
        doc = WireDocument()
    return Task(
        id=task_id,
        text=resolve_field(doc, TEXT, UPDATE_RESPONSE_FIELDS),
        completed=resolve_field(doc, COMPLETED, UPDATE_RESPONSE_FIELDS),
        created_at=resolve_field(doc, CREATED_AT, UPDATE_RESPONSE_FIELDS),
        updated_at=resolve_field(doc, UPDATED_AT, UPDATE_RESPONSE_FIELDS),
    )

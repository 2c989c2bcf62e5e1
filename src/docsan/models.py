"""Data models for docsan."""

import json
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Embedded JSON slots
# =============================================================================


class JSONShape(str, Enum):
    """Top-level shape of an embedded JSON payload."""

    OBJECT = "object"
    ARRAY = "array"

    @property
    def default(self) -> str:
        """Literal JSON used when the payload is missing or invalid."""
        return "{}" if self is JSONShape.OBJECT else "[]"


@dataclass(frozen=True)
class Slot:
    """A well-known ``<script id=...>`` carrying a JSON payload.

    Attributes:
        script_id: Value of the script's ``id`` attribute.
        field: DocumentRecord field receiving the payload.
        shape: Expected shape, which decides the default.
    """

    script_id: str
    field: str
    shape: JSONShape


SLOTS: tuple[Slot, ...] = (
    Slot("outline", "outline", JSONShape.OBJECT),
    Slot("sumtab", "sumtab", JSONShape.OBJECT),
    Slot("links", "links", JSONShape.OBJECT),
    Slot("references", "seealso", JSONShape.OBJECT),
    Slot("tables", "tables", JSONShape.ARRAY),
    Slot("lookup", "lookup", JSONShape.ARRAY),
    Slot("specialcopyrights", "specialcopyrights", JSONShape.OBJECT),
)

# Table of contents script, dropped like the slots but not exported
TOC_SCRIPT_ID = "script_toc"

SLOT_SCRIPT_IDS: tuple[str, ...] = tuple(slot.script_id for slot in SLOTS)

SLOT_FIELDS: tuple[str, ...] = tuple(slot.field for slot in SLOTS)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def validate_json_text(text: str) -> str:
    """Check that text holds exactly one standard JSON value.

    Python's json module accepts NaN, Infinity and -Infinity; they are
    refused here.

    Returns:
        The text without surrounding whitespace.

    Raises:
        ValueError: If the text is not valid JSON (``json.JSONDecodeError``
            is a subclass).
    """
    json.loads(text, parse_constant=_reject_constant)
    return text.strip()


# =============================================================================
# Output record
# =============================================================================


class DocumentRecord(BaseModel):
    """A sanitized document, ready for JSON output.

    The slot fields (``outline`` ... ``specialcopyrights``) hold raw JSON
    text taken from the document's embedded scripts. ``to_json`` writes that
    text into the output unchanged, so number precision and duplicate keys
    survive; use ``slot_value`` for the decoded value. ``doc_id`` and
    ``warnings`` are for the caller and logs; they are not part of the JSON
    output.
    """

    model_config = ConfigDict(extra="forbid")

    generated: str = ""
    title: str = ""
    outline: str = JSONShape.OBJECT.default
    sumtab: str = JSONShape.OBJECT.default
    links: str = JSONShape.OBJECT.default
    seealso: str = JSONShape.OBJECT.default
    tables: str = JSONShape.ARRAY.default
    lookup: str = JSONShape.ARRAY.default
    specialcopyrights: str = JSONShape.OBJECT.default
    metas: list[dict[str, str]] = Field(default_factory=list)
    scripts: list[dict[str, str]] = Field(default_factory=list)
    body: str = ""

    doc_id: str = Field(default="unknown", exclude=True)
    warnings: list[str] = Field(default_factory=list, exclude=True)

    @field_validator(*SLOT_FIELDS)
    @classmethod
    def validate_slot(cls, v: str) -> str:
        """Ensure a slot holds one standard JSON value."""
        return validate_json_text(v)

    def slot_value(self, field: str) -> Any:
        """Decode the JSON text of a slot field (e.g. "outline")."""
        if field not in SLOT_FIELDS:
            raise KeyError(field)
        return json.loads(getattr(self, field))

    def to_json(self, *, pretty: bool = False) -> str:
        """Serialise the record to a JSON document.

        Slot fields are dumped as string markers first and the markers are
        then replaced by the raw slot text.

        Args:
            pretty: Indent with two spaces instead of a single line.

        Returns:
            JSON string.
        """
        token = uuid.uuid4().hex
        markers = {field: f"@docsan-slot-{field}-{token}@" for field in SLOT_FIELDS}
        stub = self.model_copy(update=markers)
        text = stub.model_dump_json(indent=2 if pretty else None)
        for field, marker in markers.items():
            text = text.replace(json.dumps(marker), getattr(self, field), 1)
        return text

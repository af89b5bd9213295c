from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ItemKind = Literal["course", "lesson", "section"]
DropSkipReason = Literal["invalid_payload", "kind_mismatch", "self_drop", "not_found"]

ITEM_KINDS: tuple[str, ...] = ("course", "lesson", "section")


@dataclass
class ParsedChoice:
    id: int
    text: str
    is_correct: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "isCorrect": self.is_correct}


@dataclass
class ParsedQuestion:
    id: int
    title: str
    kind: str = "mcq"
    choices: list[ParsedChoice] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "choices": [choice.to_dict() for choice in self.choices],
        }


@dataclass
class OrderedItem:
    id: str | int
    order: int
    title: str | None = None
    parent_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DragPayload:
    kind: ItemKind
    id: str | int


@dataclass
class ReorderOutcome:
    applied: bool
    items: list[OrderedItem]
    reason: DropSkipReason | None = None
    message: str | None = None

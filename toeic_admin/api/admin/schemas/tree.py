from typing import Literal

from pydantic import BaseModel, Field

ItemKind = Literal["course", "lesson", "section"]


class OrderedItemResponse(BaseModel):
    id: str | int | None
    title: str | None = None
    order: int


class SiblingListResponse(BaseModel):
    parentId: str
    kind: ItemKind
    items: list[OrderedItemResponse]


class DropRequest(BaseModel):
    payload: str | None = None
    targetId: str | int | None = None


class DropResponse(BaseModel):
    applied: bool
    reason: str | None = None
    message: str | None = None
    items: list[OrderedItemResponse] = Field(default_factory=list)

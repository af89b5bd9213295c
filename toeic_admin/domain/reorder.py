"""Drag-and-drop reordering of same-parent sibling lists."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any, TypeVar

from toeic_admin.domain.models import ITEM_KINDS, DragPayload, OrderedItem

T = TypeVar("T")


def item_id(item: Any) -> Any:
    if isinstance(item, Mapping):
        return item.get("id")
    return item.id


def _index_of(items: Sequence[T], wanted: Any, key: Callable[[T], Any]) -> int | None:
    for idx, item in enumerate(items):
        if key(item) == wanted:
            return idx
    return None


def reorder_siblings(
    items: Sequence[T],
    dragged_id: Any,
    target_id: Any = None,
    *,
    key: Callable[[T], Any] = item_id,
) -> list[T]:
    """Move ``dragged_id`` in front of ``target_id`` (or to the end when ``None``).

    The target position is looked up after the dragged item has been taken
    out, so dragging down the list lands one slot before the target:
    ``[a, b, c, d]`` with ``a`` dropped on ``c`` gives ``[b, a, c, d]``.
    A target that is no longer present resolves to index 0. An unknown
    ``dragged_id`` returns the list unchanged.
    """
    reordered = list(items)
    from_index = _index_of(reordered, dragged_id, key)
    if from_index is None:
        return reordered

    moved = reordered.pop(from_index)
    if target_id is None:
        to_index = len(reordered)
    else:
        found = _index_of(reordered, target_id, key)
        to_index = found if found is not None else 0

    reordered.insert(to_index, moved)
    return reordered


def sort_by_order(items: Sequence[OrderedItem]) -> list[OrderedItem]:
    return sorted(items, key=lambda item: item.order)


def assign_orders(items: Sequence[OrderedItem], *, start: int = 1) -> list[OrderedItem]:
    """Return copies numbered contiguously from ``start`` in list order."""
    return [replace(item, order=start + idx) for idx, item in enumerate(items)]


def build_order_entries(kind: str, items: Sequence[Any], *, start: int) -> list[dict[str, Any]]:
    id_field = f"{kind}_id"
    return [{id_field: item_id(item), "order": start + idx} for idx, item in enumerate(items)]


def decode_drag_payload(raw: str | bytes | None) -> DragPayload | None:
    """Decode a drag-transfer JSON string; anything malformed yields ``None``."""
    if not raw:
        return None

    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None

    if not isinstance(data, dict):
        return None

    kind = data.get("kind")
    dragged = data.get("id")
    if kind not in ITEM_KINDS or dragged is None or isinstance(dragged, (bool, dict, list)):
        return None

    return DragPayload(kind=kind, id=dragged)


def accepts_drop(zone_kind: str, payload: DragPayload | None) -> bool:
    return payload is not None and payload.kind == zone_kind

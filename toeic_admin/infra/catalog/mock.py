from __future__ import annotations

import copy
import threading
from typing import Any

from toeic_admin.domain.models import OrderedItem
from toeic_admin.domain.reorder import sort_by_order
from toeic_admin.infra.ports.catalog import ORDER_START_BY_KIND, CatalogError, CatalogPort

_SEED: dict[tuple[str, str], list[tuple[str, str]]] = {
    ("course", "rm_toeic_650"): [
        ("c_listening", "TOEIC Listening Foundations"),
        ("c_reading", "TOEIC Reading Strategies"),
        ("c_vocab", "TOEIC Vocabulary Builder"),
    ],
    ("lesson", "c_listening"): [
        ("l_part1", "Part 1: Photographs"),
        ("l_part2", "Part 2: Question-Response"),
        ("l_part3", "Part 3: Conversations"),
    ],
    ("lesson", "c_reading"): [
        ("l_part5", "Part 5: Incomplete Sentences"),
        ("l_part6", "Part 6: Text Completion"),
        ("l_part7", "Part 7: Reading Comprehension"),
    ],
    ("section", "l_part1"): [
        ("s_part1_video", "Describing people and objects"),
        ("s_part1_audio", "Listening drill"),
        ("s_part1_quiz", "Photographs quiz"),
        ("s_part1_review", "Common traps"),
    ],
    ("section", "l_part5"): [
        ("s_part5_article", "Word forms"),
        ("s_part5_quiz", "Grammar quiz"),
    ],
}

_PARENT_LABEL = {"course": "Roadmap", "lesson": "Course", "section": "Lesson"}


class MockCatalog(CatalogPort):
    """In-memory catalog used for local development and tests."""

    def __init__(self, seed: dict[tuple[str, str], list[tuple[str, str]]] | None = None):
        self._lock = threading.Lock()
        self._children: dict[tuple[str, str], list[OrderedItem]] = {}
        for (kind, parent_id), rows in (seed if seed is not None else _SEED).items():
            start = ORDER_START_BY_KIND[kind]
            self._children[(kind, parent_id)] = [
                OrderedItem(id=item_id, order=start + idx, title=title, parent_id=parent_id)
                for idx, (item_id, title) in enumerate(rows)
            ]

    def _list(self, kind: str, parent_id: str) -> list[OrderedItem]:
        with self._lock:
            items = self._children.get((kind, parent_id))
            if items is None:
                raise CatalogError(f"{_PARENT_LABEL[kind]} not found", status_code=404)
            return sort_by_order(copy.deepcopy(items))

    def _reorder(self, kind: str, parent_id: str, entries: list[dict[str, Any]]) -> dict[str, Any]:
        id_field = f"{kind}_id"
        with self._lock:
            items = self._children.get((kind, parent_id))
            if items is None:
                raise CatalogError(f"{_PARENT_LABEL[kind]} not found", status_code=404)

            orders = {entry.get(id_field): entry.get("order") for entry in entries}
            if set(orders) != {item.id for item in items}:
                raise CatalogError(f"{id_field} list does not match the current {kind}s", status_code=400)
            if any(not isinstance(value, int) for value in orders.values()):
                raise CatalogError("order must be an integer", status_code=400)

            for item in items:
                item.order = orders[item.id]
            return {"success": True, "message": f"{kind.capitalize()} order updated"}

    def list_roadmap_courses(self, roadmap_id: str) -> list[OrderedItem]:
        return self._list("course", roadmap_id)

    def list_lessons(self, course_id: str) -> list[OrderedItem]:
        return self._list("lesson", course_id)

    def list_sections(self, lesson_id: str) -> list[OrderedItem]:
        return self._list("section", lesson_id)

    def reorder_courses(self, roadmap_id: str, course_orders: list[dict[str, Any]]) -> dict[str, Any]:
        return self._reorder("course", roadmap_id, course_orders)

    def reorder_lessons(self, course_id: str, lesson_orders: list[dict[str, Any]]) -> dict[str, Any]:
        return self._reorder("lesson", course_id, lesson_orders)

    def reorder_sections(self, lesson_id: str, section_orders: list[dict[str, Any]]) -> dict[str, Any]:
        return self._reorder("section", lesson_id, section_orders)

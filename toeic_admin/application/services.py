from __future__ import annotations

import copy
import logging
import time
from typing import Any

from toeic_admin.application.state import PersistentCollection
from toeic_admin.domain.bulk_parser import parse_bulk_questions
from toeic_admin.domain.models import OrderedItem, ReorderOutcome
from toeic_admin.domain.reorder import accepts_drop, decode_drag_payload, item_id, reorder_siblings
from toeic_admin.utils.ids import new_public_id

logger = logging.getLogger(__name__)

_TEST_STATUSES = {"draft", "published", "archived"}


def _renumber(sections: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{**section, "order": idx} for idx, section in enumerate(sections, start=1)]


def _next_numeric_id(sections: list[dict[str, Any]]) -> int:
    used = [section["id"] for section in sections if isinstance(section.get("id"), int)]
    for section in sections:
        used.extend(choice["id"] for choice in section.get("choices") or [] if isinstance(choice.get("id"), int))
    now_ms = int(time.time() * 1000)
    return max([now_ms, *(value + 1 for value in used)])


def _sorted_sections(test: dict[str, Any]) -> list[dict[str, Any]]:
    sections = [section for section in test.get("sections") or [] if isinstance(section, dict)]
    return sorted(sections, key=lambda section: section.get("order") or 0)


def _as_ordered_items(test: dict[str, Any]) -> list[OrderedItem]:
    return [
        OrderedItem(
            id=section.get("id"),
            order=section.get("order") or 0,
            title=section.get("title"),
            parent_id=str(test.get("id")),
        )
        for section in _sorted_sections(test)
    ]


class TestDraftService:
    """Test drafts edited locally before they are published."""

    def __init__(self, *, drafts: PersistentCollection):
        self.drafts = drafts

    def _find(self, tests: list[dict[str, Any]], test_id: str) -> dict[str, Any] | None:
        return next((test for test in tests if str(test.get("id")) == test_id), None)

    def _replace(self, test_id: str, mutate) -> dict[str, Any] | None:
        updated: dict[str, Any] | None = None

        def apply(tests: list[dict[str, Any]]) -> list[dict[str, Any]]:
            nonlocal updated
            current = self._find(tests, test_id)
            if current is None:
                return tests
            updated = mutate(copy.deepcopy(current))
            return [updated if str(test.get("id")) == test_id else test for test in tests]

        self.drafts.update(apply)
        return updated

    def list_tests(self, *, refresh: bool = False) -> list[dict[str, Any]]:
        if refresh:
            return self.drafts.reload()
        return self.drafts.get()

    def get_test(self, test_id: str) -> dict[str, Any] | None:
        test = self._find(self.drafts.get(), test_id)
        if test is not None:
            test["sections"] = _sorted_sections(test)
        return test

    def create_test(self, *, title: str, description: str = "", status: str = "draft") -> dict[str, Any]:
        title = title.strip()
        if not title:
            raise ValueError("Test title is required")
        if status not in _TEST_STATUSES:
            raise ValueError(f"Unsupported test status: {status}")

        test = {
            "id": new_public_id("test_"),
            "title": title,
            "description": description.strip(),
            "status": status,
            "questions": 0,
            "sections": [],
        }
        self.drafts.update(lambda tests: [*tests, test])
        logger.info("Created test draft %s", test["id"])
        return test

    def delete_test(self, test_id: str) -> bool:
        removed = False

        def apply(tests: list[dict[str, Any]]) -> list[dict[str, Any]]:
            nonlocal removed
            kept = [test for test in tests if str(test.get("id")) != test_id]
            removed = len(kept) != len(tests)
            return kept

        self.drafts.update(apply)
        return removed

    def bulk_import(self, test_id: str, raw_text: str, *, join_choice_lines: bool = False) -> tuple[dict[str, Any], int] | None:
        """Parse pasted text and append the questions as new sections.

        Returns ``None`` for an unknown test; raises ``ValueError`` when the
        text holds no question lines.
        """
        if self.get_test(test_id) is None:
            return None
        if not raw_text or not raw_text.strip():
            raise ValueError("No questions found in the pasted text")

        added = 0

        def mutate(test: dict[str, Any]) -> dict[str, Any]:
            nonlocal added
            sections = _sorted_sections(test)
            parsed = parse_bulk_questions(
                raw_text,
                base_id=_next_numeric_id(sections),
                join_choice_lines=join_choice_lines,
            )
            added = len(parsed)
            sections = _renumber([*sections, *(question.to_dict() for question in parsed)])
            return {**test, "sections": sections, "questions": len(sections)}

        updated = self._replace(test_id, mutate)
        if updated is None:
            return None
        logger.info("Imported %d questions into test %s", added, test_id)
        return updated, added

    def remove_section(self, test_id: str, section_id: str | int) -> dict[str, Any] | None:
        def mutate(test: dict[str, Any]) -> dict[str, Any]:
            sections = [section for section in _sorted_sections(test) if section.get("id") != section_id]
            sections = _renumber(sections)
            return {**test, "sections": sections, "questions": len(sections)}

        return self._replace(test_id, mutate)

    def drop_section(
        self,
        test_id: str,
        *,
        raw_payload: str | None,
        target_id: str | int | None,
    ) -> ReorderOutcome | None:
        """Reorder a draft's sections locally; nothing is sent to the catalog."""
        test = self.get_test(test_id)
        if test is None:
            return None

        payload = decode_drag_payload(raw_payload)
        if payload is None:
            return ReorderOutcome(applied=False, items=_as_ordered_items(test), reason="invalid_payload")
        if not accepts_drop("section", payload):
            return ReorderOutcome(applied=False, items=_as_ordered_items(test), reason="kind_mismatch")
        if not any(item_id(section) == payload.id for section in test["sections"]):
            return ReorderOutcome(applied=False, items=_as_ordered_items(test), reason="not_found")

        def mutate(current: dict[str, Any]) -> dict[str, Any]:
            sections = reorder_siblings(_sorted_sections(current), payload.id, target_id)
            return {**current, "sections": _renumber(sections)}

        updated = self._replace(test_id, mutate)
        if updated is None:
            return None
        return ReorderOutcome(applied=True, items=_as_ordered_items(updated), message="Section order updated")


class QuestionBankService:
    """The question bank kept as one JSON list, with import and export."""

    def __init__(self, *, bank: PersistentCollection):
        self.bank = bank

    def export_questions(self) -> list[dict[str, Any]]:
        return self.bank.get()

    def import_questions(self, questions: list[dict[str, Any]], *, replace: bool = True) -> int:
        if not isinstance(questions, list) or not all(isinstance(item, dict) for item in questions):
            raise ValueError("Question bank import must be a JSON list of objects")

        if replace:
            self.bank.set(questions)
        else:
            self.bank.update(lambda current: [*current, *questions])
        logger.info("Imported %d question bank entries (replace=%s)", len(questions), replace)
        return len(self.bank.get())

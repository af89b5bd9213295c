from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from toeic_admin.domain.models import OrderedItem

# First ``order`` value each reorder endpoint expects.
ORDER_START_BY_KIND: dict[str, int] = {
    "course": 0,
    "lesson": 1,
    "section": 1,
}


class CatalogError(RuntimeError):
    """The catalog backend rejected a request or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CatalogPort(ABC):
    @abstractmethod
    def list_roadmap_courses(self, roadmap_id: str) -> list[OrderedItem]:
        """Return the courses of a roadmap sorted by ``order``."""

    @abstractmethod
    def list_lessons(self, course_id: str) -> list[OrderedItem]:
        """Return the lessons of a course sorted by ``order``."""

    @abstractmethod
    def list_sections(self, lesson_id: str) -> list[OrderedItem]:
        """Return the sections of a lesson sorted by ``order``."""

    @abstractmethod
    def reorder_courses(self, roadmap_id: str, course_orders: list[dict[str, Any]]) -> dict[str, Any]:
        """PATCH /admin/roadmaps/{id}/reorder-courses."""

    @abstractmethod
    def reorder_lessons(self, course_id: str, lesson_orders: list[dict[str, Any]]) -> dict[str, Any]:
        """PATCH /admin/courses/{courseId}/reorder-lessons."""

    @abstractmethod
    def reorder_sections(self, lesson_id: str, section_orders: list[dict[str, Any]]) -> dict[str, Any]:
        """PATCH /admin/lessons/{lessonId}/reorder-sections."""

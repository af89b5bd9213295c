from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from toeic_admin.application.state import ObservableStore
from toeic_admin.domain.models import OrderedItem, ReorderOutcome
from toeic_admin.domain.reorder import (
    accepts_drop,
    assign_orders,
    build_order_entries,
    decode_drag_payload,
    reorder_siblings,
    sort_by_order,
)
from toeic_admin.infra.ports.catalog import ORDER_START_BY_KIND, CatalogPort

logger = logging.getLogger(__name__)

DEFAULT_REORDER_ERROR = "Could not update the order"

_SUCCESS_MESSAGES = {
    "course": "Course order updated",
    "lesson": "Lesson order updated",
    "section": "Section order updated",
}


class ReorderApplicationService:
    """Sibling lists of the catalog tree and their drag-and-drop reordering.

    Every (kind, parent) pair owns its own observable list. A drop updates
    that list first and then sends the full order list to the catalog; if
    that call fails for any reason, the list is put back to its pre-drop
    snapshot. Each pair has its own lock, so a slow catalog call on one
    list never blocks drops on another.
    """

    def __init__(self, *, catalog: CatalogPort):
        self.catalog = catalog
        self._lock = threading.Lock()
        self._zone_locks: dict[tuple[str, str], threading.RLock] = {}
        self._zones: dict[tuple[str, str], ObservableStore[list[OrderedItem]]] = {}

    def _lister(self, kind: str) -> Callable[[str], list[OrderedItem]]:
        return {
            "course": self.catalog.list_roadmap_courses,
            "lesson": self.catalog.list_lessons,
            "section": self.catalog.list_sections,
        }[kind]

    def _persister(self, kind: str) -> Callable[[str, list[dict[str, Any]]], dict[str, Any]]:
        return {
            "course": self.catalog.reorder_courses,
            "lesson": self.catalog.reorder_lessons,
            "section": self.catalog.reorder_sections,
        }[kind]

    def _zone_lock(self, kind: str, parent_id: str) -> threading.RLock:
        with self._lock:
            return self._zone_locks.setdefault((kind, parent_id), threading.RLock())

    def zone(self, kind: str, parent_id: str) -> ObservableStore[list[OrderedItem]]:
        """Return the sibling store for ``(kind, parent_id)``, loading it on first use."""
        with self._zone_lock(kind, parent_id):
            store = self._zones.get((kind, parent_id))
            if store is None:
                store = ObservableStore(sort_by_order(self._lister(kind)(parent_id)))
                self._zones[(kind, parent_id)] = store
            return store

    def list_siblings(self, kind: str, parent_id: str, *, refresh: bool = False) -> list[OrderedItem]:
        with self._zone_lock(kind, parent_id):
            store = self.zone(kind, parent_id)
            if refresh:
                store.set(sort_by_order(self._lister(kind)(parent_id)))
            return store.get()

    def handle_drop(
        self,
        *,
        kind: str,
        parent_id: str,
        raw_payload: str | None,
        target_id: str | int | None,
    ) -> ReorderOutcome:
        payload = decode_drag_payload(raw_payload)
        if payload is None:
            logger.debug("Ignoring %s drop on %s: unreadable payload", kind, parent_id)
            return ReorderOutcome(applied=False, items=self.list_siblings(kind, parent_id), reason="invalid_payload")
        if not accepts_drop(kind, payload):
            logger.debug("Ignoring %s payload dropped on %s zone %s", payload.kind, kind, parent_id)
            return ReorderOutcome(applied=False, items=self.list_siblings(kind, parent_id), reason="kind_mismatch")
        if payload.id == target_id:
            return ReorderOutcome(applied=False, items=self.list_siblings(kind, parent_id), reason="self_drop")

        with self._zone_lock(kind, parent_id):
            store = self.zone(kind, parent_id)
            snapshot = store.get()
            if not any(item.id == payload.id for item in snapshot):
                logger.debug("Ignoring drop of unknown %s %s on %s", kind, payload.id, parent_id)
                return ReorderOutcome(applied=False, items=snapshot, reason="not_found")

            start = ORDER_START_BY_KIND[kind]
            reordered = assign_orders(reorder_siblings(snapshot, payload.id, target_id), start=start)
            store.set(reordered)

            try:
                self._persister(kind)(parent_id, build_order_entries(kind, reordered, start=start))
            except Exception:
                store.set(snapshot)
                logger.warning(
                    "Could not persist %s reorder for %s; restored previous order", kind, parent_id, exc_info=True
                )
                raise

        logger.info("Reordered %s %s under %s", kind, payload.id, parent_id)
        return ReorderOutcome(applied=True, items=reordered, message=_SUCCESS_MESSAGES[kind])

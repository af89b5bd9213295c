from __future__ import annotations

import copy
from typing import Any

from sqlalchemy import select

from toeic_admin.infra.db.models import LocalCollectionRow
from toeic_admin.infra.db.session import get_session_factory


class DatabaseStore:
    """Persistence layer backed by SQLAlchemy.

    Each storage key holds one JSON list that is always read and written
    whole, mirroring how the dashboard kept its drafts in browser storage.
    """

    def __init__(self):
        self._session_factory = get_session_factory()

    def load_collection(self, key: str) -> list[dict[str, Any]]:
        with self._session_factory() as db:
            row = db.execute(select(LocalCollectionRow).where(LocalCollectionRow.key == key)).scalar_one_or_none()
            if row is None or not isinstance(row.payload, list):
                return []
            return copy.deepcopy([item for item in row.payload if isinstance(item, dict)])

    def save_collection(self, key: str, items: list[dict[str, Any]]) -> None:
        payload = copy.deepcopy(list(items))
        with self._session_factory() as db:
            row = db.execute(select(LocalCollectionRow).where(LocalCollectionRow.key == key)).scalar_one_or_none()
            if row is None:
                db.add(LocalCollectionRow(key=key, payload=payload))
            else:
                row.payload = payload
            db.commit()

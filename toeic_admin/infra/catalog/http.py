from __future__ import annotations

import json
import logging
from http import client as httpclient
from typing import Any
from urllib import error as urlerror
from urllib import parse, request

from toeic_admin.domain.models import OrderedItem
from toeic_admin.domain.reorder import sort_by_order
from toeic_admin.infra.ports.catalog import ORDER_START_BY_KIND, CatalogError, CatalogPort

logger = logging.getLogger(__name__)

_DEFAULT_ERROR_MESSAGE = "Catalog request failed"


def _unwrap(data: Any) -> Any:
    # The catalog answers either with the bare payload or with {"data": payload}.
    if isinstance(data, dict) and "data" in data:
        return data["data"]
    return data


def _error_message(body: str | None) -> str | None:
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except ValueError:
        return None
    if isinstance(parsed, dict):
        message = parsed.get("message") or parsed.get("detail")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def _to_ordered_item(raw: Any, *, index: int, start: int, parent_id: str) -> OrderedItem | None:
    if isinstance(raw, str):
        return OrderedItem(id=raw, order=start + index, parent_id=parent_id)
    if not isinstance(raw, dict):
        return None

    item_id = raw.get("_id") or raw.get("id")
    if item_id is None:
        return None

    order = raw.get("order")
    if not isinstance(order, int) or isinstance(order, bool):
        order = start + index

    title = raw.get("title") or raw.get("name")
    extra = {k: v for k, v in raw.items() if k not in {"_id", "id", "order", "title", "name"}}
    return OrderedItem(
        id=str(item_id),
        order=order,
        title=str(title) if title is not None else None,
        parent_id=parent_id,
        extra=extra,
    )


class HttpCatalog(CatalogPort):
    """Client for the platform's admin REST API."""

    def __init__(self, *, base_url: str, api_token: str | None = None, timeout_seconds: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout_seconds = max(1.0, float(timeout_seconds))

    def _url(self, *segments: str) -> str:
        return self.base_url + "/" + "/".join(parse.quote(segment, safe="") for segment in segments)

    def _request_json(self, method: str, url: str, payload: dict[str, Any] | None = None) -> Any:
        headers = {"Accept": "application/json"}
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"

        req = request.Request(url=url, method=method, data=data, headers=headers)
        try:
            with request.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw_body = resp.read()
        except urlerror.HTTPError as exc:
            try:
                detail = exc.read().decode("utf-8")
            except Exception:
                detail = None
            message = _error_message(detail) or _DEFAULT_ERROR_MESSAGE
            logger.warning("Catalog %s %s failed with %s: %s", method, url, exc.code, message)
            raise CatalogError(message, status_code=exc.code) from exc
        except urlerror.URLError as exc:
            raise CatalogError(f"Catalog connection error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise CatalogError(f"Catalog timeout after {self.timeout_seconds}s") from exc
        except (OSError, httpclient.HTTPException) as exc:
            logger.warning("Catalog %s %s failed: %r", method, url, exc)
            raise CatalogError(f"Catalog connection error: {exc!r}") from exc

        try:
            body = raw_body.decode("utf-8")
            if not body.strip():
                return {}
            return json.loads(body)
        except ValueError as exc:
            raise CatalogError("Catalog returned a non-JSON response") from exc

    def _list(self, url: str, *, kind: str, parent_id: str, nested_key: str | None = None) -> list[OrderedItem]:
        data = _unwrap(self._request_json("GET", url))
        if nested_key and isinstance(data, dict):
            data = data.get(nested_key)
        if not isinstance(data, list):
            raise CatalogError(f"Unexpected {kind} list payload from catalog")

        start = ORDER_START_BY_KIND[kind]
        items = [
            item
            for idx, raw in enumerate(data)
            if (item := _to_ordered_item(raw, index=idx, start=start, parent_id=parent_id)) is not None
        ]
        return sort_by_order(items)

    def list_roadmap_courses(self, roadmap_id: str) -> list[OrderedItem]:
        return self._list(
            self._url("admin", "roadmaps", roadmap_id),
            kind="course",
            parent_id=roadmap_id,
            nested_key="courses",
        )

    def list_lessons(self, course_id: str) -> list[OrderedItem]:
        return self._list(self._url("admin", "courses", course_id, "lessons"), kind="lesson", parent_id=course_id)

    def list_sections(self, lesson_id: str) -> list[OrderedItem]:
        return self._list(self._url("admin", "lessons", lesson_id, "sections"), kind="section", parent_id=lesson_id)

    def reorder_courses(self, roadmap_id: str, course_orders: list[dict[str, Any]]) -> dict[str, Any]:
        url = self._url("admin", "roadmaps", roadmap_id, "reorder-courses")
        return self._ack(self._request_json("PATCH", url, {"course_orders": course_orders}))

    def reorder_lessons(self, course_id: str, lesson_orders: list[dict[str, Any]]) -> dict[str, Any]:
        url = self._url("admin", "courses", course_id, "reorder-lessons")
        return self._ack(self._request_json("PATCH", url, {"lesson_orders": lesson_orders}))

    def reorder_sections(self, lesson_id: str, section_orders: list[dict[str, Any]]) -> dict[str, Any]:
        url = self._url("admin", "lessons", lesson_id, "reorder-sections")
        return self._ack(self._request_json("PATCH", url, {"section_orders": section_orders}))

    @staticmethod
    def _ack(data: Any) -> dict[str, Any]:
        return data if isinstance(data, dict) else {"data": data}

from __future__ import annotations

from functools import lru_cache

from toeic_admin.application.reorder import ReorderApplicationService
from toeic_admin.application.services import QuestionBankService, TestDraftService
from toeic_admin.application.state import PersistentCollection
from toeic_admin.core.config import get_settings
from toeic_admin.infra.catalog.http import HttpCatalog
from toeic_admin.infra.catalog.mock import MockCatalog
from toeic_admin.infra.db.store import DatabaseStore
from toeic_admin.infra.ports.catalog import CatalogPort


@lru_cache(maxsize=1)
def get_store() -> DatabaseStore:
    return DatabaseStore()


@lru_cache(maxsize=1)
def get_catalog() -> CatalogPort:
    settings = get_settings()
    if settings.catalog_backend == "http":
        if not settings.catalog_base_url:
            raise RuntimeError("TOEIC_CATALOG_BASE_URL is required when TOEIC_CATALOG_BACKEND=http")
        return HttpCatalog(
            base_url=settings.catalog_base_url,
            api_token=settings.catalog_api_token,
            timeout_seconds=settings.catalog_timeout_seconds,
        )
    return MockCatalog()


@lru_cache(maxsize=1)
def get_draft_collection() -> PersistentCollection:
    return PersistentCollection(persistence=get_store(), key=get_settings().draft_storage_key)


@lru_cache(maxsize=1)
def get_question_bank_collection() -> PersistentCollection:
    return PersistentCollection(persistence=get_store(), key=get_settings().question_bank_key)


@lru_cache(maxsize=1)
def get_reorder_service() -> ReorderApplicationService:
    return ReorderApplicationService(catalog=get_catalog())


def get_test_draft_service() -> TestDraftService:
    return TestDraftService(drafts=get_draft_collection())


def get_question_bank_service() -> QuestionBankService:
    return QuestionBankService(bank=get_question_bank_collection())


def clear_caches() -> None:
    get_settings.cache_clear()
    get_store.cache_clear()
    get_catalog.cache_clear()
    get_draft_collection.cache_clear()
    get_question_bank_collection.cache_clear()
    get_reorder_service.cache_clear()


async def provide_reorder_service() -> ReorderApplicationService:
    return get_reorder_service()


async def provide_test_draft_service() -> TestDraftService:
    return get_test_draft_service()


async def provide_question_bank_service() -> QuestionBankService:
    return get_question_bank_service()

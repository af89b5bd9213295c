import pytest

from toeic_admin.api.admin import dependencies
from toeic_admin.core.config import get_settings
from toeic_admin.infra.catalog.http import HttpCatalog
from toeic_admin.infra.catalog.mock import MockCatalog
from toeic_admin.infra.db.session import _normalize_database_url


@pytest.fixture(autouse=True)
def _reset_caches():
    dependencies.clear_caches()
    yield
    dependencies.clear_caches()


def test_defaults_come_from_environment():
    settings = get_settings()

    assert settings.catalog_backend == "mock"
    assert settings.draft_storage_key == "tests_v1"
    assert settings.question_bank_key == "questionBank"
    assert settings.catalog_timeout_seconds == 15.0
    assert isinstance(dependencies.get_catalog(), MockCatalog)


def test_http_catalog_is_selected_with_base_url(monkeypatch):
    monkeypatch.setenv("TOEIC_CATALOG_BACKEND", "HTTP")
    monkeypatch.setenv("TOEIC_CATALOG_BASE_URL", "https://api.example.test/")
    monkeypatch.setenv("TOEIC_CATALOG_TIMEOUT_SECONDS", "-3")
    dependencies.clear_caches()

    catalog = dependencies.get_catalog()

    assert isinstance(catalog, HttpCatalog)
    assert catalog.base_url == "https://api.example.test"
    assert catalog.timeout_seconds == 15.0


def test_http_catalog_without_base_url_fails(monkeypatch):
    monkeypatch.setenv("TOEIC_CATALOG_BACKEND", "http")
    monkeypatch.setenv("TOEIC_CATALOG_BASE_URL", "")
    dependencies.clear_caches()

    with pytest.raises(RuntimeError):
        dependencies.get_catalog()


def test_cors_origins_are_split(monkeypatch):
    monkeypatch.setenv("TOEIC_CORS_ORIGINS", "http://a.test, ,http://b.test")
    dependencies.clear_caches()

    assert get_settings().cors_origins == ["http://a.test", "http://b.test"]


def test_database_url_normalization():
    assert _normalize_database_url("postgres://u:p@db/x") == "postgresql+psycopg://u:p@db/x"
    assert _normalize_database_url("postgresql://u:p@db/x") == "postgresql+psycopg://u:p@db/x"
    assert _normalize_database_url("sqlite:///:memory:") == "sqlite:///:memory:"
    assert _normalize_database_url(None).endswith("toeic_admin.db")

import os
import sys
from pathlib import Path


# Keep tests deterministic and local-only.
os.environ["TOEIC_SKIP_DOTENV"] = "1"
os.environ["TOEIC_CATALOG_BACKEND"] = "mock"
os.environ["TOEIC_CATALOG_BASE_URL"] = ""
os.environ["TOEIC_CATALOG_API_TOKEN"] = ""
os.environ["TOEIC_DRAFT_STORAGE_KEY"] = "tests_v1"
os.environ["TOEIC_QUESTION_BANK_KEY"] = "questionBank"
os.environ["TOEIC_LOG_LEVEL"] = "DEBUG"

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = PROJECT_ROOT / "test_toeic_admin.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

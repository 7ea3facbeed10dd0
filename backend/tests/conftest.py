import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio

# Configure an in-memory database and a writable image root before importing
# sitecontent modules (settings are read at import time).
_SESSION_DIR = Path(tempfile.mkdtemp(prefix="sitecontent_pytest_"))

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CONTENT_IMAGE_STORAGE_PATH"] = str(_SESSION_DIR / "images")
os.environ["CONTENT_IMAGE_BASE_URL"] = "/content/images"
os.environ.pop("CONTENT_PACKAGE", None)
os.environ.pop("CONTENT_ADMIN_API_KEY", None)

(_SESSION_DIR / "images").mkdir(parents=True, exist_ok=True)

from sitecontent.core.clock import FixedClock  # noqa: E402
from sitecontent.core.content.config import ContentConfig  # noqa: E402
from sitecontent.core.content.repository import InMemoryContentGroupRepository  # noqa: E402
from sitecontent.core.shared.database_service import DatabaseService  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    """Cleanup temporary test files after the test session."""
    shutil.rmtree(_SESSION_DIR, ignore_errors=True)


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 1, 1, 12, 0, 0))


@pytest.fixture
def repository():
    return InMemoryContentGroupRepository()


@pytest.fixture
def content_config(tmp_path):
    return ContentConfig(image_storage_base_path=str(tmp_path), image_base_url="/some/url")


@pytest_asyncio.fixture
async def db_service():
    """Fresh in-memory database with all tables created."""
    service = DatabaseService("sqlite+aiosqlite:///:memory:")
    await service.init_db()
    yield service
    await service.close()

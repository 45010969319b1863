import os
import shutil
import tempfile

import pytest

# Keep the module-level app in pinbox.main away from the working directory.
_IMPORT_ROOT = tempfile.mkdtemp()
os.environ["UPLOADS_DIR"] = os.path.join(_IMPORT_ROOT, "uploads")
os.environ["PINS_FILE"] = os.path.join(_IMPORT_ROOT, "pins.json")
os.environ["LOG_DIR"] = os.path.join(_IMPORT_ROOT, "logs")
os.environ["STATIC_DIR"] = os.path.join(_IMPORT_ROOT, "static")

from fastapi.testclient import TestClient  # noqa: E402

from pinbox.core.config import Settings  # noqa: E402
from pinbox.main import create_app  # noqa: E402
from pinbox.services.filestore import Storage  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_IMPORT_ROOT, ignore_errors=True)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        UPLOADS_DIR=str(tmp_path / "uploads"),
        PINS_FILE=str(tmp_path / "pins.json"),
        MIN_PIN_LENGTH=4,
        LOG_DIR=str(tmp_path / "logs"),
        STATIC_DIR=str(tmp_path / "static"),
        CHUNK_SIZE=1024,
    )


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


@pytest.fixture
def storage(tmp_path):
    return Storage(tmp_path / "uploads")


@pytest.fixture
def pin(client):
    """A registered PIN."""
    r = client.post("/api/pin/create", json={"pin": "1234"})
    assert r.status_code == 200
    return "1234"

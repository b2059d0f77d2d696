import os
import shutil
import tempfile

# point the app at a throwaway database and upload dir before it is imported
_TMP = tempfile.mkdtemp(prefix="bazar-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP, "test.db")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["RESET_DB"] = "1"
os.environ["ORPHAN_SWEEP_SECONDS"] = "0"

import pytest
from fastapi.testclient import TestClient

from bazar.main import app


@pytest.fixture
def client():
    shutil.rmtree(os.environ["UPLOAD_DIR"], ignore_errors=True)
    # entering the client runs the lifespan: fresh tables, new gateway
    with TestClient(app) as c:
        yield c


@pytest.fixture
def gateway(client):
    return app.state.gateway


@pytest.fixture
def upload_dir(client):
    return app.state.uploads.upload_dir


@pytest.fixture
def stored_files(upload_dir):
    def _list():
        return sorted(n for n in os.listdir(upload_dir) if not n.startswith("."))
    return _list


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_TMP, ignore_errors=True)

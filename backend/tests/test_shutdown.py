import pytest
from fastapi.testclient import TestClient

import bazar.__main__ as entry
from bazar.main import app
from bazar.repositories.gateway import PersistenceGateway


def test_clean_shutdown_is_recorded():
    with TestClient(app):
        pass
    assert app.state.shutdown_failed is False


def test_failed_close_marks_shutdown(monkeypatch):
    def broken_close(self):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(PersistenceGateway, "close", broken_close)
    with TestClient(app):
        pass
    assert app.state.shutdown_failed is True


def test_entry_point_exit_code(monkeypatch):
    calls = []
    monkeypatch.setattr(entry.uvicorn, "run", lambda *args, **kwargs: calls.append(kwargs))

    monkeypatch.setattr(app.state, "shutdown_failed", True, raising=False)
    with pytest.raises(SystemExit) as exc:
        entry.main()
    assert exc.value.code == 1

    monkeypatch.setattr(app.state, "shutdown_failed", False)
    entry.main()
    assert len(calls) == 2

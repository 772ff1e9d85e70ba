"""
Pytest configuration shared by unit and integration tests

Every test gets its own SQLite file and a clean telemetry state.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from paperlib.llm.gateway import InferenceGateway
from paperlib.observability.telemetry import reset_telemetry
from paperlib.storage import SQLiteRecordStore


@pytest.fixture(autouse=True)
def clean_telemetry():
    reset_telemetry()
    yield
    reset_telemetry()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "paperlib-test.db"


@pytest.fixture
def store(db_path) -> SQLiteRecordStore:
    return SQLiteRecordStore(db_path)


def _completion_response(content: str, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return response


def _health_response(ok: bool = True) -> MagicMock:
    response = MagicMock()
    response.ok = ok
    response.status_code = 200 if ok else 503
    return response


@pytest.fixture
def completion_response():
    """Factory for fake /v1/chat/completions responses."""
    return _completion_response


@pytest.fixture
def health_response():
    """Factory for fake /health and /v1/models responses."""
    return _health_response


@pytest.fixture
def session() -> MagicMock:
    """A requests.Session double; health probes succeed by default."""
    fake = MagicMock()
    fake.get.return_value = _health_response(ok=True)
    return fake


@pytest.fixture
def online_gateway(session) -> InferenceGateway:
    gateway = InferenceGateway("http://llm.test", session=session)
    assert gateway.check_status() is True
    return gateway


@pytest.fixture
def offline_gateway() -> InferenceGateway:
    """Never probed, so it reports offline and makes no requests."""
    fake = MagicMock()
    return InferenceGateway("http://llm.test", session=fake)

# MongoDB 연결/트랜잭션 관리 테스트 (motor 클라이언트를 가짜 객체로 교체)
import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from placeshare.core import database
from placeshare.core.config import settings
from placeshare.models.place import Place
from placeshare.models.user import User


class FakeSession:
    def __init__(self):
        self.events = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.events.append("end")

    @asynccontextmanager
    async def start_transaction(self):
        self.events.append("start")
        try:
            yield
        except BaseException:
            self.events.append("abort")
            raise
        self.events.append("commit")


class FakeClient:
    def __init__(self):
        self.session = FakeSession()

    async def start_session(self):
        return self.session


def _run_in_transaction(body=None):
    async def _run():
        async with database.start_transaction() as session:
            if body:
                body()
            return session

    return asyncio.run(_run())


@pytest.fixture
def motor_client(monkeypatch):
    fake = FakeClient()
    monkeypatch.setattr(database, "_client", fake)
    monkeypatch.setattr(database, "_use_transactions", True)
    return fake


def test_transaction_requires_init(monkeypatch):
    monkeypatch.setattr(database, "_client", None)
    with pytest.raises(RuntimeError):
        _run_in_transaction()


def test_transaction_commits(motor_client):
    session = _run_in_transaction()
    assert session is motor_client.session
    assert motor_client.session.events == ["start", "commit", "end"]


def test_transaction_aborts_on_error(motor_client):
    def fail():
        raise ValueError("write failed")

    with pytest.raises(ValueError):
        _run_in_transaction(fail)
    assert motor_client.session.events == ["start", "abort", "end"]


def test_transactions_disabled_yields_none(motor_client, monkeypatch):
    monkeypatch.setattr(database, "_use_transactions", False)
    assert _run_in_transaction() is None
    assert motor_client.session.events == []


def test_get_transaction_returns_factory():
    assert database.get_transaction() is database.start_transaction


@patch("placeshare.core.database.init_beanie", new_callable=AsyncMock)
@patch("placeshare.core.database.AsyncIOMotorClient")
def test_init_db_registers_documents(mock_client_cls, mock_init_beanie, monkeypatch):
    monkeypatch.setattr(database, "_client", None)
    monkeypatch.setattr(database, "_use_transactions", True)
    client = mock_client_cls.return_value
    client.admin.command = AsyncMock(return_value={"ok": 1})
    db = MagicMock()
    db.name = "placeshare"
    client.get_default_database.return_value = db

    config = settings.model_copy(update={"MONGODB_TRANSACTIONS": False})
    assert asyncio.run(database.init_db(config)) is client

    mock_client_cls.assert_called_once_with(config.MONGODB_URI, serverSelectionTimeoutMS=5000)
    client.admin.command.assert_awaited_once_with("ping")
    mock_init_beanie.assert_awaited_once_with(database=db, document_models=[User, Place])
    assert database._use_transactions is False

    database.close_db()
    client.close.assert_called_once()
    assert database._client is None


@patch("placeshare.core.database.init_beanie", new_callable=AsyncMock)
@patch("placeshare.core.database.AsyncIOMotorClient")
def test_init_db_propagates_ping_failure(mock_client_cls, mock_init_beanie, monkeypatch):
    monkeypatch.setattr(database, "_client", None)
    mock_client_cls.return_value.admin.command = AsyncMock(side_effect=ConnectionError("no server"))
    with pytest.raises(ConnectionError):
        asyncio.run(database.init_db(settings))
    mock_init_beanie.assert_not_awaited()
    assert database._client is None

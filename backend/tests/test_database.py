"""
Tests for the request session lifecycle (app.database.get_db) and the
DB_CREATE_TABLES branch of the app lifespan.

AsyncSessionLocal is patched with a mock session factory, so the real get_db
dependency runs end to end without a database.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app import main
from app.data.finnhub_client import get_quote_client
from app.database import get_db
from tests.conftest import make_watchlist


# ── Helpers ───────────────────────────────────────────────────────────────────

def _session_factory():
    """Mock AsyncSessionLocal: calling it gives an async context manager yielding a session."""
    session = AsyncMock()
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=session)
    cm.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=cm), session


@pytest.fixture
def real_db_client(quotes):
    """TestClient that keeps the real get_db dependency; only the quote client is faked."""
    main.app.dependency_overrides[get_quote_client] = lambda: quotes
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


# ── get_db ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_get_db_commits_when_request_succeeds():
    factory, session = _session_factory()

    with patch('app.database.AsyncSessionLocal', factory):
        gen = get_db()
        assert await gen.__anext__() is session
        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

    session.commit.assert_awaited_once()
    session.rollback.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_db_rolls_back_and_reraises():
    factory, session = _session_factory()

    with patch('app.database.AsyncSessionLocal', factory):
        gen = get_db()
        await gen.__anext__()
        with pytest.raises(RuntimeError, match="boom"):
            await gen.athrow(RuntimeError("boom"))

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


def test_route_api_error_rolls_back_request_session(real_db_client):
    """404 from add-symbol propagates through get_db: nothing is committed."""
    factory, session = _session_factory()

    with (
        patch('app.database.AsyncSessionLocal', factory),
        patch('app.watchlists.store.watchlist_exists', new=AsyncMock(return_value=False)),
    ):
        response = real_db_client.post("/watchlists/999/items", json={"symbol": "AAPL"})

    assert response.status_code == 404
    assert response.json()["error"] == "Watchlist not found"
    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


def test_route_success_commits_request_session(real_db_client):
    factory, session = _session_factory()

    with (
        patch('app.database.AsyncSessionLocal', factory),
        patch(
            'app.watchlists.store.create_watchlist',
            new=AsyncMock(return_value=make_watchlist(1, "Energy")),
        ) as mock_create,
    ):
        response = real_db_client.post("/watchlists", json={"name": "Energy"})

    assert response.status_code == 201
    mock_create.assert_awaited_once_with(session, "Energy")
    session.commit.assert_awaited_once()
    session.rollback.assert_not_awaited()


# ── Lifespan ──────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("create_tables", [True, False])
def test_lifespan_creates_tables_only_when_asked(create_tables):
    with (
        patch.object(main.settings, "db_create_tables", create_tables),
        patch('app.main.init_db', new=AsyncMock()) as mock_init,
        patch('app.main.close_db', new=AsyncMock()) as mock_close,
    ):
        with TestClient(main.app) as client:
            assert client.get("/").status_code == 200

    assert mock_init.await_count == (1 if create_tables else 0)
    mock_close.assert_awaited_once()

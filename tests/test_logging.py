import logging

import pytest
from httpx import AsyncClient

from app.config import settings
from app.logging_config import _parse_level, setup_logging


def test_parse_level():
    assert _parse_level("debug") == logging.DEBUG
    assert _parse_level("WARNING") == logging.WARNING
    assert _parse_level("not-a-level") == logging.INFO


def test_setup_logging_applies_sql_level(monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL_SQL", "ERROR")
    setup_logging()
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
    assert logging.getLogger("aiosqlite").level == logging.ERROR


@pytest.mark.asyncio
async def test_each_request_is_logged(async_client: AsyncClient, caplog):
    with caplog.at_level(logging.INFO, logger="app.access"):
        await async_client.get("/api/v1/articles/missing")
    messages = [r.getMessage() for r in caplog.records if r.name == "app.access"]
    assert len(messages) == 1
    assert messages[0].startswith("GET /api/v1/articles/missing 404 ")

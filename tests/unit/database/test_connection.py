"""Unit tests for the startup connection check."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from lupa.database.connection import DatabaseUnavailable, check_connection


def database(**command_kwargs) -> MagicMock:
    db = MagicMock()
    db.name = "lupa_cidada"
    db.command = AsyncMock(**command_kwargs)
    return db


class TestCheckConnection:
    """Tests for check_connection()."""

    @pytest.mark.asyncio
    async def test_ping_ok(self):
        db = database(return_value={"ok": 1.0})
        await check_connection(db)
        db.command.assert_awaited_once_with("ping")

    @pytest.mark.asyncio
    async def test_unreachable(self):
        db = database(side_effect=ServerSelectionTimeoutError("localhost:27017: connection refused"))
        with pytest.raises(DatabaseUnavailable, match="Cannot reach MongoDB"):
            await check_connection(db)

    @pytest.mark.asyncio
    async def test_unexpected_reply(self):
        db = database(return_value={"ok": 0.0})
        with pytest.raises(DatabaseUnavailable):
            await check_connection(db)

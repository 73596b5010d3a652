"""Tests for the database engine and session management module."""

from unittest.mock import MagicMock, patch

import pytest

import area_profile.core.database as db_module
from area_profile.core.config import Settings
from area_profile.core.database import (
    dispose_engine,
    get_engine,
    get_session_factory,
    init_engine,
    init_engine_from_settings,
)


@pytest.fixture(autouse=True)
def _restore_engine_state():
    """Keep mocked engines from leaking into other tests."""
    engine, factory = db_module._engine, db_module._session_factory
    yield
    db_module._engine, db_module._session_factory = engine, factory


class TestGetEngine:
    """Tests for get_engine."""

    def test_raises_when_not_initialized(self) -> None:
        original_engine = db_module._engine
        db_module._engine = None
        try:
            with pytest.raises(RuntimeError, match="Database engine not initialized"):
                get_engine()
        finally:
            db_module._engine = original_engine

    @pytest.mark.asyncio
    async def test_returns_engine_when_initialized(self) -> None:
        engine = init_engine("sqlite+aiosqlite:///:memory:")
        try:
            assert get_engine() is engine
        finally:
            await dispose_engine()


class TestGetSessionFactory:
    """Tests for get_session_factory."""

    def test_raises_when_not_initialized(self) -> None:
        original_factory = db_module._session_factory
        db_module._session_factory = None
        try:
            with pytest.raises(RuntimeError, match="Session factory not initialized"):
                get_session_factory()
        finally:
            db_module._session_factory = original_factory


class TestInitEngine:
    """Tests for init_engine."""

    @pytest.mark.asyncio
    async def test_creates_engine_and_factory(self) -> None:
        engine = init_engine("sqlite+aiosqlite:///:memory:")
        try:
            assert engine is not None
            assert get_session_factory() is not None
        finally:
            await dispose_engine()

    def test_init_engine_without_schema(self) -> None:
        """Pooled engines get pool defaults and no connect_args."""
        with patch("area_profile.core.database.create_async_engine", return_value=MagicMock()) as mock_create:
            init_engine("postgresql+asyncpg://localhost/db", echo=False)
            mock_create.assert_called_once_with(
                "postgresql+asyncpg://localhost/db", echo=False, pool_size=10, max_overflow=5
            )

    def test_init_engine_with_schema(self) -> None:
        """init_engine with schema injects connect_args with search_path."""
        with patch("area_profile.core.database.create_async_engine", return_value=MagicMock()) as mock_create:
            init_engine("postgresql+asyncpg://localhost/db", schema="pr_42", echo=False)
            mock_create.assert_called_once_with(
                "postgresql+asyncpg://localhost/db",
                echo=False,
                connect_args={"options": "-c search_path=pr_42,public"},
                pool_size=10,
                max_overflow=5,
            )

    def test_sqlite_skips_pool_defaults(self) -> None:
        with patch("area_profile.core.database.create_async_engine", return_value=MagicMock()) as mock_create:
            init_engine("sqlite+aiosqlite:///:memory:")
            mock_create.assert_called_once_with("sqlite+aiosqlite:///:memory:")


class TestInitEngineFromSettings:
    """Tests for init_engine_from_settings."""

    def test_requires_database_url(self) -> None:
        settings = Settings(_env_file=None, database_url=None)  # type: ignore[call-arg]
        with pytest.raises(RuntimeError, match="DATABASE_URL is not configured"):
            init_engine_from_settings(settings)

    def test_passes_schema(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            database_url="postgresql+asyncpg://localhost/db",
            database_schema="pr_7",
        )
        with patch("area_profile.core.database.init_engine", return_value=MagicMock()) as mock_init:
            init_engine_from_settings(settings)
        mock_init.assert_called_once_with("postgresql+asyncpg://localhost/db", schema="pr_7")


class TestDisposeEngine:
    """Tests for dispose_engine."""

    @pytest.mark.asyncio
    async def test_disposes_engine(self) -> None:
        init_engine("sqlite+aiosqlite:///:memory:")
        await dispose_engine()
        assert db_module._engine is None
        assert db_module._session_factory is None

    @pytest.mark.asyncio
    async def test_dispose_when_no_engine(self) -> None:
        original = db_module._engine
        db_module._engine = None
        try:
            await dispose_engine()
        finally:
            db_module._engine = original

"""Shared test fixtures: in-memory database, store, registry and service."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dashboard_templates.engine.base_templates import default_registry
from dashboard_templates.engine.template_service import TemplateService
from dashboard_templates.engine.template_store import TemplateStore
from dashboard_templates.models.base import Base
from dashboard_templates.schemas import GridItem, TemplateConfig


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory SQLite database per test (shared via StaticPool)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def store(session_factory):
    return TemplateStore(db_session_factory=session_factory)


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def service(store, registry):
    return TemplateService(store, registry)


@pytest.fixture
def make_item():
    """Build a GridItem with sensible defaults."""
    def _make(widget_id="widget-a", x=0, y=0, w=1, h=2, **extra):
        return GridItem(id=widget_id, x=x, y=y, w=w, h=h, **extra)
    return _make


@pytest.fixture
def custom_config(make_item):
    return TemplateConfig(
        sm=[make_item("chart", h=3)],
        lg=[make_item("chart", w=2, h=3), make_item("table", x=2, w=1, h=4)],
    )

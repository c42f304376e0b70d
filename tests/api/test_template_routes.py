"""Tests for the dashboard template HTTP routes and error envelope."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi import HTTPException
from httpx import ASGITransport, AsyncClient

import dashboard_templates.dependencies as dep_mod
import dashboard_templates.engine.template_store as store_mod
import dashboard_templates.middleware.error_handler as error_handler_mod
from dashboard_templates.config import DashboardConfig
from dashboard_templates.dependencies import get_current_user_id, get_template_service
from dashboard_templates.engine.template_store import TemplateStore
from dashboard_templates.engine.template_service import TemplateService
from dashboard_templates.errors import StoreError
from dashboard_templates.main import create_app

BASE = "/api/v1/dashboard-templates"


def _as(user_id):
    return {"X-User-Id": str(user_id)}


@pytest.fixture
def app(service, tmp_path, monkeypatch):
    """App whose service uses the in-memory store."""
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr(dep_mod, "_config_instance", None)

    app = create_app()
    app.dependency_overrides[get_template_service] = lambda: service
    return app


@pytest_asyncio.fixture
async def client(app):
    """Async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _seed(client, user_id=1, dashboard="landing"):
    resp = await client.get(f"{BASE}/", params={"dashboard": dashboard}, headers=_as(user_id))
    assert resp.status_code == 200, resp.text
    return resp.json()[0]


class TestTemplateRoutes:

    @pytest.mark.asyncio
    async def test_list_seeds_landing(self, client):
        resp = await client.get(f"{BASE}/", params={"dashboard": "landing"}, headers=_as(7))

        assert resp.status_code == 200
        body = resp.json()
        assert len(body) == 1
        assert body[0]["is_default"] is True
        assert body[0]["template_base"]["name"] == "landing"
        assert body[0]["template_config"]["sm"][0]["i"] == "landing-recommendations"

    @pytest.mark.asyncio
    async def test_list_all(self, client):
        await _seed(client, 1, "landing")
        await _seed(client, 1, "insights")

        resp = await client.get(f"{BASE}/", headers=_as(1))

        assert resp.status_code == 200
        assert {t["template_base"]["name"] for t in resp.json()} == {"landing", "insights"}

    @pytest.mark.asyncio
    async def test_missing_identity(self, client):
        resp = await client.get(f"{BASE}/")

        assert resp.status_code == 401
        assert resp.json()["error"] is True

    @pytest.mark.asyncio
    async def test_non_numeric_identity(self, client):
        resp = await client.get(f"{BASE}/", headers={"X-User-Id": "alice"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_dashboard_type(self, client):
        resp = await client.get(f"{BASE}/", params={"dashboard": "bogus"}, headers=_as(1))

        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_TEMPLATE_TYPE"

    @pytest.mark.asyncio
    async def test_base_templates(self, client):
        resp = await client.get(f"{BASE}/base-templates")
        assert resp.status_code == 200
        assert {t["name"] for t in resp.json()} == {"landing", "insights"}

        resp = await client.get(f"{BASE}/base-templates/insights")
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Insights"

        resp = await client.get(f"{BASE}/base-templates/unknown")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_patch_updates_layout(self, client):
        template = await _seed(client)
        payload = {"template_config": {"lg": [{"i": "chart", "w": 3, "h": 4}]}}

        resp = await client.patch(f"{BASE}/{template['id']}", json=payload, headers=_as(1))

        assert resp.status_code == 200
        body = resp.json()
        assert body["template_config"]["lg"] == [
            {"i": "chart", "title": None, "x": 0, "y": 0, "w": 3, "h": 4,
             "minH": None, "maxH": None, "static": False}
        ]
        assert body["template_config"]["sm"] == template["template_config"]["sm"]

    @pytest.mark.asyncio
    async def test_patch_invalid_item(self, client):
        template = await _seed(client)
        payload = {"template_config": {"sm": [{"i": "wide", "w": 2, "h": 1}]}}

        resp = await client.patch(f"{BASE}/{template['id']}", json=payload, headers=_as(1))

        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "INVALID_GRID_ITEM"
        assert body["context"]["item_id"] == "wide"

    @pytest.mark.asyncio
    async def test_patch_by_non_owner(self, client):
        template = await _seed(client, user_id=1)

        resp = await client.patch(f"{BASE}/{template['id']}", json={}, headers=_as(2))

        assert resp.status_code == 403
        assert resp.json()["code"] == "NOT_AUTHORIZED"

    @pytest.mark.asyncio
    async def test_patch_missing(self, client):
        resp = await client.patch(f"{BASE}/999", json={}, headers=_as(1))
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_copy_then_switch_default(self, client):
        template = await _seed(client, user_id=1)

        resp = await client.post(f"{BASE}/{template['id']}/copy", headers=_as(1))
        assert resp.status_code == 201
        copy = resp.json()
        assert copy["is_default"] is False

        resp = await client.post(f"{BASE}/{copy['id']}/default", headers=_as(1))
        assert resp.status_code == 200
        assert resp.json()["is_default"] is True

        resp = await client.get(f"{BASE}/", params={"dashboard": "landing"}, headers=_as(1))
        defaults = [t["id"] for t in resp.json() if t["is_default"]]
        assert defaults == [copy["id"]]

    @pytest.mark.asyncio
    async def test_delete(self, client):
        template = await _seed(client, user_id=1)

        resp = await client.delete(f"{BASE}/{template['id']}", headers=_as(2))
        assert resp.status_code == 403

        resp = await client.delete(f"{BASE}/{template['id']}", headers=_as(1))
        assert resp.status_code == 204

        resp = await client.delete(f"{BASE}/{template['id']}", headers=_as(1))
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_store_error_is_opaque_500(self, client, store):
        store.find_all_by_user = AsyncMock(side_effect=StoreError("find_all_by_user failed"))

        resp = await client.get(f"{BASE}/", headers=_as(1))

        assert resp.status_code == 500
        body = resp.json()
        assert body["code"] == "STORE_ERROR"
        assert body["detail"] == "Storage error"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client):
        resp = await client.get(f"{BASE}/base-templates", headers={"X-Request-ID": "abc-123"})
        assert resp.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_delete_id_beyond_integer_range(self, client):
        resp = await client.delete(f"{BASE}/{10**30}", headers=_as(1))

        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_identity_beyond_integer_range(self, client):
        resp = await client.get(f"{BASE}/", headers=_as(10**30))
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_store_error_logged_once(self, app, client, registry, monkeypatch):
        store_logger = MagicMock()
        handler_logger = MagicMock()
        monkeypatch.setattr(store_mod, "logger", store_logger)
        monkeypatch.setattr(error_handler_mod, "logger", handler_logger)
        failing_store = TemplateStore(db_session_factory=MagicMock(side_effect=OverflowError("too large")))
        app.dependency_overrides[get_template_service] = (
            lambda: TemplateService(failing_store, registry)
        )

        resp = await client.get(f"{BASE}/", headers=_as(1))

        assert resp.status_code == 500
        assert resp.json()["code"] == "STORE_ERROR"
        store_logger.error.assert_called_once()
        assert store_logger.error.call_args.args[0] == "store_error"
        handler_logger.error.assert_not_called()


class TestCurrentUserId:

    def _request(self, value):
        request = MagicMock()
        request.headers = {} if value is None else {"X-User-Id": value}
        return request

    def test_parses_decimal_id(self):
        config = DashboardConfig(_env_file=None)
        assert get_current_user_id(self._request(" 42 "), config) == 42

    @pytest.mark.parametrize("value", [None, "", "abc", "-1", "²", str(2**63)])
    def test_rejects_invalid_ids(self, value):
        config = DashboardConfig(_env_file=None)

        with pytest.raises(HTTPException) as exc_info:
            get_current_user_id(self._request(value), config)

        assert exc_info.value.status_code == 401

"""Tests for the HTTP surface the platform calls."""
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from research_agent.agent.capabilities import CapabilityDeps
from research_agent.api.server import app, get_agent, get_deps, get_settings
from research_agent.config import Settings

pytestmark = pytest.mark.asyncio


@pytest.fixture
def deps():
    platform = MagicMock()
    platform.mark_task_errored = AsyncMock()
    platform.upload_file = AsyncMock(return_value={})
    platform.get_files = AsyncMock(return_value=[])
    crawler = MagicMock()
    crawler.crawl = AsyncMock(return_value="crawled text")
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, text="")))
    return CapabilityDeps(platform=platform, crawler=crawler, http=http)


@pytest.fixture
def client(deps):
    agent = object()
    app.dependency_overrides[get_deps] = lambda: deps
    app.dependency_overrides[get_agent] = lambda: agent
    app.dependency_overrides[get_settings] = lambda: Settings(openserv_api_key="k", firecrawl_api_key="f")
    yield AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    app.dependency_overrides.clear()


async def test_tool_call_returns_result(client, deps):
    async with client as c:
        r = await c.post("/tools/crawlWebsite", json={
            "args": {"url": "https://acme.test"},
            "action": {"task": {"id": 1}, "workspace": {"id": 2}},
        })
    assert r.status_code == 200
    assert r.json() == {"result": "crawled text"}
    deps.crawler.crawl.assert_awaited_once_with("https://acme.test")


async def test_tool_call_failure_is_text_not_http_error(client, deps):
    async with client as c:
        r = await c.post("/tools/getFile", json={"args": {"path": "x.txt"}})
    assert r.status_code == 200
    assert r.json()["result"].startswith("Error retrieving file:")


async def test_unknown_tool_is_404(client, deps):
    async with client as c:
        r = await c.post("/tools/deleteEverything", json={"args": {}})
    assert r.status_code == 404


async def test_invalid_args_are_422_and_skip_handler(client, deps):
    async with client as c:
        r1 = await c.post("/tools/crawlWebsite", json={"args": {"url": "nope"}})
        r2 = await c.post("/tools/storeFile", json={"args": {"path": "a.txt"}})
    assert r1.status_code == 422
    assert r2.status_code == 422
    deps.crawler.crawl.assert_not_awaited()
    deps.platform.upload_file.assert_not_awaited()


async def test_do_task_action_is_accepted_and_dispatched(client, deps):
    action = {"type": "do-task", "task": {"id": 1, "description": "Crawl acme"}, "workspace": {"id": 2}}
    with patch("research_agent.api.server.do_task", new=AsyncMock()) as mock_do_task:
        async with client as c:
            r = await c.post("/", json=action)
    assert r.status_code == 200
    assert r.json() == {"status": "accepted"}
    mock_do_task.assert_awaited_once()
    assert mock_do_task.await_args.args[1] == action


async def test_unknown_action_type_is_400(client):
    async with client as c:
        r = await c.post("/", json={"type": "dance"})
    assert r.status_code == 400


async def test_health_ok(client):
    async with client as c:
        r = await c.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


async def test_health_reports_missing_keys(client):
    app.dependency_overrides[get_settings] = lambda: Settings(openserv_api_key="k")
    async with client as c:
        r = await c.get("/api/health")
    assert r.status_code == 503
    assert "FIRECRAWL_API_KEY" in r.json()["detail"]

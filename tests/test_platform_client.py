"""PlatformClient against an httpx MockTransport."""
import json

import httpx
import pytest

from research_agent.config import Settings
from research_agent.errors import PlatformError
from research_agent.platform.client import PlatformClient

pytestmark = pytest.mark.asyncio

SETTINGS = Settings(openserv_api_key="os-key", openserv_api_url="https://platform.test")


def make_client(handler) -> PlatformClient:
    http = httpx.AsyncClient(
        base_url=SETTINGS.openserv_api_url,
        headers={"x-openserv-key": "os-key"},
        transport=httpx.MockTransport(handler),
    )
    return PlatformClient(SETTINGS, client=http)


async def test_mark_task_errored_posts_error_body():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    await make_client(handler).mark_task_errored(42, 7, "No content found in Firecrawl result.")
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/workspaces/42/tasks/7/error"
    assert seen[0].headers["x-openserv-key"] == "os-key"
    assert json.loads(seen[0].content) == {"error": "No content found in Firecrawl result."}


async def test_upload_file_sends_multipart_path_and_bytes():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"id": 9})

    result = await make_client(handler).upload_file(42, "a/b.txt", b"hello")
    assert result == {"id": 9}
    body = seen[0].content
    assert seen[0].url.path == "/workspaces/42/file"
    assert seen[0].headers["content-type"].startswith("multipart/form-data")
    assert b'name="path"' in body and b"a/b.txt" in body
    assert b'filename="b.txt"' in body and b"hello" in body


async def test_get_files_parses_listing():
    def handler(request):
        assert request.url.path == "/workspaces/42/files"
        return httpx.Response(200, json=[
            {"id": 1, "path": "a/b.txt", "fullUrl": "https://files.test/1", "summary": "ignored"},
        ])

    files = await make_client(handler).get_files(42)
    assert len(files) == 1
    assert files[0].path == "a/b.txt"
    assert files[0].full_url == "https://files.test/1"


async def test_non_success_raises_platform_error():
    def handler(request):
        return httpx.Response(401, text="invalid key")

    with pytest.raises(PlatformError) as info:
        await make_client(handler).complete_task(42, 7, "done")
    assert info.value.status_code == 401
    assert "invalid key" in str(info.value)

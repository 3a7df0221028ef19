"""Async client for the OpenServ platform REST API.

Covers the handful of calls this agent makes: task error/complete, workspace
file upload/listing and agent chat replies. Every request carries the agent's
API key in the `x-openserv-key` header; non-2xx responses raise PlatformError.
"""
from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any

import httpx

from research_agent.config import Settings
from research_agent.errors import PlatformError
from research_agent.models import WorkspaceFile

_log = logging.getLogger(__name__)


class PlatformClient:
    def __init__(self, settings: Settings, *, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=settings.openserv_api_url,
            headers={"x-openserv-key": settings.openserv_api_key or ""},
            timeout=30,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = await self._client.request(method, url, **kwargs)
        if not response.is_success:
            raise PlatformError(method, url, response.status_code, response.text[:200])
        return response

    async def mark_task_errored(self, workspace_id: int | str, task_id: int | str, error: str) -> None:
        _log.info("Marking task %s in workspace %s as errored", task_id, workspace_id)
        await self._request("POST", f"/workspaces/{workspace_id}/tasks/{task_id}/error", json={"error": error})

    async def complete_task(self, workspace_id: int | str, task_id: int | str, output: str) -> None:
        await self._request("PUT", f"/workspaces/{workspace_id}/tasks/{task_id}/complete", json={"output": output})

    async def upload_file(self, workspace_id: int | str, path: str, file: bytes) -> dict[str, Any]:
        filename = PurePosixPath(path).name or "file"
        response = await self._request(
            "POST",
            f"/workspaces/{workspace_id}/file",
            data={"path": path},
            files={"file": (filename, file)},
        )
        return response.json() if response.content else {}

    async def get_files(self, workspace_id: int | str) -> list[WorkspaceFile]:
        response = await self._request("GET", f"/workspaces/{workspace_id}/files")
        return [WorkspaceFile.model_validate(item) for item in response.json()]

    async def send_chat_message(self, workspace_id: int | str, agent_id: int | str, message: str) -> None:
        await self._request(
            "POST",
            f"/workspaces/{workspace_id}/agent-chat/{agent_id}/message",
            json={"message": message},
        )

"""Capability registry: crawlWebsite, storeFile, getFile.

Each handler takes validated args, the invocation context and the shared
dependencies, and always returns a string. Failures are logged, reported to
the platform's task-error channel when the context names a task, and turned
into a fallback string.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx
from pydantic import BaseModel

from research_agent.agent.context import ContextWithTask, InvocationContext, parse_action, workspace_of
from research_agent.crawler.firecrawl import FirecrawlCrawler
from research_agent.errors import FileFetchError, MissingWorkspaceError, WorkspaceFileNotFoundError
from research_agent.models import CrawlWebsiteArgs, GetFileArgs, StoreFileArgs
from research_agent.platform.client import PlatformClient

_log = logging.getLogger(__name__)

CRAWL_FALLBACK = "Error during crawl."


@dataclass
class CapabilityDeps:
    platform: PlatformClient
    crawler: FirecrawlCrawler
    http: httpx.AsyncClient


Handler = Callable[[Any, InvocationContext, CapabilityDeps], Awaitable[str]]


@dataclass(frozen=True)
class Capability:
    name: str
    description: str
    args_model: type[BaseModel]
    handler: Handler


async def report_failure(
    deps: CapabilityDeps,
    ctx: InvocationContext,
    exc: Exception,
    default_error: str,
) -> None:
    if not isinstance(ctx, ContextWithTask):
        return
    try:
        await deps.platform.mark_task_errored(ctx.workspace_id, ctx.task_id, str(exc) or default_error)
    except Exception:
        # the caller still gets its fallback string
        _log.exception("Could not report error for task %s", ctx.task_id)


def _require_workspace(ctx: InvocationContext) -> int | str:
    workspace_id = workspace_of(ctx)
    if workspace_id is None:
        raise MissingWorkspaceError()
    return workspace_id


async def crawl_website(args: CrawlWebsiteArgs, ctx: InvocationContext, deps: CapabilityDeps) -> str:
    try:
        _log.info("Starting crawl for: %s", args.url)
        content = await deps.crawler.crawl(args.url)
        _log.info("Crawl successful for %s (%d chars)", args.url, len(content))
        return content
    except Exception as exc:
        _log.error("Firecrawl error for %s: %s", args.url, exc)
        await report_failure(deps, ctx, exc, "Failed to crawl website.")
        return CRAWL_FALLBACK


async def store_file(args: StoreFileArgs, ctx: InvocationContext, deps: CapabilityDeps) -> str:
    try:
        workspace_id = _require_workspace(ctx)
        await deps.platform.upload_file(workspace_id, args.path, args.content.encode("utf-8"))
        _log.info("Stored %s in workspace %s", args.path, workspace_id)
        return f"File stored successfully at {args.path}"
    except Exception as exc:
        _log.error("Error storing file %s: %s", args.path, exc)
        await report_failure(deps, ctx, exc, "Failed to store file.")
        return f"Error storing file: {exc}"


async def get_file(args: GetFileArgs, ctx: InvocationContext, deps: CapabilityDeps) -> str:
    try:
        workspace_id = _require_workspace(ctx)
        files = await deps.platform.get_files(workspace_id)
        match = next((f for f in files if f.path == args.path), None)
        if match is None:
            raise WorkspaceFileNotFoundError(args.path)
        response = await deps.http.get(match.full_url)
        if not response.is_success:
            raise FileFetchError(response.status_code)
        return response.text
    except Exception as exc:
        _log.error("Error retrieving file %s: %s", args.path, exc)
        await report_failure(deps, ctx, exc, "Failed to retrieve file.")
        return f"Error retrieving file: {exc}"


CAPABILITIES: dict[str, Capability] = {
    cap.name: cap
    for cap in (
        Capability(
            name="crawlWebsite",
            description="Crawls a company website and returns its text content using Firecrawl API.",
            args_model=CrawlWebsiteArgs,
            handler=crawl_website,
        ),
        Capability(
            name="storeFile",
            description="Stores text content as a file in the current workspace.",
            args_model=StoreFileArgs,
            handler=store_file,
        ),
        Capability(
            name="getFile",
            description="Retrieves the text content of a file in the current workspace by its exact path.",
            args_model=GetFileArgs,
            handler=get_file,
        ),
    )
}


async def run_capability(
    name: str, args: dict[str, Any], ctx: InvocationContext, deps: CapabilityDeps
) -> str:
    """Validate `args` for capability `name` and run it.

    Raises KeyError for an unknown name and pydantic.ValidationError for bad
    args; neither reaches a handler.
    """
    capability = CAPABILITIES[name]
    validated = capability.args_model.model_validate(args)
    return await capability.handler(validated, ctx, deps)


async def invoke(name: str, args: dict[str, Any], action: Any, deps: CapabilityDeps) -> str:
    """Entry point for the platform's tool calls: `{args, action}` by capability name."""
    return await run_capability(name, args, parse_action(action), deps)

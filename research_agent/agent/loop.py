"""LLM agent driven by platform actions: do-task and respond-chat-message.

The three capabilities are exposed as function tools. Tool context carries
the invocation context of the action being processed, so tool failures are
reported the same way as direct tool calls.
"""
import logging
from dataclasses import dataclass
from typing import Any

from agents import Agent, RunContextWrapper, Runner, function_tool

from research_agent.agent.capabilities import CapabilityDeps, report_failure, run_capability
from research_agent.agent.context import ContextWithTask, InvocationContext, parse_action, workspace_of
from research_agent.config import Settings

_log = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a Research Agent. Your job is to use your tools to crawl websites and scrape data."


@dataclass
class ToolRunContext:
    invocation: InvocationContext
    deps: CapabilityDeps


@function_tool(name_override="crawlWebsite")
async def crawl_website_tool(ctx: RunContextWrapper[ToolRunContext], url: str) -> str:
    """Crawls a company website and returns its text content using Firecrawl API.

    Args:
        url: The URL of the company website to crawl.
    """
    return await run_capability("crawlWebsite", {"url": url}, ctx.context.invocation, ctx.context.deps)


@function_tool(name_override="storeFile")
async def store_file_tool(ctx: RunContextWrapper[ToolRunContext], path: str, content: str) -> str:
    """Stores text content as a file in the current workspace.

    Args:
        path: Workspace path to write, e.g. reports/acme.md
        content: Text content of the file.
    """
    return await run_capability(
        "storeFile", {"path": path, "content": content}, ctx.context.invocation, ctx.context.deps
    )


@function_tool(name_override="getFile")
async def get_file_tool(ctx: RunContextWrapper[ToolRunContext], path: str) -> str:
    """Retrieves the text content of a file in the current workspace by its exact path.

    Args:
        path: Exact workspace path of the file to read.
    """
    return await run_capability("getFile", {"path": path}, ctx.context.invocation, ctx.context.deps)


def build_agent(settings: Settings) -> Agent[ToolRunContext]:
    return Agent[ToolRunContext](
        name="Research Agent",
        instructions=SYSTEM_PROMPT,
        model=settings.model,
        tools=[crawl_website_tool, store_file_tool, get_file_tool],
    )


def _task_prompt(task: dict[str, Any]) -> str:
    parts = [task.get("description") or ""]
    if task.get("body"):
        parts.append(str(task["body"]))
    if task.get("input"):
        parts.append(f"Input: {task['input']}")
    return "\n\n".join(p for p in parts if p)


def _chat_input(messages: list[dict[str, Any]]) -> list[dict[str, str]]:
    return [
        {"role": "user" if m.get("author") == "user" else "assistant", "content": str(m.get("message", ""))}
        for m in messages
        if m.get("message")
    ]


async def do_task(agent: Agent[ToolRunContext], action: dict[str, Any], deps: CapabilityDeps) -> None:
    """Run the agent on a task and complete it; any failure marks the task errored."""
    ctx = parse_action(action)
    task = action.get("task") or {}
    try:
        result = await Runner.run(agent, input=_task_prompt(task), context=ToolRunContext(ctx, deps))
        output = str(result.final_output)
        if isinstance(ctx, ContextWithTask):
            await deps.platform.complete_task(ctx.workspace_id, ctx.task_id, output)
        _log.info("Task %s finished", task.get("id"))
    except Exception as exc:
        _log.exception("Task %s failed", task.get("id"))
        await report_failure(deps, ctx, exc, "Failed to complete task.")


async def respond_chat(agent: Agent[ToolRunContext], action: dict[str, Any], deps: CapabilityDeps) -> None:
    ctx = parse_action(action)
    workspace_id = workspace_of(ctx)
    agent_id = (action.get("me") or {}).get("id")
    messages = _chat_input(action.get("messages") or [])
    if workspace_id is None or agent_id is None or not messages:
        _log.warning("Ignoring chat action without workspace, agent id or messages")
        return
    try:
        result = await Runner.run(agent, input=messages, context=ToolRunContext(ctx, deps))
        await deps.platform.send_chat_message(workspace_id, agent_id, str(result.final_output))
    except Exception:
        _log.exception("Chat response failed in workspace %s", workspace_id)

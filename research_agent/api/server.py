"""FastAPI server: the endpoints the OpenServ platform calls into."""
import logging
from typing import Any

import httpx
from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from pydantic import ValidationError

from research_agent.agent.capabilities import CAPABILITIES, CapabilityDeps, invoke
from research_agent.agent.loop import build_agent, do_task, respond_chat
from research_agent.config import Settings
from research_agent.crawler.firecrawl import FirecrawlCrawler
from research_agent.models import ToolCallRequest, ToolCallResponse
from research_agent.platform.client import PlatformClient

_log = logging.getLogger(__name__)

app = FastAPI(title="research-agent")

# ── Process state ────────────────────────────────────────────────────────────
# Built once on startup; handlers read it through the dependencies below.

_state: dict[str, Any] = {}


def init_state(settings: Settings) -> None:
    _state["settings"] = settings
    _state["deps"] = CapabilityDeps(
        platform=PlatformClient(settings),
        crawler=FirecrawlCrawler(settings.firecrawl_api_key),
        http=httpx.AsyncClient(timeout=30, follow_redirects=True),
    )
    _state["agent"] = build_agent(settings)


@app.on_event("startup")
async def _startup() -> None:
    if "deps" not in _state:
        init_state(Settings.from_env())
    settings: Settings = _state["settings"]
    _log.info("research-agent ready (platform=%s)", settings.openserv_api_url)
    for key in settings.missing_keys():
        _log.warning("%s is not set", key)


@app.on_event("shutdown")
async def _shutdown() -> None:
    deps: CapabilityDeps | None = _state.pop("deps", None)
    if deps is not None:
        await deps.platform.aclose()
        await deps.http.aclose()


def get_settings() -> Settings:
    return _state["settings"]


def get_deps() -> CapabilityDeps:
    return _state["deps"]


def get_agent():
    return _state["agent"]


# ── Endpoints ────────────────────────────────────────────────────────────────

@app.get("/api/health")
def health(settings: Settings = Depends(get_settings)):
    """Check that required API keys are configured."""
    missing = settings.missing_keys()
    if missing:
        raise HTTPException(status_code=503, detail=f"{', '.join(missing)} not set")
    return {"status": "ok"}


@app.post("/tools/{name}", response_model=ToolCallResponse)
async def call_tool(name: str, req: ToolCallRequest, deps: CapabilityDeps = Depends(get_deps)):
    """Run one capability with `{args, action}` and return its text result."""
    if name not in CAPABILITIES:
        raise HTTPException(status_code=404, detail=f"Unknown capability: {name}")
    try:
        result = await invoke(name, req.args, req.action, deps)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))
    return ToolCallResponse(result=result)


@app.post("/")
async def handle_action(
    action: dict[str, Any],
    background: BackgroundTasks,
    deps: CapabilityDeps = Depends(get_deps),
    agent=Depends(get_agent),
):
    """Accept a platform action and process it after responding."""
    action_type = action.get("type")
    if action_type == "do-task":
        background.add_task(do_task, agent, action, deps)
    elif action_type == "respond-chat-message":
        background.add_task(respond_chat, agent, action, deps)
    else:
        raise HTTPException(status_code=400, detail=f"Unsupported action type: {action_type!r}")
    return {"status": "accepted"}

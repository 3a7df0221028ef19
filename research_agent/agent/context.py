"""Invocation context: what the platform tells us about the current call.

The platform sends an action payload with optional `task` and `workspace`
objects. It is parsed once into one of three variants so handlers match on
the type instead of probing fields.
"""
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class ContextMinimal:
    pass


@dataclass(frozen=True)
class ContextWithWorkspace:
    workspace_id: int | str


@dataclass(frozen=True)
class ContextWithTask:
    workspace_id: int | str
    task_id: int | str


InvocationContext = Union[ContextWithTask, ContextWithWorkspace, ContextMinimal]


def _id_of(value: Any) -> int | str | None:
    if isinstance(value, dict):
        ident = value.get("id")
    else:
        ident = getattr(value, "id", None)
    # bool is an int subclass but never a valid id
    if isinstance(ident, bool) or not isinstance(ident, (int, str)) or ident == "":
        return None
    return ident


def parse_action(action: Any) -> InvocationContext:
    """Build an InvocationContext from a raw action payload. Never raises."""
    if action is None:
        return ContextMinimal()
    if isinstance(action, dict):
        task, workspace = action.get("task"), action.get("workspace")
    else:
        task, workspace = getattr(action, "task", None), getattr(action, "workspace", None)

    workspace_id = _id_of(workspace)
    if workspace_id is None:
        return ContextMinimal()
    task_id = _id_of(task)
    if task_id is None:
        return ContextWithWorkspace(workspace_id)
    return ContextWithTask(workspace_id, task_id)


def workspace_of(ctx: InvocationContext) -> int | str | None:
    if isinstance(ctx, (ContextWithTask, ContextWithWorkspace)):
        return ctx.workspace_id
    return None

# core/github.py
"""
GitHub webhook payloads (push and ping) and the chat message we send for them.

Only the fields we use are modelled; everything else in the payload is ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from core.validators import short_sha


class Repository(BaseModel):
    id: int
    name: str
    full_name: str
    private: bool = False


class Sender(BaseModel):
    id: int
    login: str


class Commit(BaseModel):
    id: str
    message: str
    timestamp: str
    url: str
    author: Dict[str, Any] = {}
    committer: Dict[str, Any] = {}
    added: List[str] = []
    removed: List[str] = []
    modified: List[str] = []


class Push(BaseModel):
    ref: str
    before: str
    after: str
    repository: Repository
    pusher: Dict[str, Any] = {}
    sender: Optional[Sender] = None
    created: bool = False
    deleted: bool = False
    forced: bool = False
    base_ref: Optional[str] = None
    compare: str
    commits: List[Commit] = []
    head_commit: Optional[Commit] = None


class Hook(BaseModel):
    id: int
    active: bool
    created_at: datetime
    updated_at: datetime
    deliveries_url: Optional[str] = None
    url: str


class Ping(BaseModel):
    hook_id: int
    hook: Hook
    repository: Optional[Repository] = None
    zen: str


WebhookPayload = Union[Push, Ping]


def parse_payload(data: Dict[str, Any]) -> WebhookPayload:
    """
    Validate a raw webhook body as a Ping (has `hook_id`) or a Push.

    Raises pydantic.ValidationError if the body matches neither.
    """
    if "hook_id" in data:
        return Ping.model_validate(data)
    return Push.model_validate(data)


def _first_line(message: str) -> str:
    lines = message.splitlines()
    return lines[0] if lines else ""


def format_push_message(push: Push) -> str:
    parts = [f"GitHub push\nrepo: {push.repository.full_name} branch: {push.ref}"]

    if push.deleted:
        parts.append("\n- branch deleted")
    elif push.created:
        parts.append("\n- branch created")
    else:
        parts.append("\n- branch updated")

    if push.forced:
        parts.append("\n- **force was used**")

    if push.head_commit is not None:
        commit = push.head_commit
        parts.append(f"\n\nHEAD commit {short_sha(commit.id)}: {_first_line(commit.message)}")
        parts.append(f"\ncompare changes: {push.compare}")

    if push.commits:
        parts.append(f"\n\n### {len(push.commits)} commit(s):")

    for commit in push.commits:
        parts.append(f"\n- {short_sha(commit.id)}: {_first_line(commit.message)}")

    return "".join(parts)


def format_ping_message(ping: Ping) -> str:
    return f"GitHub pinged green {ping.hook_id}\n{ping.hook.url}"


def format_message(payload: WebhookPayload) -> str:
    if isinstance(payload, Ping):
        return format_ping_message(payload)
    return format_push_message(payload)

# core/deploy.py

from __future__ import annotations

import logging
import os
import stat
import tempfile
import threading
from dataclasses import dataclass
from typing import Optional

from core.config import Config
from core.flake import current_rev, update_rev
from core.github import Ping, Push, WebhookPayload, format_message
from core.ultron import UltronClient, UltronError
from core.validators import is_commit_sha

logger = logging.getLogger(__name__)

_deploy_lock = threading.Lock()


class InvalidRevError(ValueError):
    def __init__(self, rev: str):
        self.rev = rev
        super().__init__(f"'{rev}' is not a full 40 character commit sha")


@dataclass
class RevChange:
    old: str
    new: str
    changed: bool


@dataclass
class WebhookResult:
    event: str
    message: str
    notified: bool
    notify_error: Optional[str] = None
    rev_change: Optional[RevChange] = None


def read_flake(path: str) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_flake(path: str, text: str) -> None:
    """Write text to path through a temp file in the same directory, keeping its mode."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".flake-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        if os.path.exists(path):
            os.chmod(tmp_path, stat.S_IMODE(os.stat(path).st_mode))
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def read_rev(flake_path: str, input_name: str) -> str:
    return current_rev(read_flake(flake_path), input_name)


def deploy_rev(flake_path: str, new_rev: str, input_name: str) -> RevChange:
    """
    Pin input_name in the flake at flake_path to new_rev.

    The file is only rewritten when the rev actually changes. Deploys are
    serialized by a module-level lock.
    """
    if not is_commit_sha(new_rev):
        raise InvalidRevError(new_rev)

    with _deploy_lock:
        text = read_flake(flake_path)
        old_rev = current_rev(text, input_name)
        if old_rev == new_rev:
            logger.info("Flake input %s already pinned to %s", input_name, new_rev)
            return RevChange(old=old_rev, new=new_rev, changed=False)

        updated = update_rev(text, new_rev, input_name)
        write_flake(flake_path, updated)

    logger.info("Updated flake input %s: %s -> %s", input_name, old_rev, new_rev)
    return RevChange(old=old_rev, new=new_rev, changed=True)


def should_deploy(push: Push, repository: str, branch: str) -> bool:
    if push.deleted:
        return False
    if push.repository.full_name != repository or push.ref != branch:
        return False
    return is_commit_sha(push.after)


def _notify(notifier: Optional[UltronClient], message: str) -> Optional[str]:
    if notifier is None:
        logger.debug("No notifier configured; skipping notification")
        return "notifier not configured"
    try:
        notifier.send(message)
    except UltronError as e:
        logger.error("Failed to send deployment notification to Ultron: %s", e)
        return str(e)
    return None


def handle_webhook(
    payload: WebhookPayload,
    config: Config,
    notifier: Optional[UltronClient] = None,
) -> WebhookResult:
    """
    Relay a GitHub webhook to chat and, for a push to the deploy branch,
    pin the flake input to the pushed commit.
    """
    message = format_message(payload)
    notify_error = _notify(notifier, message)
    rev_change = None

    if isinstance(payload, Ping):
        logger.info("Received ping webhook: hook %s", payload.hook_id)
        event = "ping"
    else:
        logger.info(
            "Received push webhook: %s %s", payload.repository.full_name, payload.ref
        )
        event = "push"
        if should_deploy(payload, config.deploy.repository, config.deploy.branch):
            rev_change = deploy_rev(config.flake.path, payload.after, config.flake.input)

    return WebhookResult(
        event=event,
        message=message,
        notified=notify_error is None,
        notify_error=notify_error,
        rev_change=rev_change,
    )

# core/ultron.py
"""Relay chat notifications through the Ultron command API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class UltronError(Exception):
    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(message)


class UltronClient:
    def __init__(
        self,
        url: str,
        channel: str,
        user: str = "green",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.channel = channel
        self.user = user
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_payload(self, message: str) -> Dict[str, Any]:
        return {
            "channel": self.channel,
            "event_input": f"echo {message}",
            "user": self.user,
            "event_type": "command",
        }

    def send(self, message: str) -> None:
        """POST message to the configured channel; raise UltronError on failure."""
        try:
            resp = self.session.post(
                self.url,
                json=self.build_payload(message),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Failed to send request to Ultron API: %s", e)
            raise UltronError(f"request to {self.url} failed: {e}") from e

        if resp.status_code >= 300:
            raise UltronError(
                f"error response {resp.status_code}: {resp.text}",
                status=resp.status_code,
                body=resp.text,
            )

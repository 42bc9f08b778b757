"""
tests/helpers.py — Fake backend and async runner shared by the test modules
============================================================================
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qsl

import httpx

from kelasguru.client.transport import ApiTransport

BACKEND_URL = "https://backend.test/exec"

Reply = dict | httpx.Response | Callable[[dict[str, str]], Any]


# Helper to run async tests without pytest-asyncio
def run_async(coro):
    """Run an async coroutine to completion in a fresh event loop."""
    return asyncio.run(coro)


class FakeBackend:
    """Apps Script stand-in: answers by ``action`` and records every form.

    *replies* maps an action name to a JSON body, an ``httpx.Response``,
    or a callable taking the decoded form (it may raise an httpx error).
    Unknown actions answer ``{"success": false}``.
    """

    def __init__(self, replies: dict[str, Reply] | None = None) -> None:
        self.replies: dict[str, Reply] = dict(replies or {})
        self.calls: list[dict[str, str]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        form = dict(parse_qsl(request.content.decode(), keep_blank_values=True))
        self.calls.append(form)
        reply = self.replies.get(
            form.get("action", ""), {"success": False, "error": "Unknown action"}
        )
        if callable(reply):
            reply = reply(form)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)

    def transport(self, url: str = BACKEND_URL) -> ApiTransport:
        return ApiTransport(url, transport=httpx.MockTransport(self.handler))

    def actions(self) -> list[str]:
        return [c["action"] for c in self.calls]

    def count(self, action: str) -> int:
        return self.actions().count(action)

    def form_for(self, action: str) -> dict[str, str]:
        """The last form sent with *action*."""
        for form in reversed(self.calls):
            if form["action"] == action:
                return form
        raise AssertionError(f"{action} was never called")

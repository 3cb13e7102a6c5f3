"""
Pytest configuration and fixtures.
"""
import asyncio
from typing import Any, Dict, List, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from viteset_client import ClientConfig, FetchOutcome


class ScriptedFetcher:
    """Fake fetcher that replays a list of outcomes, then reports UNCHANGED."""

    def __init__(self, outcomes: Optional[List[Any]] = None):
        self.outcomes = list(outcomes or [])
        self.etags: List[Optional[str]] = []
        self.exhausted = asyncio.Event()

    @property
    def calls(self) -> int:
        return len(self.etags)

    async def fetch(self, last_etag: Optional[str] = None) -> FetchOutcome:
        self.etags.append(last_etag)
        if not self.outcomes:
            self.exhausted.set()
            return FetchOutcome.unchanged()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Poll predicate until it is true or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            pytest.fail("condition not reached in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def config() -> ClientConfig:
    """Config with a fast interval for tests."""
    return ClientConfig(blob="app-config", secret="s3cret", host="http://viteset.test", interval_seconds=0.01)


@pytest.fixture
async def blob_server():
    """
    In-process Viteset-like server.

    Serves GET /{blob} from a mutable dict so tests can change the value,
    status and ETag between polls. Every request's headers are recorded.
    """
    state: Dict[str, Any] = {
        "status": 200,
        "body": b"hello",
        "etag": '"v1"',
        "requests": [],
    }

    async def handler(request: web.Request) -> web.Response:
        state["requests"].append(
            {"blob": request.match_info["blob"], "headers": dict(request.headers)}
        )
        etag = state["etag"]
        if etag is not None and request.headers.get("If-None-Match") == etag:
            return web.Response(status=304)
        headers = {"ETag": etag} if etag is not None and state["status"] == 200 else None
        return web.Response(status=state["status"], body=state["body"], headers=headers)

    app = web.Application()
    app.router.add_get("/{blob}", handler)

    server = TestServer(app)
    await server.start_server()
    state["host"] = str(server.make_url("")).rstrip("/")

    yield state

    await server.close()

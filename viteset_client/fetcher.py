"""
CONDITIONAL FETCHER

This module performs a single retrieval of a blob's current value.
It uses the ETag from the previous successful fetch so the server can
answer 304 Not Modified instead of re-sending unchanged data.

CONSTRAINTS:
- One attempt per call (no retries, no backoff)
- Stateless: the last ETag is an argument, the new ETag is a return value
- Never raises for fetch failures; they come back as FetchOutcome.failed()
"""

import asyncio
from typing import Dict, Optional

import aiohttp
from loguru import logger

from . import __version__
from .config import DEFAULT_TIMEOUT_SECONDS
from .exceptions import ProtocolError, TransportError
from .types import FetchOutcome

USER_AGENT = f"Viteset-Client-Python/{__version__}"


class BlobFetcher:
    """
    Fetches one blob from the Viteset API.

    FAILURE SEMANTICS:
    - 304 Not Modified -> UNCHANGED (body discarded)
    - 200 OK -> CHANGED with the body and the ETag header
    - Any other status -> FAILED with ProtocolError (status + body)
    - Network error, timeout, bad URL -> FAILED with TransportError
    """

    def __init__(
        self,
        host: str,
        blob: str,
        secret: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize fetcher.

        Args:
            host: Base URL of the Viteset API (e.g., "https://api.viteset.com")
            blob: Blob name
            secret: Bearer secret with read access to the blob
            timeout_seconds: Total request timeout in seconds
            session: Optional shared session. Without one, each fetch opens
                     and closes its own session.
        """
        self.host = host.rstrip("/")
        self.blob = blob
        self.secret = secret
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.session = session

    @property
    def url(self) -> str:
        return f"{self.host}/{self.blob}"

    def build_headers(self, last_etag: Optional[str]) -> Dict[str, str]:
        """Request headers for a fetch, conditional if last_etag is known."""
        headers = {
            "User-Agent": USER_AGENT,
            "Authorization": f"Bearer {self.secret}",
        }
        if last_etag is not None:
            headers["If-None-Match"] = last_etag
        return headers

    async def fetch(self, last_etag: Optional[str] = None) -> FetchOutcome:
        """
        Fetch the latest value, obeying caching if last_etag is given.

        Calls: GET {host}/{blob}

        Args:
            last_etag: ETag returned by the last CHANGED outcome, if any

        Returns:
            FetchOutcome (UNCHANGED, CHANGED or FAILED)
        """
        headers = self.build_headers(last_etag)

        try:
            if self.session is not None:
                return await self._request(self.session, headers)

            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                return await self._request(session, headers)

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            # Connection refused, DNS failure, timeout, malformed URL, etc.
            logger.warning(f"Failed to fetch blob {self.blob!r} (transport error): {e!r}")
            return FetchOutcome.failed(TransportError(e))

    async def _request(
        self, session: aiohttp.ClientSession, headers: Dict[str, str]
    ) -> FetchOutcome:
        async with session.get(self.url, headers=headers, timeout=self.timeout) as response:
            data = await response.read()

            if response.status == 304:
                return FetchOutcome.unchanged()

            if response.status != 200:
                body = data.decode("utf-8", errors="replace")
                logger.warning(
                    f"Viteset API returned non-200 status for blob {self.blob!r}: "
                    f"{response.status}"
                )
                return FetchOutcome.failed(ProtocolError(response.status, body))

            return FetchOutcome.changed(data, response.headers.get("ETag"))

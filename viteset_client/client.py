"""
SUBSCRIPTION CONTROLLER

This module provides the client that watches one Viteset blob and streams
its changes to a subscriber.

EXECUTION MODEL:
- One background asyncio task per subscription
- First fetch immediately, then one fetch per interval
- Fetches are sequential; the next wait starts once the previous fetch
  and its delivery have finished, so ticks never overlap
- Fetch failures are delivered to the subscriber and never stop the loop
- cancel() stops the task; nothing is delivered afterwards

LIFECYCLE:
IDLE -> ACTIVE (subscribe) -> CANCELED (cancel). A canceled client is
not reused; create a new one instead.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

import aiohttp
from loguru import logger

from .config import MIN_INTERVAL_SECONDS, ClientConfig
from .exceptions import AlreadyActiveError, MissingFieldError, TransportError, describe
from .fetcher import BlobFetcher
from .stream import UpdateStream
from .types import FetchOutcome, FetchResult, SubscriptionStatus, Update

UpdateCallback = Callable[[Update], Union[None, Awaitable[None]]]


class VitesetClient:
    """
    Watches a blob and sends updates through an UpdateStream.

    Uses ETags so that unchanged blobs cost the server a 304 instead of
    the full value.

    Example:
        client = VitesetClient(ClientConfig(blob="SOME_BLOB", secret="SOME_SECRET"))
        async for update in client.subscribe():
            if update.error is not None:
                # Temporary network issues usually resolve themselves.
                logger.warning(update.error)
                continue
            apply_config(update.value)
    """

    def __init__(self, config: ClientConfig, fetcher: Optional[BlobFetcher] = None):
        """
        Initialize client.

        Args:
            config: Blob, secret and polling settings
            fetcher: Optional fetcher to use instead of one built from config
        """
        self.config = config
        self._fetcher = fetcher

        # Subscription state, written only by the polling task
        self._last_value: Optional[bytes] = None
        self._last_etag: Optional[str] = None

        self._status = SubscriptionStatus.IDLE
        self._task: Optional[asyncio.Task] = None
        self._stream: Optional[UpdateStream] = None
        # Created in subscribe() so it binds to the loop running the task
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def status(self) -> SubscriptionStatus:
        return self._status

    @property
    def active(self) -> bool:
        """True while a polling task is live."""
        return self._status == SubscriptionStatus.ACTIVE

    @property
    def last_value(self) -> Optional[bytes]:
        """Most recently delivered blob value."""
        return self._last_value

    @property
    def last_etag(self) -> Optional[str]:
        return self._last_etag

    def subscribe(self) -> UpdateStream:
        """
        Start watching the blob for changes.

        Must be called from a running event loop. The first fetch happens
        right away, so the initial value arrives without waiting a full
        interval.

        Returns:
            UpdateStream yielding an Update per change or failed fetch

        Raises:
            AlreadyActiveError: If this client is active or was canceled
            MissingFieldError: If blob or secret is empty
        """
        if self._status == SubscriptionStatus.ACTIVE:
            raise AlreadyActiveError()
        if self._status == SubscriptionStatus.CANCELED:
            raise AlreadyActiveError("client subscription was canceled and cannot be reused")
        if not self.config.blob:
            raise MissingFieldError("blob name")
        if not self.config.secret:
            raise MissingFieldError("secret")

        if self.config.below_recommended_interval:
            logger.warning(
                f"Polling interval {self.config.interval_seconds}s is below the "
                f"recommended minimum of {MIN_INTERVAL_SECONDS}s; "
                f"this increases load on Viteset servers"
            )

        logger.info(
            f"Subscribing to blob {self.config.blob!r} at {self.config.url} "
            f"with interval={self.config.interval_seconds}s"
        )

        self._stream = UpdateStream(maxsize=self.config.buffer_size)
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._poll_loop(self._stream, self._stop_event))
        self._task.add_done_callback(self._on_task_done)
        self._status = SubscriptionStatus.ACTIVE
        return self._stream

    def cancel(self) -> None:
        """
        Cancel the subscription.

        Polling stops and no further updates are delivered on the stream,
        including ones already buffered. A no-op if not active.

        Does NOT wait for the task to exit; use aclose() for that.
        """
        if not self.active:
            return

        logger.info(f"Canceling subscription to blob {self.config.blob!r}")
        self._status = SubscriptionStatus.CANCELED
        if self._stop_event is not None:
            self._stop_event.set()
        if self._task is not None:
            self._task.cancel()
        if self._stream is not None:
            self._stream.close()

    async def aclose(self) -> None:
        """Cancel the subscription and wait for the polling task to exit."""
        self.cancel()

        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass

            self._task = None

    async def listen(self, on_update: UpdateCallback) -> None:
        """
        Subscribe and hand every update to a callback.

        on_update may be a plain function or a coroutine function; it is
        awaited before the next update is read. Returns once the
        subscription is canceled. If on_update raises, or the listening
        task itself is cancelled, the subscription is closed too.
        """
        stream = self.subscribe()
        try:
            async for update in stream:
                result = on_update(update)
                if inspect.isawaitable(result):
                    await result
        finally:
            await self.aclose()

    async def __aenter__(self) -> "VitesetClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _on_task_done(self, task: asyncio.Task) -> None:
        """
        Close the subscription if the polling task died with an error.

        Fetch failures never get here; only bugs (e.g. a malformed
        FetchOutcome) do. The reader is released instead of waiting forever.
        """
        if task.cancelled() or task.exception() is None:
            return

        logger.error(
            f"Polling loop for blob {self.config.blob!r} crashed: {describe(task.exception())}"
        )
        if self._task is task:
            self._task = None
        self._status = SubscriptionStatus.CANCELED
        if self._stream is not None:
            self._stream.close()

    async def _poll_loop(self, stream: UpdateStream, stop_event: asyncio.Event) -> None:
        """
        Background polling loop.

        Runs until cancelled.

        CRITICAL:
        - This MUST NOT end on fetch errors
        - The etag from the last change is passed to the next fetch
        """
        logger.info(f"Polling loop started for blob {self.config.blob!r}")

        session: Optional[aiohttp.ClientSession] = None
        fetcher = self._fetcher
        if fetcher is None:
            session = aiohttp.ClientSession()
            fetcher = BlobFetcher(
                host=self.config.host,
                blob=self.config.blob,
                secret=self.config.secret,
                timeout_seconds=self.config.timeout_seconds,
                session=session,
            )

        try:
            while not stop_event.is_set():
                outcome = await self._fetch_once(fetcher)
                await self._handle_outcome(outcome, stream)

                # Wait for next tick or stop signal
                try:
                    await asyncio.wait_for(
                        stop_event.wait(),
                        timeout=self.config.interval_seconds
                    )
                    break

                except asyncio.TimeoutError:
                    pass

        except asyncio.CancelledError:
            logger.info(f"Polling loop cancelled for blob {self.config.blob!r}")
            raise

        finally:
            if session is not None:
                await session.close()
            logger.info(f"Polling loop exited for blob {self.config.blob!r}")

    async def _fetch_once(self, fetcher: BlobFetcher) -> FetchOutcome:
        try:
            return await fetcher.fetch(self._last_etag)

        except asyncio.CancelledError:
            raise

        except Exception as e:
            # Fetchers report failures as outcomes; anything else is a bug
            # in the fetcher, surfaced to the subscriber like a failed fetch.
            logger.error(f"Unexpected error fetching blob {self.config.blob!r}: {describe(e)}")
            return FetchOutcome.failed(TransportError(e))

    async def _handle_outcome(self, outcome: FetchOutcome, stream: UpdateStream) -> None:
        if outcome.result == FetchResult.FAILED:
            logger.debug(f"Fetch failed for blob {self.config.blob!r}: {describe(outcome.error)}")
            await stream.put(Update.failed(outcome.error))

        elif outcome.result == FetchResult.UNCHANGED:
            logger.debug(f"Blob {self.config.blob!r} unchanged")

        else:
            logger.debug(
                f"Blob {self.config.blob!r} changed "
                f"({len(outcome.value)} bytes, etag={outcome.etag!r})"
            )
            await stream.put(Update.changed(outcome.value))
            self._last_value = outcome.value
            self._last_etag = outcome.etag

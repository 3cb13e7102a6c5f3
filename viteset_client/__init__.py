"""
Viteset Client

A client for the Viteset API: watch a blob and get notified when its
value changes.

To get started, create a client for your target blob, then subscribe:

    client = VitesetClient(ClientConfig(blob="SOME_BLOB_NAME", secret="SOME_CLIENT_SECRET"))

    async for update in client.subscribe():
        if update.error is not None:
            # Failure to fetch an update isn't all that bad.
            # Just keep using the last value for now.
            logger.warning(update.error)
            continue

        # Blob values are provided as bytes; hand them to your parser of choice
        update_my_app_config(update.value)

EXPORTS:
- VitesetClient: Subscription controller (subscribe / cancel / active)
- BlobFetcher: Single conditional fetch
- ClientConfig: Configuration and defaults
- Update, FetchOutcome, FetchResult, SubscriptionStatus: Core types
- Error hierarchy rooted at VitesetError
"""

__version__ = "1.0.0"

from .client import VitesetClient
from .config import (
    DEFAULT_HOST,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    MIN_INTERVAL_SECONDS,
    ClientConfig,
)
from .exceptions import (
    AlreadyActiveError,
    ConfigurationError,
    FetchError,
    MissingFieldError,
    ProtocolError,
    TransportError,
    VitesetError,
)
from .fetcher import USER_AGENT, BlobFetcher
from .stream import StreamClosed, UpdateStream
from .types import FetchOutcome, FetchResult, SubscriptionStatus, Update

__all__ = [
    "VitesetClient",
    "BlobFetcher",
    "ClientConfig",
    "UpdateStream",
    "StreamClosed",
    "Update",
    "FetchOutcome",
    "FetchResult",
    "SubscriptionStatus",
    "VitesetError",
    "ConfigurationError",
    "MissingFieldError",
    "AlreadyActiveError",
    "FetchError",
    "TransportError",
    "ProtocolError",
    "DEFAULT_HOST",
    "DEFAULT_INTERVAL_SECONDS",
    "DEFAULT_TIMEOUT_SECONDS",
    "MIN_INTERVAL_SECONDS",
    "USER_AGENT",
]

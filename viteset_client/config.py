"""
Client configuration.

ClientConfig is the one place where defaults live. blob and secret may be
left empty here; subscribe() refuses to start until both are set.

Please keep interval_seconds at or above MIN_INTERVAL_SECONDS: polling faster
puts real load on the Viteset servers. Smaller values are accepted but logged
as a warning when a subscription starts.
"""

import os
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field, field_validator

# The default Viteset host to fetch blobs from.
DEFAULT_HOST = "https://api.viteset.com"

# The default interval for polling for blob updates.
DEFAULT_INTERVAL_SECONDS = 15.0

# Recommended floor for the polling interval.
MIN_INTERVAL_SECONDS = 15.0

# Per-request timeout for a single fetch.
DEFAULT_TIMEOUT_SECONDS = 10.0


class ClientConfig(BaseModel):
    """Configuration for watching one blob."""

    blob: str = Field(default="", description="Name of the blob to subscribe to")
    secret: str = Field(default="", description="Secret for a client with access to the blob")
    host: str = Field(default=DEFAULT_HOST, description="Base URL of the Viteset API")
    interval_seconds: float = Field(
        default=DEFAULT_INTERVAL_SECONDS,
        ge=0,
        description="Polling interval; 0 means the default",
    )
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    buffer_size: int = Field(default=1, ge=1, description="Undelivered updates held before polling blocks")

    @field_validator("host", mode="before")
    @classmethod
    def default_host(cls, v):
        """Empty host means the production host."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_HOST
        return v.strip().rstrip("/")

    @field_validator("interval_seconds", mode="before")
    @classmethod
    def default_interval(cls, v):
        """Unset or zero interval means the default interval."""
        if v is None or v == 0 or v == "":
            return DEFAULT_INTERVAL_SECONDS
        return v

    @property
    def url(self) -> str:
        """Full URL of the watched blob."""
        return f"{self.host}/{self.blob}"

    @property
    def below_recommended_interval(self) -> bool:
        return self.interval_seconds < MIN_INTERVAL_SECONDS

    def __repr__(self) -> str:
        """Representation that never reveals the secret."""
        return (
            f"ClientConfig(blob={self.blob!r}, host={self.host!r}, "
            f"interval_seconds={self.interval_seconds}, "
            f"secret={'***' if self.secret else ''!r})"
        )

    __str__ = __repr__

    @classmethod
    def from_env(cls, prefix: str = "VITESET_", **overrides) -> "ClientConfig":
        """
        Build a config from environment variables.

        Reads {prefix}BLOB, {prefix}SECRET, {prefix}HOST and
        {prefix}INTERVAL_SECONDS. Keyword overrides that are not None take
        precedence over the environment.

        An interval that does not parse as a number falls back to the
        default with a warning.
        """
        values = {
            "blob": os.getenv(f"{prefix}BLOB", ""),
            "secret": os.getenv(f"{prefix}SECRET", ""),
            "host": os.getenv(f"{prefix}HOST", ""),
        }

        raw_interval: Optional[str] = os.getenv(f"{prefix}INTERVAL_SECONDS")
        if raw_interval:
            try:
                values["interval_seconds"] = float(raw_interval)
            except ValueError:
                logger.warning(
                    f"Invalid {prefix}INTERVAL_SECONDS={raw_interval!r}, "
                    f"using default {DEFAULT_INTERVAL_SECONDS}"
                )

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

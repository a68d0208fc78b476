"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, telnetctl.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from telnetctl.domain.timeout import DEFAULT_TIMEOUT_SECONDS


class ConnectionConfig(BaseModel):
    """Validated target of a single run, built once before resolution."""

    model_config = {"frozen": True}

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    connect_timeout: float = DEFAULT_TIMEOUT_SECONDS


class RelayConfig(BaseModel):
    """[relay] section."""

    model_config = {"frozen": True}

    buffer_size: int = Field(default=1024, gt=0)
    # Upper bound on how long one direction takes to notice the other stopped.
    poll_interval: float = Field(default=0.05, gt=0)

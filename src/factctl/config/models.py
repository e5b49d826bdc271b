"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, factctl.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from factctl.domain.lifecycle import OverlapPolicy
from factctl.infrastructure.receivers import DEFAULT_FACT_URL, DEFAULT_TIMEOUT
from factctl.services.invoker import DEFAULT_INTERVAL

# --- factctl.toml sections ---


class FetchConfig(BaseModel):
    """[fetch] section."""

    model_config = {"frozen": True}

    url: str = DEFAULT_FACT_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)


class ScheduleConfig(BaseModel):
    """[schedule] section."""

    model_config = {"frozen": True}

    interval: int = Field(default=DEFAULT_INTERVAL, ge=1)
    overlap: OverlapPolicy = OverlapPolicy.ALLOW


"""Session configuration."""

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nonvalid.errors import ConfigError

LeakPolicy = Literal["raise", "warn", "ignore"]

ENV_LEAK_POLICY = "NONVALID_LEAK_POLICY"
ENV_MAX_DEPTH = "NONVALID_MAX_DEPTH"


class SessionConfig(BaseModel):
    """Tunables of a validation session.

    Attributes:
        leak_policy: What to do with deferred links left unconsumed when the
            outermost deferred scope exits.
        max_depth: Maximum number of path entries below the root; unlimited
            when None.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    leak_policy: LeakPolicy = "raise"
    max_depth: Optional[int] = Field(default=None, ge=1)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SessionConfig":
        env = os.environ if environ is None else environ
        data: dict[str, object] = {}
        if env.get(ENV_LEAK_POLICY):
            data["leak_policy"] = env[ENV_LEAK_POLICY].strip().lower()
        if env.get(ENV_MAX_DEPTH):
            data["max_depth"] = env[ENV_MAX_DEPTH].strip()
        return build_config(data)


def build_config(data: Mapping[str, object]) -> SessionConfig:
    try:
        return SessionConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid session configuration: {exc}") from exc

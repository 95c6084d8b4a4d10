"""Client settings. Defaults target the public JSONPlaceholder API; override via env."""

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "TYPEDREST_"

DEFAULT_HOST = "jsonplaceholder.typicode.com"
DEFAULT_TIMEOUT_SECONDS = 5.0


class ClientSettings(BaseModel):
    scheme: Literal["https", "http"] = "https"
    host: str = Field(default=DEFAULT_HOST, min_length=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, allow_inf_nan=False)
    user_agent: str = "typedrest/0.1"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name in ("scheme", "host", "timeout", "user_agent"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw:
                values[name] = raw
        return cls.model_validate(values)

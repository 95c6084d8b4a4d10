from __future__ import annotations

from typing import Literal, Optional
from urllib.parse import quote, urlencode

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH"})
JSON_MEDIA_TYPE = "application/json"


class Endpoint(BaseModel):
    """One API location: host + path + ordered query parameters."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., min_length=1)
    path: str
    query: dict[str, str] = Field(default_factory=dict)
    scheme: Literal["https", "http"] = "https"

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"path must start with '/': {v!r}")
        return v

    @property
    def url(self) -> httpx.URL:
        base = f"{self.scheme}://{self.host}{self.path}"
        if not self.query:
            return httpx.URL(base)
        # %20 for spaces, not form-style "+"
        return httpx.URL(f"{base}?{urlencode(self.query, quote_via=quote)}")


class RequestSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    endpoint: Endpoint
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None  # pre-encoded JSON text
    timeout: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def _body_only_for_payload_methods(self) -> "RequestSpec":
        if self.body is not None and self.method not in BODY_METHODS:
            raise ValueError(f"{self.method} requests cannot carry a body")
        return self

    def effective_headers(self) -> dict[str, str]:
        out = {"Accept": JSON_MEDIA_TYPE}
        if self.body is not None:
            out["Content-Type"] = JSON_MEDIA_TYPE
        out.update(self.headers)
        return out


class ResponseEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=100, le=599)
    body: str = ""
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

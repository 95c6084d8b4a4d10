from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from typedrest.config import ClientSettings
from typedrest.domain.models import Endpoint, RequestSpec, ResponseEnvelope
from typedrest.errors import NetworkError, RequestTimeoutError

logger = logging.getLogger(__name__)


class Transport:
    """
    Performs one HTTP request per `send` and hands back the raw envelope.

    Never decodes JSON and never judges status codes: a 404 or 500 is a
    perfectly good envelope at this layer. Only failures to get any response
    at all are raised (NetworkError / RequestTimeoutError).

    One instance wraps one httpx.AsyncClient and is safe to share between
    concurrent sends.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or ClientSettings()
        self._client = httpx.AsyncClient(
            transport=transport,
            timeout=self.settings.timeout,
            headers={"User-Agent": self.settings.user_agent},
        )

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def endpoint(self, path: str, query: Optional[dict[str, str]] = None) -> Endpoint:
        return Endpoint(
            scheme=self.settings.scheme,
            host=self.settings.host,
            path=path,
            query=query or {},
        )

    async def send(self, spec: RequestSpec) -> ResponseEnvelope:
        deadline = spec.timeout if spec.timeout is not None else self.settings.timeout
        request = self._client.build_request(
            spec.method,
            spec.endpoint.url,
            headers=spec.effective_headers(),
            content=spec.body.encode("utf-8") if spec.body is not None else None,
        )
        logger.debug("%s %s", spec.method, request.url)

        try:
            # wait_for bounds the whole exchange; httpx timeouts are per phase
            response = await asyncio.wait_for(self._client.send(request), timeout=deadline)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError(
                f"{spec.method} {request.url} timed out after {deadline:g}s"
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(f"{spec.method} {request.url} failed: {e}") from e
        except httpx.RequestError as e:
            # undecodable content encoding, redirect loops
            raise NetworkError(f"{spec.method} {request.url} failed: {e}") from e

        envelope = ResponseEnvelope(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )
        logger.debug("%s %s -> %d", spec.method, request.url, envelope.status_code)
        return envelope

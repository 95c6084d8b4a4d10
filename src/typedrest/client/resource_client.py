from __future__ import annotations

import asyncio
import logging
from typing import Any, Container, Generic, Iterable, Mapping, Optional, Sequence, Type, TypeVar, Union
from urllib.parse import quote

from typedrest.client.classify import SUCCESS_2XX, classify_status, failure_from
from typedrest.codec import json_value
from typedrest.domain.models import HttpMethod, RequestSpec, ResponseEnvelope
from typedrest.errors import ClientError
from typedrest.orchestrator.parallel import keep_alive
from typedrest.resources.model import Resource, decode_list
from typedrest.result import Failure, OperationResult, Success
from typedrest.transport.http import Transport

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Resource)
C = TypeVar("C", bound=Resource)

ResourceId = Union[int, str]


def stringify(value: Any) -> str:
    """Query values travel as strings; booleans follow JSON spelling."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ResourceClient(Generic[R]):
    """
    CRUD over one collection of a conventional REST server.

    Every operation returns an OperationResult and never raises for
    network, status or decode problems. No retries are attempted.
    """

    def __init__(self, transport: Transport, model: Type[R], collection: Optional[str] = None):
        self.transport = transport
        self.model = model
        self.collection = (collection or model.collection).strip("/")
        if not self.collection:
            raise ValueError(f"no collection configured for {model.__name__}")

    # ----------------------------
    # Paths / requests
    # ----------------------------

    def _collection_path(self) -> str:
        return f"/{self.collection}"

    def _item_path(self, resource_id: ResourceId) -> str:
        return f"/{self.collection}/{quote(str(resource_id), safe='')}"

    def _spec(
        self,
        method: HttpMethod,
        path: str,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[json_value.JsonValue] = None,
        timeout: Optional[float] = None,
    ) -> RequestSpec:
        return RequestSpec(
            method=method,
            endpoint=self.transport.endpoint(
                path, {k: stringify(v) for k, v in (query or {}).items()}
            ),
            body=json_value.encode(body) if body is not None else None,
            timeout=timeout,
        )

    async def _exchange(self, spec: RequestSpec, expected: Container[int]) -> ResponseEnvelope:
        envelope = await self.transport.send(spec)
        error = classify_status(envelope, expected)
        if error is not None:
            raise error
        return envelope

    def _context(self, spec: RequestSpec) -> str:
        return f"{spec.method} {spec.endpoint.path}"

    async def _one(
        self, spec: RequestSpec, expected: Container[int] = SUCCESS_2XX
    ) -> OperationResult[R]:
        try:
            envelope = await self._exchange(spec, expected)
            return Success(self.model.from_json(json_value.decode(envelope.body)))
        except ClientError as e:
            return failure_from(e, self._context(spec))

    async def _many(
        self, spec: RequestSpec, model: Type[C], expected: Container[int] = SUCCESS_2XX
    ) -> OperationResult[list[C]]:
        try:
            envelope = await self._exchange(spec, expected)
            return Success(decode_list(model, json_value.decode(envelope.body)))
        except ClientError as e:
            return failure_from(e, self._context(spec))

    # ----------------------------
    # Operations
    # ----------------------------

    async def get(self, resource_id: ResourceId, timeout: Optional[float] = None) -> OperationResult[R]:
        return await self._one(self._spec("GET", self._item_path(resource_id), timeout=timeout))

    async def list(self, filters: Optional[Mapping[str, Any]] = None) -> OperationResult[list[R]]:
        return await self._many(self._spec("GET", self._collection_path(), query=filters), self.model)

    async def list_page(
        self,
        page: int,
        per_page: int,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> OperationResult[list[R]]:
        """1-based pagination using the `_start` / `_limit` convention."""
        if page < 1 or per_page < 1:
            raise ValueError("page and per_page must be >= 1")
        query = dict(filters or {})
        query["_start"] = (page - 1) * per_page
        query["_limit"] = per_page
        return await self.list(query)

    async def children(
        self,
        parent_id: ResourceId,
        child_model: Type[C],
        parent_key: Optional[str] = None,
    ) -> OperationResult[list[C]]:
        """
        List records of another collection that point at one of ours,
        e.g. comments of a post: GET /comments?postId=1
        """
        key = parent_key or _singular_key(self.collection)
        spec = RequestSpec(
            method="GET",
            endpoint=self.transport.endpoint(
                f"/{child_model.collection}", {key: stringify(parent_id)}
            ),
        )
        return await self._many(spec, child_model)

    async def create(self, resource: R) -> OperationResult[R]:
        return await self._one(
            self._spec("POST", self._collection_path(), body=resource.to_json()),
            expected=(201,),
        )

    async def update(self, resource: R) -> OperationResult[R]:
        resource_id = getattr(resource, "id", None)
        if resource_id is None:
            raise ValueError(f"cannot update {type(resource).__name__} without an id")
        return await self._one(
            self._spec("PUT", self._item_path(resource_id), body=resource.to_json()),
            expected=(200,),
        )

    async def patch(self, resource_id: ResourceId, fields: Mapping[str, Any]) -> OperationResult[R]:
        return await self._one(
            self._spec("PATCH", self._item_path(resource_id), body=json_value.from_python(dict(fields))),
            expected=(200,),
        )

    async def delete(self, resource_id: ResourceId) -> OperationResult[None]:
        spec = self._spec("DELETE", self._item_path(resource_id))
        try:
            # 204 carries no body; a 200 body is not inspected
            await self._exchange(spec, (200, 204))
        except ClientError as e:
            return failure_from(e, self._context(spec))
        return Success(None)

    async def fetch_many(self, ids: Sequence[ResourceId]) -> OperationResult[list[R]]:
        """
        Concurrent `get` for every id.

        All requests are dispatched before any completes. Results come back in
        the order of `ids`. The first failure to complete decides the outcome;
        siblings still in flight are left to finish and are ignored.
        """
        tasks = [asyncio.ensure_future(self.get(i)) for i in ids]
        if not tasks:
            return Success([])
        for next_done in asyncio.as_completed(tasks):
            result = await next_done
            if isinstance(result, Failure):
                keep_alive(t for t in tasks if not t.done())
                return result
        return Success([t.result().value for t in tasks])


def _singular_key(collection: str) -> str:
    # posts -> postId, users -> userId
    name = collection.rsplit("/", 1)[-1]
    if name.endswith("s"):
        name = name[:-1]
    return f"{name}Id"


def clients_for(transport: Transport, models: Iterable[Type[Resource]]) -> dict[str, ResourceClient]:
    return {m.collection: ResourceClient(transport, m) for m in models}

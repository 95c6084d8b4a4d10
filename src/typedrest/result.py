from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from typedrest.errors import ClientError, DecodeError, NetworkError, RequestTimeoutError, StatusError

T = TypeVar("T")


class FailureKind(str, Enum):
    NETWORK = "network"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    STATUS = "status"
    DECODE = "decode"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str
    status_code: Optional[int] = None
    # original exception, kept for logging; not part of equality
    error: Optional[ClientError] = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        if self.error is not None:
            raise self.error
        if self.kind in (FailureKind.NOT_FOUND, FailureKind.STATUS) and self.status_code is not None:
            raise StatusError(self.status_code, self.message)
        raise _ERRORS.get(self.kind, ClientError)(self.message)

    @classmethod
    def from_error(cls, error: ClientError) -> "Failure":
        return cls(
            kind=_KINDS.get(error.kind, FailureKind.NETWORK),
            message=error.message,
            status_code=getattr(error, "status_code", None),
            error=error,
        )


OperationResult = Union[Success[T], Failure]

# a bare ClientError has no kind of its own and is reported as NETWORK
_KINDS = {k.value: k for k in FailureKind}

_ERRORS = {
    FailureKind.NETWORK: NetworkError,
    FailureKind.TIMEOUT: RequestTimeoutError,
    FailureKind.DECODE: DecodeError,
}

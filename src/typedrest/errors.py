from __future__ import annotations

from typing import Optional


class ClientError(Exception):
    """Base class for every failure raised below the resource client."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(ClientError):
    """The request never produced a response (DNS, refused connection, protocol error)."""

    kind = "network"


class RequestTimeoutError(ClientError):
    kind = "timeout"


class StatusError(ClientError):
    """The server answered, but not with a status the operation accepts."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        self.not_found = status_code == 404
        super().__init__(message or f"unexpected status {status_code}")

    @property
    def kind(self) -> str:  # type: ignore[override]
        return "not_found" if self.not_found else "status"


class DecodeError(ClientError):
    """
    Body could not be parsed or did not match the expected shape.

    `field` names the offending key, `index` the offending element of a list body.
    """

    kind = "decode"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        index: Optional[int] = None,
        expected: Optional[str] = None,
    ):
        self.field = field
        self.index = index
        self.expected = expected
        super().__init__(message)

    def at_index(self, index: int) -> "DecodeError":
        return DecodeError(
            f"element {index}: {self.message}",
            field=self.field,
            index=index,
            expected=self.expected,
        )

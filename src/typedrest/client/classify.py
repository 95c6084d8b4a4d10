from __future__ import annotations

import logging
from typing import Container, Optional

from typedrest.domain.models import ResponseEnvelope
from typedrest.errors import ClientError, StatusError
from typedrest.result import Failure

logger = logging.getLogger(__name__)

SUCCESS_2XX = range(200, 300)


def classify_status(envelope: ResponseEnvelope, expected: Container[int]) -> Optional[StatusError]:
    """Return a StatusError when the envelope's status is not one the operation accepts."""
    code = envelope.status_code
    if code in expected:
        return None
    if code == 404:
        return StatusError(404, "resource not found (404)")
    snippet = envelope.body[:200].strip()
    msg = f"unexpected status {code}"
    if snippet:
        msg = f"{msg}: {snippet}"
    return StatusError(code, msg)


def failure_from(error: ClientError, context: str = "") -> Failure:
    failure = Failure.from_error(error)
    logger.warning("%s%s failed (%s): %s", context, " " if context else "", failure.kind.value, failure.message)
    return failure

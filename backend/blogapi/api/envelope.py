"""Transport-independent response envelope.

Every response body has the same outer shape::

    {"status": <int>, "data": <any>, "message": <str>}

Error bodies add ``code`` and ``request_id``. Only the HTTP layer builds
envelopes; services return DTOs and raise domain errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Envelope:
    """
    Response envelope value.

    :ivar status: HTTP status code mirrored in the body.
    :ivar data: JSON-ready payload (already dumped by a schema).
    :ivar message: Human-readable summary.
    :ivar code: Stable snake_case error identifier (errors only).
    :ivar request_id: Correlation id (errors only).
    """

    status: int
    data: Any = None
    message: str = ""
    code: str | None = None
    request_id: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "status": self.status,
            "data": self.data,
            "message": self.message,
        }
        if self.code is not None:
            body["code"] = self.code
        if self.request_id is not None:
            body["request_id"] = self.request_id
        return body


def success(data: Any = None, message: str = "success", status: int = 200) -> Envelope:
    return Envelope(status=int(status), data=data, message=message)


def failure(
    message: str,
    status: int = 400,
    *,
    code: str = "bad_request",
    data: Any = None,
    request_id: str | None = None,
) -> Envelope:
    return Envelope(
        status=int(status), data=data, message=message, code=code, request_id=request_id
    )

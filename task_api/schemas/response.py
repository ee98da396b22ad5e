"""Transport-agnostic success envelope.

An ``ApiResponse`` pairs a status classification with an optional payload.
It never serializes anything itself; see ``task_api.api.rendering`` for the
HTTP side.
"""

from enum import IntEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

T = TypeVar("T")


class StatusCode(IntEnum):
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500


_WITH_PAYLOAD = (StatusCode.OK, StatusCode.CREATED, StatusCode.ACCEPTED)


class ApiResponse(BaseModel, Generic[T]):
    """Immutable success result produced once per handler invocation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: StatusCode
    data: T | None = None

    @model_validator(mode="after")
    def check_payload_matches_status(self) -> "ApiResponse[T]":
        if self.status == StatusCode.NO_CONTENT and self.data is not None:
            raise ValueError("204 No Content cannot carry a payload")
        if self.status in _WITH_PAYLOAD and self.data is None:
            raise ValueError(f"{self.status.value} {self.status.name} requires a payload")
        return self

    @property
    def has_payload(self) -> bool:
        return self.data is not None

    @classmethod
    def ok(cls, data: Any) -> "ApiResponse":
        """200 OK with data."""
        return cls(status=StatusCode.OK, data=data)

    @classmethod
    def created(cls, data: Any) -> "ApiResponse":
        """201 Created with data."""
        return cls(status=StatusCode.CREATED, data=data)

    @classmethod
    def accepted(cls, data: Any) -> "ApiResponse":
        """202 Accepted with data."""
        return cls(status=StatusCode.ACCEPTED, data=data)

    @classmethod
    def no_content(cls) -> "ApiResponse[None]":
        """204 No Content."""
        return cls(status=StatusCode.NO_CONTENT)

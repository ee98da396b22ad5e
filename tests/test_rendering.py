import json
import logging
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from task_api.api.exception_handlers import (
    internal_from_unhandled,
    register_exception_handlers,
)
from task_api.api.rendering import render, render_error
from task_api.core.config import Settings
from task_api.errors import (
    DatabaseError,
    DomainValidationError,
    DuplicateResourceError,
    InternalError,
    InvalidInputError,
    NotFoundError,
)
from task_api.schemas.response import ApiResponse, StatusCode
from task_api.schemas.task import Task


def _task() -> Task:
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    return Task(
        id=uuid.uuid4(),
        title="Write tests",
        description=None,
        completed=False,
        created_at=now,
        updated_at=now,
    )


# ============================================================================
# RESPONSE ENVELOPE
# ============================================================================


@pytest.mark.parametrize(
    "factory, expected",
    [
        (ApiResponse.ok, StatusCode.OK),
        (ApiResponse.created, StatusCode.CREATED),
        (ApiResponse.accepted, StatusCode.ACCEPTED),
    ],
)
def test_envelope_with_payload(factory, expected):
    """Test the payload factories set their classification."""
    envelope = factory({"message": "success"})
    assert envelope.status == expected
    assert envelope.has_payload
    assert envelope.data == {"message": "success"}


def test_envelope_no_content():
    """Test no_content carries no payload."""
    envelope = ApiResponse.no_content()
    assert envelope.status == StatusCode.NO_CONTENT
    assert envelope.data is None
    assert not envelope.has_payload


def test_envelope_rejects_payload_on_no_content():
    """Test 204 with a payload cannot be built."""
    with pytest.raises(ValueError):
        ApiResponse(status=StatusCode.NO_CONTENT, data={"x": 1})


def test_envelope_requires_payload_on_ok():
    """Test 200 without a payload cannot be built."""
    with pytest.raises(ValueError):
        ApiResponse(status=StatusCode.OK)


def test_envelope_is_immutable():
    """Test the envelope cannot be changed after construction."""
    envelope = ApiResponse.ok([1, 2])
    with pytest.raises(ValueError):
        envelope.status = StatusCode.CREATED


# ============================================================================
# SUCCESS RENDERING
# ============================================================================


def test_render_payload_is_flat():
    """Test the body is the payload serialization, without wrapper keys."""
    task = _task()
    response = render(ApiResponse.created(task))

    assert response.status_code == 201
    assert json.loads(response.body) == json.loads(task.model_dump_json())
    assert response.headers["content-type"] == "application/json"


def test_render_list_payload():
    """Test an empty list still renders as a JSON array."""
    response = render(ApiResponse.ok([]))
    assert response.status_code == 200
    assert json.loads(response.body) == []


def test_render_no_content_has_empty_body():
    """Test 204 renders with no body at all."""
    response = render(ApiResponse.no_content())
    assert response.status_code == 204
    assert response.body == b""


def test_render_accepted():
    """Test 202 renders its payload."""
    response = render(ApiResponse.accepted({"queued": True}))
    assert response.status_code == 202
    assert json.loads(response.body) == {"queued": True}


def test_render_headers_added_last():
    """Test caller headers are merged and override defaults."""
    response = render(
        ApiResponse.ok({"a": 1}),
        headers={"X-Custom-Header": "value", "Content-Type": "application/vnd.task+json"},
    )
    assert response.headers["x-custom-header"] == "value"
    assert response.headers["content-type"] == "application/vnd.task+json"


def test_task_dto_json_round_trip():
    """Test a Task DTO survives JSON encoding and decoding."""
    task = _task()
    assert Task.model_validate_json(task.model_dump_json()) == task


def test_task_dto_naive_timestamps_become_utc():
    """Test naive storage timestamps are reported in UTC."""
    naive = datetime(2026, 10, 19, 12, 0)
    task = Task(
        id=uuid.uuid4(),
        title="t",
        completed=False,
        created_at=naive,
        updated_at=naive,
    )
    assert task.created_at.tzinfo == timezone.utc
    assert task.model_dump(mode="json")["created_at"].endswith("Z")


def test_task_dto_aware_timestamps_converted_to_utc():
    """Test offsets other than UTC are converted, not just labelled."""
    local = datetime(2026, 10, 19, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    task = Task(
        id=uuid.uuid4(),
        title="t",
        completed=False,
        created_at=local,
        updated_at=local,
    )
    assert task.created_at == datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    assert task.created_at.utcoffset() == timedelta(0)
    assert task.model_dump(mode="json")["updated_at"] == "2026-10-19T12:00:00Z"


# ============================================================================
# ERROR RENDERING
# ============================================================================


ERROR_TABLE = [
    (NotFoundError("Task missing"), 404, "NOT_FOUND", "Task missing", None),
    (DuplicateResourceError("Already there"), 409, "DUPLICATE_ENTRY", "Already there", None),
    (DomainValidationError("Bad title"), 400, "VALIDATION_ERROR", "Bad title", None),
    (InvalidInputError("Invalid JSON: x"), 400, "INVALID_INPUT", "Invalid JSON: x", None),
    (
        DatabaseError("connection refused"),
        500,
        "DATABASE_ERROR",
        "An error occurred with the database",
        "connection refused",
    ),
    (
        InternalError("boom"),
        500,
        "INTERNAL_ERROR",
        "An internal server error occurred",
        "boom",
    ),
]


@pytest.mark.parametrize("exc, status_code, code, message, details", ERROR_TABLE)
def test_render_error_table(exc, status_code, code, message, details):
    """Test every error kind renders its status, code and message policy."""
    response = render_error(exc)
    body = json.loads(response.body)

    assert response.status_code == status_code
    assert body["error"] == code
    assert body["message"] == message
    if details is None:
        assert "details" not in body
    else:
        assert body["details"] == details


def test_error_status_code_pairs_are_unique():
    """Test each kind has its own (status, code) pair."""
    pairs = {(render_error(exc).status_code, code) for exc, _, code, _, _ in ERROR_TABLE}
    assert len(pairs) == len(ERROR_TABLE)


@pytest.mark.parametrize("exc", [row[0] for row in ERROR_TABLE])
def test_render_error_is_deterministic(exc):
    """Test rendering the same error twice is byte-identical."""
    first, second = render_error(exc), render_error(exc)
    assert first.status_code == second.status_code
    assert first.body == second.body


def test_render_error_without_details():
    """Test 5xx details can be suppressed."""
    response = render_error(DatabaseError("secret dsn"), include_details=False)
    assert json.loads(response.body) == {
        "error": "DATABASE_ERROR",
        "message": "An error occurred with the database",
    }


def test_subclass_uses_parent_policy():
    """Test subclasses of a kind render like the kind."""

    class TaskNotFound(NotFoundError):
        pass

    assert render_error(TaskNotFound("gone")).status_code == 404


# ============================================================================
# UNHANDLED EXCEPTIONS
# ============================================================================


def test_internal_from_unhandled_keeps_message():
    """Test the catch-all mapping keeps the diagnostic text."""
    assert internal_from_unhandled(RuntimeError("kaput")).message == "kaput"
    assert internal_from_unhandled(RuntimeError()).message == "RuntimeError"


def test_unhandled_exception_renders_internal_error(caplog):
    """Test an unexpected exception becomes a 500 INTERNAL_ERROR body."""
    app = FastAPI()
    app.state.settings = Settings(DATABASE_URL="sqlite://")
    register_exception_handlers(app)

    @app.get("/explode")
    def explode():
        raise RuntimeError("kaput")

    client = TestClient(app, raise_server_exceptions=False)
    with caplog.at_level(logging.ERROR, logger="task_api.api.exception_handlers"):
        response = client.get("/explode")

    errors = [
        record
        for record in caplog.records
        if record.name == "task_api.api.exception_handlers"
        and record.levelno >= logging.ERROR
    ]
    assert len(errors) == 1
    assert errors[0].exc_info is not None

    assert response.status_code == 500
    assert response.json() == {
        "error": "INTERNAL_ERROR",
        "message": "An internal server error occurred",
        "details": "kaput",
    }

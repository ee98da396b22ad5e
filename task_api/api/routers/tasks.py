import uuid

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from task_api.api.deps import get_task_service
from task_api.api.rendering import render
from task_api.schemas.error import ErrorResponse
from task_api.schemas.response import ApiResponse
from task_api.schemas.task import Task, TaskCreate, TaskUpdate
from task_api.services.task import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


@router.get("", response_model=list[Task])
def list_tasks(service: TaskService = Depends(get_task_service)) -> Response:
    """List all tasks. An empty store yields an empty array."""
    return render(ApiResponse.ok(service.get_all()))


@router.get("/{task_id}", response_model=Task, responses={**_NOT_FOUND, **_BAD_REQUEST})
def get_task(
    task_id: uuid.UUID,
    service: TaskService = Depends(get_task_service),
) -> Response:
    return render(ApiResponse.ok(service.get_by_id(task_id)))


@router.post(
    "",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    responses=_BAD_REQUEST,
)
def create_task(
    task_data: TaskCreate,
    service: TaskService = Depends(get_task_service),
) -> Response:
    """
    Create a new task.

    The title is trimmed and must be 1-255 characters. A blank description is
    stored as null. `completed` defaults to false.
    """
    return render(ApiResponse.created(service.create(task_data)))


@router.put("/{task_id}", response_model=Task, responses={**_NOT_FOUND, **_BAD_REQUEST})
def update_task(
    task_id: uuid.UUID,
    task_data: TaskUpdate,
    service: TaskService = Depends(get_task_service),
) -> Response:
    """
    Partially update a task. Only the fields present in the body change.
    """
    return render(ApiResponse.ok(service.update(task_id, task_data)))


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_NOT_FOUND, **_BAD_REQUEST},
)
def delete_task(
    task_id: uuid.UUID,
    service: TaskService = Depends(get_task_service),
) -> Response:
    service.delete(task_id)
    return render(ApiResponse.no_content())

import logging
import uuid

from task_api.errors import DomainValidationError, NotFoundError
from task_api.repositories.task import TaskRepository
from task_api.schemas.task import Task, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 255


def validate_title(title: str) -> str:
    """Return the trimmed title or raise DomainValidationError."""
    title = title.strip()
    if not title:
        raise DomainValidationError("Title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise DomainValidationError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters"
        )
    return title


def normalize_description(description: str | None) -> str | None:
    """Trim the description; blank means absent."""
    if description is None:
        return None
    return description.strip() or None


class TaskService:
    """Input validation and orchestration on top of TaskRepository."""

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    def get_all(self) -> list[Task]:
        return [Task.model_validate(task) for task in self.repository.find_all()]

    def get_by_id(self, task_id: uuid.UUID) -> Task:
        return Task.model_validate(self.repository.find_by_id(task_id))

    def create(self, task_data: TaskCreate) -> Task:
        """
        Create a task with domain validation.

        - Title is trimmed, must be non-empty and at most 255 characters
        - Description is trimmed; blank becomes absent

        Raises:
            DomainValidationError: If the title is invalid
            DuplicateResourceError: If the storage reports a key conflict
        """
        title = validate_title(task_data.title)
        task = self.repository.create(
            title=title,
            description=normalize_description(task_data.description),
            completed=task_data.completed,
        )
        logger.info("Created task %s", task.id)
        return Task.model_validate(task)

    def update(self, task_id: uuid.UUID, task_data: TaskUpdate) -> Task:
        """
        Update a task with domain validation.

        - Title rules apply only when a title is supplied
        - Validates task exists before any write, so a missing task is always
          NotFoundError whatever the storage does on an empty update

        Raises:
            DomainValidationError: If the supplied title is invalid
            NotFoundError: If task doesn't exist
        """
        title = None
        if task_data.title is not None:
            title = validate_title(task_data.title)

        self.repository.find_by_id(task_id)

        task = self.repository.update(
            task_id,
            title=title,
            description=normalize_description(task_data.description),
            completed=task_data.completed,
        )
        logger.info("Updated task %s", task_id)
        return Task.model_validate(task)

    def delete(self, task_id: uuid.UUID) -> None:
        """
        Delete a task.

        Existence is decided by the delete itself (rows affected), not by a
        separate lookup, so concurrent deletes cannot both succeed.

        Raises:
            NotFoundError: If task doesn't exist
        """
        if self.repository.delete(task_id) == 0:
            raise NotFoundError("Resource not found")
        logger.info("Deleted task %s", task_id)

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from task_api.db.models.task import Task as TaskModel
from task_api.repositories.errors import map_storage_error

logger = logging.getLogger(__name__)


class TaskRepository:
    """Pure data access for tasks. Every storage failure leaves as a DomainError."""

    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> list[TaskModel]:
        """Get all tasks."""
        try:
            return self.db.query(TaskModel).all()
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc

    def find_by_id(self, task_id: uuid.UUID) -> TaskModel:
        """Get a task by ID. Raises NotFoundError when absent."""
        try:
            return self.db.query(TaskModel).filter(TaskModel.id == task_id).one()
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc

    def create(
        self,
        title: str,
        description: str | None = None,
        completed: bool = False,
        task_id: uuid.UUID | None = None,
    ) -> TaskModel:
        """Create a new task in the database. Pure data access - no business logic."""
        db_task = TaskModel(
            id=task_id or uuid.uuid4(),
            title=title,
            description=description,
            completed=completed,
        )
        try:
            self.db.add(db_task)
            self.db.commit()
            self.db.refresh(db_task)
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc
        return db_task

    def update(
        self,
        task_id: uuid.UUID,
        title: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
    ) -> TaskModel:
        """Update a task. Arguments left as None are not modified."""
        try:
            task = self.db.query(TaskModel).filter(TaskModel.id == task_id).one()

            changed = False
            if title is not None:
                task.title = title
                changed = True
            if description is not None:
                task.description = description
                changed = True
            if completed is not None:
                task.completed = completed
                changed = True
            if changed:
                task.updated_at = datetime.now(timezone.utc)

            self.db.commit()
            self.db.refresh(task)
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc
        return task

    def delete(self, task_id: uuid.UUID) -> int:
        """Delete a task. Returns the number of rows removed (0 if absent)."""
        try:
            deleted = (
                self.db.query(TaskModel)
                .filter(TaskModel.id == task_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc
        return deleted

    def _fail(self, exc: SQLAlchemyError):
        try:
            self.db.rollback()
        except SQLAlchemyError as rollback_exc:
            logger.warning("Rollback after storage failure also failed: %s", rollback_exc)
        return map_storage_error(exc)

from task_api.db.models.task import Task

__all__ = ["Task"]

from fastapi import APIRouter

from task_api.api.routers import tasks

api_router = APIRouter()

api_router.include_router(tasks.router)

from fastapi import APIRouter
from . import tasks, notifications, prometheus

router = APIRouter()

router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
router.include_router(prometheus.router, prefix="/metrics", tags=["Metrics"])

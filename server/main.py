import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import inspect
from server.config import config
from server.database import engine, Base, SessionLocal
from server.dependencies import get_db  # noqa: F401  (re-exported for dependency overrides)
from server.routes import router
from server.routes.prometheus import metrics_middleware
import server.models  # noqa: F401  (registers tables)
from notifier.scheduler import NotificationScheduler

logger = logging.getLogger(__name__)

# =========================================================
# FASTAPI APP
# =========================================================

app = FastAPI(title="Task Notification API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register Prometheus middleware
app.middleware("http")(metrics_middleware)

# Include API Router
app.include_router(router)

notification_scheduler = None


@app.get("/health")
def health():
    return {"status": "ok"}

# =========================================================
# STARTUP / SHUTDOWN
# =========================================================
@app.on_event("startup")
def init_database():
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())
    missing = set(Base.metadata.tables) - existing_tables
    if missing:
        Base.metadata.create_all(bind=engine)
        logger.info(f"✅ Created tables: {sorted(missing)}")
    else:
        logger.info(f"ℹ️ Tables already exist: {sorted(existing_tables)}")


@app.on_event("startup")
def start_notification_scheduler():
    global notification_scheduler
    if not config.RUN_SCHEDULER:
        logger.info("RUN_SCHEDULER disabled; due-date notifications must run in a separate worker")
        return
    notification_scheduler = NotificationScheduler(SessionLocal)
    notification_scheduler.start()


@app.on_event("shutdown")
def stop_notification_scheduler():
    if notification_scheduler is not None:
        notification_scheduler.shutdown(wait=False)

from celery import Celery

from hse_kpi.core.config import settings
from hse_kpi.core.logging import configure_logging

configure_logging(settings.ENV)

celery_app = Celery(
    "hse_kpi",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["hse_kpi.worker.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.TZ,
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

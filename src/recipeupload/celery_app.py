"""Celery application configuration for scheduled maintenance tasks."""

import os
from datetime import timedelta

from celery import Celery

from recipeupload.config import get_settings

settings = get_settings()

celery_app = Celery(
    "recipeupload",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["recipeupload.tasks.cleanup"],
)

celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    # Result settings
    result_expires=86400 * 7,
    # Beat scheduler settings
    beat_schedule={
        "cleanup-expired-drafts": {
            "task": "recipeupload.tasks.cleanup.cleanup_expired_drafts_task",
            "schedule": timedelta(hours=24),
        },
    },
    worker_hijack_root_logger=False,
)

if os.name == "nt":
    celery_app.conf.update(
        worker_pool="solo",
    )

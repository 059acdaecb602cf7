"""
Celery application configuration.
"""

from celery import Celery
from celery.schedules import crontab

from todays_horoscope.config import settings

BROKER_URL = settings.redis_url or "redis://localhost:6379/0"

# Create Celery app
celery_app = Celery(
    "todays_horoscope",
    broker=BROKER_URL,
    backend=BROKER_URL,
    include=["todays_horoscope.workers.daily_horoscope"],
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=600,  # 12 signs x up to 4 calls each
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)

# Beat schedule for periodic tasks
celery_app.conf.beat_schedule = {
    # Fill today's cache for every sign before most readers arrive
    "daily-horoscope-batch": {
        "task": "todays_horoscope.workers.daily_horoscope.generate_daily_horoscopes",
        "schedule": crontab(hour=settings.batch_schedule_hour_utc, minute=0),
    },
}

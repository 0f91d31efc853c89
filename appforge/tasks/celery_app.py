from celery import Celery
from celery.signals import setup_logging
from appforge.core.config import settings
from appforge.core.logging import configure_logging

celery_app = Celery("appforge", broker=settings.redis_url, backend=settings.redis_url, include=["appforge.tasks.builds"])
celery_app.conf.update(task_track_started=True, result_expires=3600, broker_connection_retry_on_startup=True, worker_concurrency=settings.max_concurrent_builds,)


@setup_logging.connect
def _use_build_log_format(**kwargs):
    configure_logging()

from celery import Celery
from linkcheck.core.config import settings
import ssl

# Configure SSL for Redis if using rediss://
redis_options = {}
if settings.REDIS_URL.startswith('rediss://'):
    redis_options = {
        'broker_use_ssl': {
            'ssl_cert_reqs': ssl.CERT_REQUIRED,
            'ssl_ca_certs': None,
            'ssl_certfile': None,
            'ssl_keyfile': None
        },
        'redis_backend_use_ssl': {
            'ssl_cert_reqs': ssl.CERT_REQUIRED,
            'ssl_ca_certs': None,
            'ssl_certfile': None,
            'ssl_keyfile': None
        }
    }

celery_app = Celery(
    "link_checker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["linkcheck.services.scanner"]
)

celery_app.conf.update(
    **redis_options,
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=1800,  # 30 minutes
    task_soft_time_limit=1650,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    result_expires=3600,  # Results expire after 1 hour
    broker_connection_retry_on_startup=True,
    broker_connection_max_retries=100,
    task_routes={
        'linkcheck.services.scanner.check_page': {'queue': 'default'},
    },
    task_default_queue='default',
)

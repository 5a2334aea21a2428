"""
Django settings for the task management backend.

Every value comes from the environment (optionally seeded from a local .env
file). Nothing here opens a connection; stores and brokers are created lazily.
"""
import os
from pathlib import Path

from dotenv import load_dotenv
from kombu import Exchange, Queue

from .documentstore import get_documentstore_config

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env', override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {'1', 'true', 'yes', 'on'}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, '')
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: str) -> list:
    return [part.strip() for part in os.getenv(name, default).split(',') if part.strip()]


# =============================================================================
# Core
# =============================================================================

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'dev-only-insecure-secret-key')
DEBUG = _env_bool('DEBUG', False)
ENVIRONMENT = os.getenv('APP_ENV', 'development')
ALLOWED_HOSTS = _env_list('ALLOWED_HOSTS', 'localhost,127.0.0.1')

INSTALLED_APPS = [
    'django.contrib.staticfiles',
    'ninja',
    'apps.core',
    'apps.tasks',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {},
    },
]

# Tasks live in MongoDB; Django's ORM is not used.
DATABASES = {}

USE_TZ = True
TIME_ZONE = 'UTC'
STATIC_URL = 'static/'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# =============================================================================
# Surfaces
# =============================================================================

API_PREFIX = os.getenv('API_PREFIX', '/api/v1')
GRAPHQL_PATH = os.getenv('GRAPHQL_PATH', '/graphql')
GRAPHQL_PLAYGROUND = _env_bool('GRAPHQL_PLAYGROUND', False)

# =============================================================================
# Document store
# =============================================================================

DOCUMENT_STORE = get_documentstore_config()

# =============================================================================
# Task rules
# =============================================================================

TASK_TITLE_MAX_LENGTH = _env_int('TASK_TITLE_MAX_LENGTH', 100)
TASK_DESCRIPTION_MAX_LENGTH = _env_int('TASK_DESCRIPTION_MAX_LENGTH', 500)

# =============================================================================
# Event channel
# =============================================================================
# EVENT_BACKEND=local   # In-process handlers (development, tests)
# EVENT_BACKEND=celery  # Celery over RabbitMQ
# EVENT_BACKEND=lambda  # AWS SQS consumed by Lambda

EVENT_BACKEND = os.getenv('EVENT_BACKEND', 'local')
EVENT_QUEUE_URL = os.getenv('EVENT_QUEUE_URL', '')

RABBITMQ_URL = os.getenv('RABBITMQ_URL', 'amqp://localhost:5672')
RABBITMQ_EXCHANGE_NAME = os.getenv('RABBITMQ_EXCHANGE_NAME', 'task.exchange')
RABBITMQ_QUEUE_NAME = os.getenv('RABBITMQ_QUEUE_NAME', 'task.actions')
RABBITMQ_ROUTING_KEY = os.getenv('RABBITMQ_ROUTING_KEY', 'task.action')

_task_exchange = Exchange(RABBITMQ_EXCHANGE_NAME, type='direct', durable=True)

CELERY_BROKER_URL = RABBITMQ_URL
CELERY_TASK_SERIALIZER = 'json'
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_IGNORE_RESULT = True
CELERY_TASK_QUEUES = (
    Queue(RABBITMQ_QUEUE_NAME, _task_exchange, routing_key=RABBITMQ_ROUTING_KEY, durable=True),
)
CELERY_TASK_ROUTES = {
    'apps.tasks.tasks.consume_task_action': {
        'queue': RABBITMQ_QUEUE_NAME,
        'exchange': RABBITMQ_EXCHANGE_NAME,
        'routing_key': RABBITMQ_ROUTING_KEY,
    },
}

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'pymongo': {'level': 'WARNING'},
        'botocore': {'level': 'WARNING'},
    },
}

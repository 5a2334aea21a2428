"""
Celery configuration for the task management backend.

The broker is RabbitMQ; task action events are routed to the durable
queue declared in settings (CELERY_TASK_QUEUES / CELERY_TASK_ROUTES).
"""
import os
from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('config')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

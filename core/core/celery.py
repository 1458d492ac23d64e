"""
Celery Configuration
Background workers and the beat scheduler for periodic notification checks
"""

import os

# DJANGO_SETTINGS_MODULE must be set before Celery reads the Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

from celery import Celery

app = Celery('assetflow')

# All celery-related configuration keys use the `CELERY_` prefix in settings.py
app.config_from_object('django.conf:settings', namespace='CELERY')

# Picks up <app>/tasks.py from every installed Django app (NotificationCenter.tasks)
app.autodiscover_tasks()

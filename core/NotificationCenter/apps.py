from django.apps import AppConfig


class NotificationcenterConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'NotificationCenter'

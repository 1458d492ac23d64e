from django.apps import AppConfig


class MaintenancecontrolConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'MaintenanceControl'

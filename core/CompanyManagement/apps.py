from django.apps import AppConfig


class CompanymanagementConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'CompanyManagement'

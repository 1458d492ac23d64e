from django.apps import AppConfig


class AssetmanagementConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'AssetManagement'

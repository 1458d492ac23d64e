"""
AssetFlow URL Configuration
Every app is mounted under /api/<prefix>/
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('AuthN.urls')),
    path('api/company/', include('CompanyManagement.urls')),
    path('api/assets/', include('AssetManagement.urls')),
    path('api/maintenance/', include('MaintenanceControl.urls')),
    path('api/notifications/', include('NotificationCenter.urls')),
    path('api/ai/', include('AIAssistant.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

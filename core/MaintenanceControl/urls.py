"""
Maintenance Management URLs
"""

from django.urls import path
from .views import (
    MaintenanceAPIView,
    MaintenanceDetailAPIView,
    MaintenanceStatusAPIView,
    MaintenanceDashboardAPIView,
    MaintenanceChartAPIView,
    MaintenanceCalendarAPIView,
)
from .inventory_views import (
    SparePartAPIView,
    SparePartDetailAPIView,
    AssetPartAPIView,
    AssetPartDetailAPIView,
    MaintenancePartAPIView,
    MaintenancePartDetailAPIView,
)

urlpatterns = [
    # Maintenance URLs
    path('', MaintenanceAPIView.as_view(), name='maintenance-list-create'),
    path('<int:pk>/', MaintenanceDetailAPIView.as_view(), name='maintenance-detail'),
    path('<int:pk>/status/', MaintenanceStatusAPIView.as_view(), name='maintenance-status'),
    path('<int:pk>/parts/', MaintenancePartAPIView.as_view(), name='maintenance-parts'),
    path('<int:pk>/parts/<int:line_id>/', MaintenancePartDetailAPIView.as_view(), name='maintenance-part-detail'),

    # Dashboard
    path('dashboard/', MaintenanceDashboardAPIView.as_view(), name='maintenance-dashboard'),
    path('chart/', MaintenanceChartAPIView.as_view(), name='maintenance-chart'),
    path('calendar/', MaintenanceCalendarAPIView.as_view(), name='maintenance-calendar'),

    # Inventory
    path('spare-parts/', SparePartAPIView.as_view(), name='spare-part-list-create'),
    path('spare-parts/<int:pk>/', SparePartDetailAPIView.as_view(), name='spare-part-detail'),
    path('asset-parts/<int:asset_id>/', AssetPartAPIView.as_view(), name='asset-part-list-create'),
    path('asset-parts/<int:asset_id>/<int:pk>/', AssetPartDetailAPIView.as_view(), name='asset-part-detail'),
]

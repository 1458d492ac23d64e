"""
Asset Management URLs
Company is resolved from the authenticated user, never from the URL
"""

from django.urls import path
from .views import (
    AssetCategoryAPIView,
    AssetCategoryDetailAPIView,
    AssetAPIView,
    AssetDetailAPIView,
    AssetDepreciationAPIView,
    AssetDashboardAPIView,
)
from .tracking_views import (
    AssetAssignAPIView,
    AssetLocationAPIView,
    AssetMapAPIView,
    AssetTrackingSearchAPIView,
    AssetQRCodeAPIView,
    AssetScanAPIView,
)
from .lifecycle_views import (
    AssetHistoryAPIView,
    AssetDocumentAPIView,
    AssetDocumentDetailAPIView,
    AssetDisposalAPIView,
)

urlpatterns = [
    # Asset Category URLs
    path('categories/', AssetCategoryAPIView.as_view(), name='asset-category-list-create'),
    path('categories/<uuid:pk>/', AssetCategoryDetailAPIView.as_view(), name='asset-category-detail'),

    # Asset URLs
    path('', AssetAPIView.as_view(), name='asset-list-create'),
    path('dashboard/', AssetDashboardAPIView.as_view(), name='asset-dashboard'),
    path('<int:pk>/', AssetDetailAPIView.as_view(), name='asset-detail'),
    path('<int:pk>/depreciation/', AssetDepreciationAPIView.as_view(), name='asset-depreciation'),

    # Tracking
    path('map/', AssetMapAPIView.as_view(), name='asset-map'),
    path('tracking/search/', AssetTrackingSearchAPIView.as_view(), name='asset-tracking-search'),
    path('scan/', AssetScanAPIView.as_view(), name='asset-scan'),
    path('<int:pk>/assign/', AssetAssignAPIView.as_view(), name='asset-assign'),
    path('<int:pk>/location/', AssetLocationAPIView.as_view(), name='asset-location'),
    path('<int:pk>/qrcode/', AssetQRCodeAPIView.as_view(), name='asset-qrcode'),

    # Lifecycle
    path('<int:pk>/history/', AssetHistoryAPIView.as_view(), name='asset-history'),
    path('<int:pk>/documents/', AssetDocumentAPIView.as_view(), name='asset-documents'),
    path('<int:pk>/documents/<uuid:document_id>/', AssetDocumentDetailAPIView.as_view(), name='asset-document-detail'),
    path('<int:pk>/disposal/', AssetDisposalAPIView.as_view(), name='asset-disposal'),
]

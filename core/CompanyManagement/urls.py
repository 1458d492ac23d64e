"""
Company Management URLs
Company is resolved from the requesting user, so no tenant id appears in the path
"""

from django.urls import path
from .views import (
    CompanyDetailAPIView,
    DepartmentAPIView,
    DepartmentDetailAPIView,
    UnitAPIView,
    UnitDetailAPIView
)

urlpatterns = [
    path('', CompanyDetailAPIView.as_view(), name='company-detail'),

    # Department URLs
    path('departments/', DepartmentAPIView.as_view(), name='department-list-create'),
    path('departments/<uuid:pk>/', DepartmentDetailAPIView.as_view(), name='department-detail'),

    # Unit URLs
    path('units/', UnitAPIView.as_view(), name='unit-list-create'),
    path('units/<uuid:pk>/', UnitDetailAPIView.as_view(), name='unit-detail'),
]

from django.urls import path
from .views import (
    NotificationAPIView,
    NotificationReadAPIView,
    NotificationReadAllAPIView,
    NotificationDismissAPIView,
    NotificationRefreshAPIView,
)

urlpatterns = [
    path('', NotificationAPIView.as_view(), name='notification-list'),
    path('read-all/', NotificationReadAllAPIView.as_view(), name='notification-read-all'),
    path('refresh/', NotificationRefreshAPIView.as_view(), name='notification-refresh'),
    path('<int:pk>/read/', NotificationReadAPIView.as_view(), name='notification-read'),
    path('<int:pk>/', NotificationDismissAPIView.as_view(), name='notification-dismiss'),
]

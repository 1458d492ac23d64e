from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    CompanyRegisterView, UserRegisterView, LoginView, ChangePasswordView,
    SessionInfoAPIView, MyProfileAPIView, CompanyUsersAPIView, CompanyUserDetailAPIView
)

urlpatterns = [
    # ---AUTH---
    path("register/company", CompanyRegisterView.as_view(), name="company-register"),
    path("register/user", UserRegisterView.as_view(), name="user-register"),
    path('login', LoginView.as_view(), name='login'),
    path('token/refresh', TokenRefreshView.as_view(), name='token-refresh'),
    path('change-password', ChangePasswordView.as_view(), name='change-password'),

    # ---SESSION / PROFILE---
    path('session-info', SessionInfoAPIView.as_view(), name='session-info'),
    path('profile', MyProfileAPIView.as_view(), name='my-profile'),

    # ---COMPANY USERS---
    path('users', CompanyUsersAPIView.as_view(), name='company-users'),
    path('users/<uuid:user_id>', CompanyUserDetailAPIView.as_view(), name='company-user-detail'),
]

"""
Authentication and User Management Views
========================================

- Company registration creates the tenant, its first admin and default categories
- Users are registered by company admins into the admin's own company
- Login accepts email or username and returns JWT tokens
- Consistent response envelope: message, data, status
"""

import logging

from django.contrib.auth import authenticate
from django.db.models import Q
from rest_framework import generics, permissions, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from utils.pagination_utils import CustomPagination
from utils.tenant_filter_utils import get_company_and_profile
from .models import BaseUserModel, UserProfile
from .permissions import IsCompanyAdmin
from .serializers import (
    CompanyRegistrationSerializer, UserRegistrationSerializer,
    UserProfileReadSerializer, UserProfileUpdateSerializer,
    ChangePasswordSerializer
)

logger = logging.getLogger(__name__)


def generate_tokens(user):
    """
    Generate JWT tokens for a user.

    Returns:
        dict: refresh_token, access_token, user_id, role and company_id
    """
    refresh = RefreshToken.for_user(user)
    profile = UserProfile.objects.filter(user_id=user.id).only('company_id').first()
    return {
        "refresh_token": str(refresh),
        "access_token": str(refresh.access_token),
        "user_id": str(user.id),
        "role": user.role,
        "company_id": str(profile.company_id) if profile and profile.company_id else None,
    }


class CompanyRegisterView(generics.CreateAPIView):
    """
    Register a new Company together with its first admin user.
    """
    serializer_class = CompanyRegistrationSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if serializer.is_valid():
            profile = serializer.save()
            logger.info(f"Registered company {profile.company_id} with admin {profile.user_id}")
            return Response({
                "message": "Company registered successfully",
                "data": generate_tokens(profile.user),
                "status": status.HTTP_201_CREATED
            }, status=status.HTTP_201_CREATED)

        return Response({
            "message": "Validation error",
            "data": serializer.errors,
            "status": status.HTTP_400_BAD_REQUEST
        }, status=status.HTTP_400_BAD_REQUEST)


class UserRegisterView(generics.CreateAPIView):
    """
    Register a new user in the requesting admin's company.
    """
    serializer_class = UserRegistrationSerializer
    permission_classes = [IsAuthenticated, IsCompanyAdmin]

    def create(self, request, *args, **kwargs):
        profile, company, error_response = get_company_and_profile(request)
        if error_response:
            return error_response

        serializer = self.get_serializer(data=request.data, context={'request': request, 'company': company})
        if serializer.is_valid():
            new_profile = serializer.save()
            logger.info(f"User {new_profile.user_id} registered in company {company.id} by {request.user.id}")
            return Response({
                "message": "User created successfully",
                "data": UserProfileReadSerializer(new_profile).data,
                "status": status.HTTP_201_CREATED
            }, status=status.HTTP_201_CREATED)

        return Response({
            "message": "Validation error",
            "data": serializer.errors,
            "status": status.HTTP_400_BAD_REQUEST
        }, status=status.HTTP_400_BAD_REQUEST)


class LoginView(APIView):
    """
    Login endpoint supporting both email and username authentication.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        username = str(request.data.get("username", "")).strip()
        password = str(request.data.get("password", "")).strip()

        if not username or not password:
            return Response({
                "message": "Username/Email and password are required",
                "data": None,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

        # USERNAME_FIELD is email, so try the value as email first
        user = authenticate(request, username=username.lower(), password=password)

        if user is None:
            user_obj = BaseUserModel.objects.only('id', 'email').filter(username=username).first()
            if user_obj:
                user = authenticate(request, username=user_obj.email, password=password)

        if user is None:
            logger.info(f"Failed login attempt for '{username}'")
            return Response({
                "message": "Invalid credentials",
                "data": None,
                "status": status.HTTP_401_UNAUTHORIZED
            }, status=status.HTTP_401_UNAUTHORIZED)

        if not user.is_active:
            return Response({
                "message": "User account is disabled",
                "data": None,
                "status": status.HTTP_401_UNAUTHORIZED
            }, status=status.HTTP_401_UNAUTHORIZED)

        return Response({
            "message": "Login successful",
            "data": generate_tokens(user),
            "status": status.HTTP_200_OK
        }, status=status.HTTP_200_OK)


class ChangePasswordView(generics.GenericAPIView):
    """
    Change password for authenticated user.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = ChangePasswordSerializer

    def post(self, request):
        user = request.user
        serializer = self.get_serializer(data=request.data, context={'user': user})
        if not serializer.is_valid():
            return Response({
                "message": "Validation error",
                "data": serializer.errors,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

        if not user.check_password(serializer.validated_data['old_password']):
            return Response({
                "message": "Old password is incorrect",
                "data": None,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password'])

        return Response({
            "message": "Password updated successfully",
            "data": None,
            "status": status.HTTP_200_OK
        }, status=status.HTTP_200_OK)


class SessionInfoAPIView(APIView):
    """
    Session information for the authenticated user: account, profile and company.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        data = {
            "user_id": str(user.id),
            "email": user.email,
            "username": user.username,
            "role": user.role,
            "date_joined": user.date_joined,
            "profile": None,
            "company": None,
        }

        try:
            profile = UserProfile.objects.select_related('company', 'department', 'unit').filter(
                user_id=user.id
            ).first()
            if profile:
                data["profile"] = UserProfileReadSerializer(profile).data
                if profile.company:
                    data["company"] = {
                        "id": str(profile.company.id),
                        "name": profile.company.name,
                        "timezone": profile.company.timezone,
                    }

            return Response({
                "message": "User authenticated",
                "data": data,
                "status": status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            logger.error(f"Error fetching session info for {user.id}: {str(e)}")
            return Response({
                "message": f"Error fetching session info: {str(e)}",
                "data": None,
                "status": status.HTTP_500_INTERNAL_SERVER_ERROR
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class MyProfileAPIView(APIView):
    """Own profile: read, and update full_name / avatar_url"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        profile, company, error_response = get_company_and_profile(request)
        if error_response:
            return error_response
        return Response({
            "message": "Profile retrieved successfully",
            "data": UserProfileReadSerializer(profile).data,
            "status": status.HTTP_200_OK
        }, status=status.HTTP_200_OK)

    def put(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = UserProfileUpdateSerializer(
                profile, data=request.data, partial=True,
                context={'is_admin': request.user.role == 'admin'}
            )
            if serializer.is_valid():
                serializer.save()
                return Response({
                    "message": "Profile updated successfully",
                    "data": UserProfileReadSerializer(profile).data,
                    "status": status.HTTP_200_OK
                }, status=status.HTTP_200_OK)
            return Response({
                "message": "Validation error",
                "data": serializer.errors,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                "message": f"Error updating profile: {str(e)}",
                "data": None,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class CompanyUsersAPIView(APIView):
    """Users of the requester's company"""
    permission_classes = [IsAuthenticated]
    pagination_class = CustomPagination

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            profiles = UserProfile.objects.filter(company_id=company.id).select_related(
                'user', 'company', 'department', 'unit'
            ).order_by('full_name')

            role = request.query_params.get('role')
            if role:
                profiles = profiles.filter(user__role=role)

            department_id = request.query_params.get('department')
            if department_id:
                profiles = profiles.filter(department_id=department_id)

            unit_id = request.query_params.get('unit')
            if unit_id:
                profiles = profiles.filter(unit_id=unit_id)

            is_active = request.query_params.get('is_active')
            if is_active is not None and is_active != '':
                profiles = profiles.filter(user__is_active=is_active.lower() == 'true')

            search = request.query_params.get('search', '').strip()
            if search:
                profiles = profiles.filter(
                    Q(full_name__icontains=search) |
                    Q(user__email__icontains=search) |
                    Q(user__username__icontains=search)
                )

            paginator = self.pagination_class()
            page = paginator.paginate_queryset(profiles, request)
            serializer = UserProfileReadSerializer(page, many=True)

            return Response({
                "message": "Users retrieved successfully",
                "data": paginator.get_paginated_response(serializer.data),
                "status": status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                "message": f"Error retrieving users: {str(e)}",
                "data": None,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class CompanyUserDetailAPIView(APIView):
    """Single user of the requester's company. Updates and deactivation are admin only."""
    permission_classes = [IsAuthenticated]

    def get_target_profile(self, company, user_id):
        return UserProfile.objects.select_related('user', 'company', 'department', 'unit').filter(
            user_id=user_id,
            company_id=company.id
        ).first()

    def get(self, request, user_id):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            target = self.get_target_profile(company, user_id)
            if not target:
                return Response({
                    "message": "User not found",
                    "data": None,
                    "status": status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            return Response({
                "message": "User retrieved successfully",
                "data": UserProfileReadSerializer(target).data,
                "status": status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                "message": f"Error retrieving user: {str(e)}",
                "data": None,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request, user_id):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            if request.user.role != 'admin':
                return Response({
                    "message": "Only company admins can update users",
                    "data": None,
                    "status": status.HTTP_403_FORBIDDEN
                }, status=status.HTTP_403_FORBIDDEN)

            target = self.get_target_profile(company, user_id)
            if not target:
                return Response({
                    "message": "User not found",
                    "data": None,
                    "status": status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            serializer = UserProfileUpdateSerializer(
                target, data=request.data, partial=True, context={'is_admin': True}
            )
            if serializer.is_valid():
                serializer.save()
                target.refresh_from_db()
                return Response({
                    "message": "User updated successfully",
                    "data": UserProfileReadSerializer(target).data,
                    "status": status.HTTP_200_OK
                }, status=status.HTTP_200_OK)

            return Response({
                "message": "Validation error",
                "data": serializer.errors,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                "message": f"Error updating user: {str(e)}",
                "data": None,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, user_id):
        """Deactivate user (soft delete)"""
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            if request.user.role != 'admin':
                return Response({
                    "message": "Only company admins can deactivate users",
                    "data": None,
                    "status": status.HTTP_403_FORBIDDEN
                }, status=status.HTTP_403_FORBIDDEN)

            if str(request.user.id) == str(user_id):
                return Response({
                    "message": "You cannot deactivate your own account",
                    "data": None,
                    "status": status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            target = self.get_target_profile(company, user_id)
            if not target:
                return Response({
                    "message": "User not found",
                    "data": None,
                    "status": status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            BaseUserModel.objects.filter(id=target.user_id).update(is_active=False)
            logger.info(f"User {target.user_id} deactivated by {request.user.id}")

            return Response({
                "message": "User deactivated successfully",
                "data": None,
                "status": status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                "message": f"Error deactivating user: {str(e)}",
                "data": None,
                "status": status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

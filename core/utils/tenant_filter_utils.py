"""
Utility functions for company (tenant) scoping in APIs

Every tenant endpoint resolves the company from the requesting user's
profile, never from URL or payload parameters.
"""
from rest_framework import status
from rest_framework.response import Response

from AuthN.models import UserProfile
from core.timezone_middleware import activate_company_timezone


def get_company_and_profile(request):
    """
    Resolve the requesting user's profile and company - single query with select_related

    Returns:
        tuple: (profile, company, error_response)
    """
    profile = UserProfile.objects.select_related('company', 'department', 'unit').filter(
        user_id=request.user.id
    ).first()

    if not profile or not profile.company_id:
        return None, None, Response({
            'message': 'User is not linked to any company',
            'data': None,
            'status': status.HTTP_403_FORBIDDEN
        }, status=status.HTTP_403_FORBIDDEN)

    if not profile.company.is_active:
        return None, None, Response({
            'message': 'Company is inactive',
            'data': None,
            'status': status.HTTP_403_FORBIDDEN
        }, status=status.HTTP_403_FORBIDDEN)

    activate_company_timezone(profile.company)
    return profile, profile.company, None


def filter_queryset_by_company(queryset, company_id, company_field='company'):
    """
    Filter queryset by company_id

    Args:
        queryset: Django queryset
        company_id: UUID of the requesting user's company
        company_field: Path to the company field (e.g. 'company', 'asset__company')

    Returns:
        Filtered queryset
    """
    filter_kwargs = {f'{company_field}__id': company_id}
    return queryset.filter(**filter_kwargs)

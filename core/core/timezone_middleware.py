"""
Timezone Middleware for automatic timezone activation per request.

Determines timezone based on:
1. request.user.own_user_profile.company.timezone (if set)
2. "UTC" as fallback

Activates timezone using django.utils.timezone.activate() for the request lifecycle.
"""
import logging

import pytz
from django.utils import timezone
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


def resolve_company_timezone(user):
    """Return the timezone name of the user's company, or None."""
    if not getattr(user, 'is_authenticated', False):
        return None
    profile = getattr(user, 'own_user_profile', None)
    company = getattr(profile, 'company', None) if profile else None
    return getattr(company, 'timezone', None) or None


class TimezoneMiddleware(MiddlewareMixin):
    """
    Activates the company timezone for each request.

    JWT-authenticated API requests only resolve request.user inside the DRF
    view, so for those requests this falls back to UTC; session-authenticated
    requests (admin) get the company timezone.
    """

    def process_request(self, request):
        tz_name = "UTC"

        user = getattr(request, 'user', None)
        if user is not None:
            try:
                tz_name = resolve_company_timezone(user) or "UTC"
            except AttributeError as e:
                logger.debug(f"Could not resolve company timezone: {str(e)}")

        try:
            tz = pytz.timezone(tz_name)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone '{tz_name}', falling back to UTC")
            tz = pytz.UTC
            tz_name = "UTC"

        timezone.activate(tz)
        request.timezone = tz_name
        return None

    def process_response(self, request, response):
        timezone.deactivate()
        return response


def activate_company_timezone(company):
    """
    Activate the company timezone for the rest of the request.
    Called once the tenant is resolved inside API views, where JWT users are known.
    """
    tz_name = getattr(company, 'timezone', None) or "UTC"
    try:
        timezone.activate(pytz.timezone(tz_name))
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{tz_name}' on company {company.id}, using UTC")
        timezone.activate(pytz.UTC)

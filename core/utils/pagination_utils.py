# =================================PAGINATION=================================
from rest_framework import pagination
from rest_framework.exceptions import NotFound


class CustomPagination(pagination.PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 500
    page_query_param = 'page'

    def paginate_queryset(self, queryset, request, view=None):
        page_number = request.query_params.get(self.page_query_param)
        self.request = request
        try:
            return super().paginate_queryset(queryset, request, view)
        except NotFound:
            raise NotFound(detail=f"Invalid page number: {page_number}")

    def _page_url(self, page_number):
        if page_number is None:
            return None
        query_params = self.request.query_params.copy()
        query_params[self.page_query_param] = page_number
        return f"{self.request.build_absolute_uri(self.request.path)}?{query_params.urlencode()}"

    def get_paginated_response(self, data):
        """
        Returns a plain dict: views add 'message' and 'status' and wrap it in a Response.
        """
        next_page_number = self.page.next_page_number() if self.page.has_next() else None
        previous_page_number = self.page.previous_page_number() if self.page.has_previous() else None

        return {
            'count': self.page.paginator.count,
            'total_pages': self.page.paginator.num_pages,
            'current_page_number': self.page.number,
            'page_size': self.get_page_size(self.request),
            'previous_page_number': previous_page_number,
            'next_page_number': next_page_number,
            'next': self._page_url(next_page_number),
            'previous': self._page_url(previous_page_number),
            'has_next': self.page.has_next(),
            'has_previous': self.page.has_previous(),
            'results': data,
        }

from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """
    Default pagination for list endpoints.

    Clients may ask for a different page size with ?page_size=N (capped).
    """

    page_size_query_param = "page_size"
    max_page_size = 500

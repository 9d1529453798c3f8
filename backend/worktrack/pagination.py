from rest_framework.pagination import PageNumberPagination


class CustomPageNumberPagination(PageNumberPagination):
    """Page-number pagination with a client-controlled page size.

    Defaults to 50 rows; admin screens that list every student or work record
    may ask for up to 2000 with ``?page_size=``.
    """
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 2000

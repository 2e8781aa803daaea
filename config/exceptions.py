"""DRF exception handler shared by every API view."""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Extend DRF's default handler with a storage-failure response.

    Database errors that escape a view are reported as 503 with the
    ``storage_failure`` code instead of an HTML 500 page.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.error(
            "Storage failure in %s",
            view.__class__.__name__ if view else 'unknown view',
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {'error': 'Storage is temporarily unavailable', 'code': 'storage_failure'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return None

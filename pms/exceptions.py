# pms/exceptions.py
import logging

from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Delegate to DRF's default handler and log every error response.

    Unhandled exceptions return None from the default handler and are left
    to Django, which logs them itself.
    """
    response = exception_handler(exc, context)
    if response is not None:
        request = context.get('request')
        view = context.get('view')
        logger.warning(
            "%s %s -> %s (%s): %s",
            getattr(request, 'method', '?'),
            getattr(request, 'path', '?'),
            response.status_code,
            view.__class__.__name__ if view is not None else 'unknown view',
            response.data,
        )
    return response

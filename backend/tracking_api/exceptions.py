import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from store.errors import NetworkError, StoreError

logger = logging.getLogger(__name__)


def store_exception_handler(exc, context):
    """
    DRF exception handler that also turns StoreError subclasses into JSON responses.
    """
    if isinstance(exc, StoreError):
        if isinstance(exc, NetworkError):
            status = 503
        else:
            status = exc.status or 500
        if status >= 500:
            logger.error(f"Store failure in {context.get('view').__class__.__name__}: {exc}")
        return Response({"error": exc.message, "code": exc.code}, status=status)

    return exception_handler(exc, context)

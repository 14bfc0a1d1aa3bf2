"""
DRF exception handler

Maps ``DomainError`` subclasses to their HTTP status and payload, lets DRF
handle its own exceptions, and turns anything else into a logged 500.
"""

import logging
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


def engine_exception_handler(exc, context) -> Optional[Response]:
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown'

    if isinstance(exc, DomainError):
        logger.info(f"{view_name}: {exc.__class__.__name__} ({exc.code}) {exc.message}")
        return Response(exc.payload(), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'error_dict') else {'detail': exc.messages}
        return Response(errors, status=status.HTTP_400_BAD_REQUEST)

    logger.exception(f"Unhandled exception in {view_name}: {exc}")

    detail = str(exc) if settings.DEBUG else 'Ocurrió un error inesperado. Intente de nuevo más tarde.'
    return Response(
        {'detail': detail, 'code': 'internal_error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )

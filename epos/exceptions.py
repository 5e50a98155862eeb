import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class PosError(Exception):
    """
    Base class for business-rule violations raised by the service layer.

    Carries a machine-readable code, the HTTP status it maps to and a context
    dict (entity ids, expected vs actual values) for the response body.
    """

    code = 'pos_error'
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def as_dict(self):
        data = {'error': self.message, 'code': self.code}
        for key, value in self.context.items():
            data.setdefault(key, value)
        return data


def pos_exception_handler(exc, context):
    """Render PosError subclasses as {'error': ..., 'code': ...} responses"""
    if isinstance(exc, PosError):
        view = context.get('view')
        logger.info(f"{exc.code} in {view.__class__.__name__ if view else 'unknown view'}: {exc.message}")
        return Response(exc.as_dict(), status=exc.status_code)
    return exception_handler(exc, context)

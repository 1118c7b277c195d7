"""
Error taxonomy for the session layer and the unified API error envelope.
"""
import logging

from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class InvalidLanguage(ValueError):
    """A value outside the supported languages was given to the language store."""

    def __init__(self, value):
        self.value = value
        super().__init__(f'unsupported language: {value!r}')


class AuthResolutionFailure(Exception):
    """The authentication collaborator raised or never resolved."""


class StaleTransition(Exception):
    """A transition reached a guard that has already been unmounted."""


def api_exception_handler(exc, context):
    if isinstance(exc, InvalidLanguage):
        return Response({'ok': False, 'error': {'code': 'invalid_language', 'message': str(exc)}}, status=400)
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled API error', exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': 'api_error', 'message': detail}}, status=resp.status_code)

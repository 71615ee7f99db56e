"""
Domain errors and the unified API exception handler.

Services raise the ``APIException`` subclasses below; views let them
propagate and :func:`api_exception_handler` turns every error into
``{"ok": false, "detail": ..., "error": ...}``.
"""
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource conflict.'
    default_code = 'conflict'


class InvalidTransition(Conflict):
    default_detail = 'Invalid status transition.'
    default_code = 'invalid_transition'


class RateLimited(APIException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = 'Too many requests. Please try again later.'
    default_code = 'rate_limited'


class CommissionError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Commission could not be calculated.'
    default_code = 'commission_error'


class AgreementNotActive(CommissionError):
    default_detail = 'Commission agreement is not active.'
    default_code = 'agreement_not_active'


def _error_code(exc, status_code: int) -> str:
    if isinstance(exc, Http404):
        return 'not_found'
    if isinstance(exc, DjangoPermissionDenied):
        return 'permission_denied'
    try:
        codes = exc.get_codes()
    except AttributeError:
        return 'api_error'
    if isinstance(codes, str):
        return codes
    if isinstance(codes, list) and len(codes) == 1 and isinstance(codes[0], str):
        return codes[0]
    return 'validation_error' if status_code == 400 else 'api_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("Unhandled error while serving %s", getattr(context.get('request'), 'path', '?'))
        return Response(
            {'ok': False, 'detail': 'Internal server error', 'error': 'server_error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    data = resp.data
    payload = {'ok': False, 'error': _error_code(exc, resp.status_code)}
    if isinstance(data, dict) and set(data) == {'detail'}:
        payload['detail'] = data['detail']
    elif isinstance(data, list) and len(data) == 1:
        payload['detail'] = data[0]
    elif isinstance(data, (dict, list)):
        payload['detail'] = 'Validation failed'
        payload['errors'] = data
    else:
        payload['detail'] = str(data)
    out = Response(payload, status=resp.status_code)
    for header in ('WWW-Authenticate', 'Retry-After'):
        if header in resp:
            out[header] = resp[header]
    return out

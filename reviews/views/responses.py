from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ..errors import BusinessError

BUSINESS_ERROR_STATUSES = {
    'NOT_FOUND': status.HTTP_404_NOT_FOUND,
    'PR_EXISTS': status.HTTP_409_CONFLICT,
    'PR_MERGED': status.HTTP_409_CONFLICT,
    'NOT_ASSIGNED': status.HTTP_409_CONFLICT,
    'NO_CANDIDATE': status.HTTP_409_CONFLICT,
    'TEAM_EXISTS': status.HTTP_409_CONFLICT,
}


def error_response(code: str, message: str, http_status: int) -> Response:
    return Response({
        'error': {
            'code': code,
            'message': message
        }
    }, status=http_status)


def business_error_response(exc: BusinessError) -> Response:
    http_status = BUSINESS_ERROR_STATUSES.get(exc.code, status.HTTP_400_BAD_REQUEST)
    return error_response(exc.code, exc.message, http_status)


def validation_error_response(errors) -> Response:
    """Ответ 400 с первой ошибкой валидации тела запроса"""
    field, detail = next(iter(errors.items()))
    message = _first_message(detail) or 'invalid value'
    if field != 'non_field_errors':
        message = f'{field}: {message}'
    return error_response('VALIDATION_ERROR', message, status.HTTP_400_BAD_REQUEST)


def server_error_response() -> Response:
    return error_response('SERVER_ERROR', 'Internal server error', status.HTTP_500_INTERNAL_SERVER_ERROR)


def _first_message(detail):
    if isinstance(detail, dict):
        detail = list(detail.values())
    if isinstance(detail, list):
        for item in detail:
            message = _first_message(item)
            if message:
                return message
        return None
    return str(detail)


def api_exception_handler(exc, context):
    """
    Приводит ошибки DRF (битый JSON, неверный метод и т.п.) к формату {'error': {...}}
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    if response.status_code == status.HTTP_400_BAD_REQUEST:
        code = 'VALIDATION_ERROR'
    elif response.status_code == status.HTTP_404_NOT_FOUND:
        code = 'NOT_FOUND'
    else:
        code = getattr(exc, 'default_code', 'error').upper()

    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    message = str(detail) if detail is not None else _first_message(response.data)
    response.data = {
        'error': {
            'code': code,
            'message': message or 'invalid request'
        }
    }
    return response

import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..errors import BusinessError
from ..serializers import PullRequestShortSerializer, SetIsActiveRequestSerializer, UserSerializer
from ..services import UserService
from .responses import business_error_response, error_response, server_error_response, validation_error_response

logger = logging.getLogger(__name__)


@api_view(['POST'])
def user_set_active(request):
    """POST /users/setIsActive - Установить флаг активности пользователя"""
    payload = SetIsActiveRequestSerializer(data=request.data)
    if not payload.is_valid():
        return validation_error_response(payload.errors)

    try:
        user = UserService().set_user_active(
            payload.validated_data['user_id'],
            payload.validated_data['is_active'],
        )
        serializer = UserSerializer(user)

        return Response({
            'user': serializer.data
        })

    except BusinessError as e:
        return business_error_response(e)
    except Exception:
        logger.exception("Failed to update user activity")
        return server_error_response()


@api_view(['GET'])
def users_get_review(request):
    """GET /users/getReview - Получить PR'ы, где пользователь назначен ревьювером"""
    user_id = request.query_params.get('user_id')
    if not user_id:
        return error_response(
            'VALIDATION_ERROR', 'user_id parameter is required', status.HTTP_400_BAD_REQUEST
        )

    try:
        assigned_prs = UserService().get_review_pull_requests(user_id)
        serializer = PullRequestShortSerializer(assigned_prs, many=True)

        return Response({
            'user_id': user_id,
            'pull_requests': serializer.data
        })

    except BusinessError as e:
        return business_error_response(e)
    except Exception:
        logger.exception("Failed to list reviews for user %s", user_id)
        return server_error_response()

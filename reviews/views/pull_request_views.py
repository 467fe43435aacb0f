import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..errors import BusinessError
from ..serializers import (
    PullRequestCreateRequestSerializer,
    PullRequestMergeRequestSerializer,
    PullRequestReassignRequestSerializer,
    PullRequestSerializer,
)
from ..services import PullRequestService
from .responses import business_error_response, server_error_response, validation_error_response

logger = logging.getLogger(__name__)


@api_view(['POST'])
def pullrequest_create(request):
    """POST /pullRequest/create - Создать PR и назначить ревьюверов"""
    payload = PullRequestCreateRequestSerializer(data=request.data)
    if not payload.is_valid():
        return validation_error_response(payload.errors)

    try:
        pr = PullRequestService().create_pull_request(
            payload.validated_data['pull_request_id'],
            payload.validated_data['pull_request_name'],
            payload.validated_data['author_id'],
        )
        serializer = PullRequestSerializer(pr)

        return Response({
            'pr': serializer.data
        }, status=status.HTTP_201_CREATED)

    except BusinessError as e:
        return business_error_response(e)
    except Exception:
        logger.exception("Failed to create PR")
        return server_error_response()


@api_view(['POST'])
def pullrequest_merge(request):
    """POST /pullRequest/merge - Пометить PR как MERGED"""
    payload = PullRequestMergeRequestSerializer(data=request.data)
    if not payload.is_valid():
        return validation_error_response(payload.errors)

    try:
        pr = PullRequestService().merge_pull_request(payload.validated_data['pull_request_id'])
        serializer = PullRequestSerializer(pr)

        return Response({
            'pr': serializer.data
        })

    except BusinessError as e:
        return business_error_response(e)
    except Exception:
        logger.exception("Failed to merge PR")
        return server_error_response()


@api_view(['POST'])
def pullrequest_reassign(request):
    """POST /pullRequest/reassign - Переназначить ревьювера"""
    payload = PullRequestReassignRequestSerializer(data=request.data)
    if not payload.is_valid():
        return validation_error_response(payload.errors)

    try:
        pr, new_reviewer_id = PullRequestService().reassign_reviewer(
            payload.validated_data['pull_request_id'],
            payload.validated_data['old_user_id'],
        )
        serializer = PullRequestSerializer(pr)

        return Response({
            'pr': serializer.data,
            'replaced_by': new_reviewer_id
        })

    except BusinessError as e:
        return business_error_response(e)
    except Exception:
        logger.exception("Failed to reassign reviewer")
        return server_error_response()

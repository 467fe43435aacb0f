import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..errors import BusinessError
from ..serializers import TeamAddRequestSerializer, TeamSerializer
from ..services import TeamService
from .responses import business_error_response, error_response, server_error_response, validation_error_response

logger = logging.getLogger(__name__)


@api_view(['POST'])
def team_add(request):
    """POST /team/add - Создать команду с участниками или обновить ее"""
    payload = TeamAddRequestSerializer(data=request.data)
    if not payload.is_valid():
        return validation_error_response(payload.errors)

    try:
        team = TeamService().create_or_update_team(
            payload.validated_data['team_name'],
            payload.validated_data.get('members', []),
        )
        serializer = TeamSerializer(team)

        return Response({
            'team': serializer.data
        }, status=status.HTTP_201_CREATED)

    except BusinessError as e:
        return business_error_response(e)
    except Exception:
        logger.exception("Failed to upsert team")
        return server_error_response()


@api_view(['GET'])
def team_get(request):
    """GET /team/get - Получить команду с участниками"""
    team_name = request.query_params.get('team_name')
    if not team_name:
        return error_response(
            'VALIDATION_ERROR', 'team_name parameter is required', status.HTTP_400_BAD_REQUEST
        )

    try:
        team = TeamService().get_team(team_name)
        serializer = TeamSerializer(team)

        return Response(serializer.data)

    except BusinessError as e:
        return business_error_response(e)
    except Exception:
        logger.exception("Failed to load team %s", team_name)
        return server_error_response()

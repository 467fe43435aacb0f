import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers import StatsSerializer
from ..services import StatsService
from .responses import server_error_response

logger = logging.getLogger(__name__)


@api_view(['GET'])
def stats_overview(request):
    """
    GET /statistic - Статистика назначений ревьюверов
    """
    try:
        stats = StatsService.get_review_stats()
        serializer = StatsSerializer(stats)
        return Response(serializer.data)

    except Exception:
        logger.exception("Failed to collect review statistics")
        return server_error_response()

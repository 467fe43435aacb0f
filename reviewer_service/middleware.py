import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """
    Логирует каждый запрос: метод, путь, статус и длительность
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.perf_counter()
        response = self.get_response(request)
        duration_ms = (time.perf_counter() - started) * 1000

        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method, request.path, response.status_code, duration_ms,
        )
        return response

"""Middleware de log de requisições (método, caminho, status e duração)."""

import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        inicio = time.monotonic()
        response = self.get_response(request)
        duracao_ms = (time.monotonic() - inicio) * 1000

        nivel = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            nivel,
            f"{request.method} {request.path} {response.status_code} {duracao_ms:.1f}ms",
        )
        return response

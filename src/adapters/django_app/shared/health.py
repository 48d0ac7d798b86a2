"""
Health check: GET /health/

Verifica banco relacional, cache e MongoDB. Responde 200 quando tudo
responde e 503 com o detalhe de cada verificação caso contrário.
"""

from typing import Callable, Dict
import logging
import uuid

from django.db import connection
from django.http import HttpRequest, JsonResponse

from src.config.container import get_container

from .cache import cache_delete, cache_get, cache_set

logger = logging.getLogger(__name__)


def _verificar_banco() -> None:
    connection.ensure_connection()


def _verificar_cache() -> None:
    chave = f"health:{uuid.uuid4().hex}"
    if not cache_set(chave, "ok", ttl=10) or cache_get(chave) != "ok":
        raise RuntimeError("cache indisponível")
    cache_delete(chave)


def _verificar_mongo() -> None:
    get_container().mongo_database().command("ping")


VERIFICACOES: Dict[str, Callable[[], None]] = {
    "database": _verificar_banco,
    "cache": _verificar_cache,
    "mongodb": _verificar_mongo,
}


def health_check(request: HttpRequest) -> JsonResponse:
    checks = {}
    for nome, verificar in VERIFICACOES.items():
        try:
            verificar()
            checks[nome] = "ok"
        except Exception as e:
            logger.error(f"Health check falhou em {nome}: {e}")
            checks[nome] = "erro"

    saudavel = all(valor == "ok" for valor in checks.values())
    return JsonResponse(
        {"status": "ok" if saudavel else "degraded", "checks": checks},
        status=200 if saudavel else 503,
    )

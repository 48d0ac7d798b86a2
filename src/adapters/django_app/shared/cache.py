"""
Helpers de cache sobre django.core.cache.

Valores são serializados em JSON para que o conteúdo no Redis seja
legível por outros serviços. Falhas do backend são logadas e viram
None/False; o cache nunca derruba uma requisição.
"""

from typing import Any, Optional
import json
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


def _ttl_padrao() -> int:
    return int(getattr(settings, "CACHE_DEFAULT_TTL", 3600))


def cache_set(chave: str, valor: Any, ttl: Optional[int] = None) -> bool:
    """
    Grava valor com expiração.

    Args:
        chave: Chave no cache
        valor: Qualquer valor serializável em JSON
        ttl: Segundos até expirar (padrão CACHE_DEFAULT_TTL; 0 expira na hora)

    Returns:
        True se gravou
    """
    try:
        timeout = _ttl_padrao() if ttl is None else ttl
        cache.set(chave, json.dumps(valor, default=str), timeout=timeout)
        return True
    except Exception as e:
        logger.error(f"Erro ao gravar cache {chave}: {e}")
        return False


def cache_get(chave: str) -> Optional[Any]:
    """Lê valor; None se ausente, expirado ou ilegível."""
    try:
        bruto = cache.get(chave)
    except Exception as e:
        logger.error(f"Erro ao ler cache {chave}: {e}")
        return None

    if bruto is None:
        return None

    try:
        return json.loads(bruto)
    except (TypeError, ValueError):
        logger.warning(f"Valor inválido no cache {chave}")
        return None


def cache_delete(chave: str) -> bool:
    try:
        cache.delete(chave)
        return True
    except Exception as e:
        logger.error(f"Erro ao remover cache {chave}: {e}")
        return False

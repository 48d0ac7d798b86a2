"""
Tokens JWT (python-jose) e blacklist no cache.

- JoseTokenService: emite e valida access/refresh tokens, cada tipo
  assinado com um segredo próprio
- CacheTokenBlacklist: jti revogados no logout (jwt:blacklist:<jti>)

Claims: id, regra, type ("access" | "refresh"), jti, iat, exp.
"""

from datetime import timedelta
from typing import Any, Dict
import logging
import uuid

from django.conf import settings
from django.core.cache import cache
from jose import ExpiredSignatureError, JWTError, jwt

from src.core.identidade.entities import UsuarioEntity
from src.core.shared.exceptions import AutenticacaoError
from src.core.shared.tempo import agora

logger = logging.getLogger(__name__)

TIPO_ACCESS = "access"
TIPO_REFRESH = "refresh"


class JoseTokenService:
    """
    Implementação do TokenService com python-jose.

    Os parâmetros padrão vêm do settings (JWT_*); testes podem
    passar valores explícitos.
    """

    def __init__(
        self,
        secret: str = None,
        refresh_secret: str = None,
        access_token_ttl: int = None,
        refresh_token_ttl: int = None,
        algorithm: str = None,
    ):
        self.secret = secret or settings.JWT_SECRET
        self.refresh_secret = refresh_secret or settings.JWT_REFRESH_SECRET
        self.access_token_ttl = access_token_ttl or settings.JWT_EXPIRATION
        self.refresh_token_ttl = refresh_token_ttl or settings.JWT_REFRESH_EXPIRATION
        self.algorithm = algorithm or getattr(settings, "JWT_ALGORITHM", "HS256")

    def gerar_access_token(self, usuario: UsuarioEntity) -> str:
        return self._gerar(usuario, TIPO_ACCESS, self.secret, self.access_token_ttl)

    def gerar_refresh_token(self, usuario: UsuarioEntity) -> str:
        return self._gerar(usuario, TIPO_REFRESH, self.refresh_secret, self.refresh_token_ttl)

    def decodificar_access_token(self, token: str) -> Dict[str, Any]:
        return self._decodificar(token, TIPO_ACCESS, self.secret)

    def decodificar_refresh_token(self, token: str) -> Dict[str, Any]:
        return self._decodificar(token, TIPO_REFRESH, self.refresh_secret)

    def _gerar(self, usuario: UsuarioEntity, tipo: str, segredo: str, ttl: int) -> str:
        emitido = agora()
        claims = {
            "id": usuario.id,
            "regra": usuario.regra.value,
            "type": tipo,
            "jti": uuid.uuid4().hex,
            "iat": int(emitido.timestamp()),
            "exp": int((emitido + timedelta(seconds=ttl)).timestamp()),
        }
        return jwt.encode(claims, segredo, algorithm=self.algorithm)

    def _decodificar(self, token: str, tipo: str, segredo: str) -> Dict[str, Any]:
        """
        Raises:
            AutenticacaoError: "Token expirado." ou "Token inválido."
        """
        try:
            claims = jwt.decode(token, segredo, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AutenticacaoError("Token expirado.")
        except JWTError as e:
            logger.debug(f"Token rejeitado: {e}")
            raise AutenticacaoError("Token inválido.")

        if claims.get("type") != tipo or not claims.get("id"):
            raise AutenticacaoError("Token inválido.")
        return claims


class CacheTokenBlacklist:
    """TokenBlacklist no cache do Django (Redis em produção)."""

    PREFIXO = "jwt:blacklist:"

    def revogar(self, jti: str, ttl: int) -> None:
        if ttl <= 0:
            return
        cache.set(f"{self.PREFIXO}{jti}", True, timeout=ttl)
        logger.info(f"[SECURITY] Token revogado: {jti}")

    def esta_revogado(self, jti: str) -> bool:
        return bool(cache.get(f"{self.PREFIXO}{jti}"))

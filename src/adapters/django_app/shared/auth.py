"""
Autenticação e autorização das API Views.

Decorators para métodos de BaseAPIView:

    class MeusChamadosView(BaseAPIView):
        @requer_regras(Regra.USUARIO)
        def get(self, request):
            request.usuario  # UsuarioAutenticado

- requer_autenticacao: exige Bearer token válido (401 caso contrário)
- requer_regras: além do token, exige uma das regras (403 genérico)
"""

from functools import wraps
import logging

from django.http import HttpRequest

from src.core.identidade.autorizacao import exigir_regra
from src.core.identidade.entities import Regra, UsuarioAutenticado
from src.core.shared.exceptions import AcessoNegadoError, AutenticacaoError

logger = logging.getLogger(__name__)

PREFIXO_BEARER = "bearer "


def extrair_token(request: HttpRequest) -> str:
    """
    Raises:
        AutenticacaoError: Se o header Authorization não traz um Bearer token
    """
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(PREFIXO_BEARER):
        raise AutenticacaoError("Token não fornecido.")
    token = header[len(PREFIXO_BEARER):].strip()
    if not token:
        raise AutenticacaoError("Token não fornecido.")
    return token


def autenticar_request(view, request: HttpRequest) -> UsuarioAutenticado:
    token = extrair_token(request)
    resolver = view.get_container().resolver_usuario_autenticado_service()
    return resolver.execute(token)


def requer_regras(*regras: Regra):
    """
    Exige token válido e, se `regras` for informado, uma das regras.

    A resposta 403 nunca informa qual regra era necessária.
    """

    def decorator(metodo):
        @wraps(metodo)
        def wrapper(view, request: HttpRequest, *args, **kwargs):
            try:
                usuario = autenticar_request(view, request)
                if regras:
                    exigir_regra(usuario, regras)
            except Exception as e:
                if isinstance(e, AcessoNegadoError):
                    logger.warning(
                        f"[SECURITY] Acesso negado a {request.method} {request.path}"
                    )
                return view.handle_exception(e)

            request.usuario = usuario
            return metodo(view, request, *args, **kwargs)

        # Lido pela documentação OpenAPI; vazio = qualquer usuário autenticado
        wrapper.regras_exigidas = tuple(regra.value for regra in regras)
        return wrapper

    return decorator


def requer_autenticacao(metodo):
    """Qualquer usuário autenticado, independente da regra."""
    return requer_regras()(metodo)

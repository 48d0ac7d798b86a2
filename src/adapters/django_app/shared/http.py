"""
Infraestrutura HTTP comum às API Views.

- json_response: resposta padronizada {success, data/error, pagination, meta}
- erro_response: exceções de domínio -> status HTTP
- parse_json_body: corpo JSON -> dict (ValidationError se inválido)
- BaseAPIView: parsing, paginação e acesso ao container
"""

import json
import logging
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    AcessoNegadoError,
    AutenticacaoError,
    BusinessRuleViolationError,
    ConflitoError,
    DomainException,
    EntityNotFoundError,
    LimiteRequisicoesExcedidoError,
    ValidationError,
)
from src.core.shared.paginacao import Pagina, Paginacao
from src.config.container import get_container

logger = logging.getLogger(__name__)

ERRO_INTERNO = "Erro interno do servidor"


def json_response(
    success: bool,
    data: Any = None,
    error: str = None,
    status: int = 200,
    meta: Dict = None,
    pagination: Dict = None,
    headers: Dict = None,
) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais (ex: campo inválido)
        pagination: Bloco de paginação (Pagina.meta())
        headers: Headers extras (ex: Retry-After)
    """
    response = {"success": success}

    if data is not None:
        response["data"] = data

    if error is not None:
        response["error"] = error

    if pagination is not None:
        response["pagination"] = pagination

    if meta is not None:
        response["meta"] = meta

    return JsonResponse(response, status=status, headers=headers)


def pagina_response(pagina: Pagina) -> JsonResponse:
    return json_response(
        success=True,
        data=[item.to_dict() for item in pagina.items],
        pagination=pagina.meta(),
    )


def erro_response(e: Exception) -> JsonResponse:
    """
    Mapeia exceções para respostas HTTP.

    Usado por BaseAPIView.handle_exception e pelo RateLimitMiddleware.
    Erros inesperados são logados com traceback e respondidos com
    mensagem genérica, sem detalhes internos.
    """
    if isinstance(e, ValidationError):
        return json_response(
            success=False,
            error=e.message,
            status=400,
            meta={"field": e.field},
        )

    if isinstance(e, AutenticacaoError):
        return json_response(success=False, error=e.message, status=401)

    if isinstance(e, AcessoNegadoError):
        return json_response(success=False, error=e.message, status=403)

    if isinstance(e, EntityNotFoundError):
        return json_response(success=False, error=e.message, status=404)

    if isinstance(e, ConflitoError):
        return json_response(
            success=False,
            error=e.message,
            status=409,
            meta={"field": e.field},
        )

    if isinstance(e, BusinessRuleViolationError):
        return json_response(
            success=False,
            error=e.message,
            status=422,
            meta={"rule": e.rule},
        )

    if isinstance(e, LimiteRequisicoesExcedidoError):
        return json_response(
            success=False,
            error=e.message,
            status=429,
            headers={"Retry-After": str(max(int(e.retry_after), 1))},
        )

    if isinstance(e, DomainException):
        return json_response(success=False, error=e.message, status=400)

    # Erro inesperado
    logger.exception(f"Erro inesperado na API: {e}")
    return json_response(success=False, error=ERRO_INTERNO, status=500)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Raises:
        ValidationError: Se o corpo não é um objeto JSON
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"JSON inválido no corpo (body): {e}", field="body")

    if not isinstance(data, dict):
        raise ValidationError("O corpo (body) deve ser um objeto JSON", field="body")
    return data


def query_bool(request: HttpRequest, nome: str) -> bool:
    return (request.GET.get(nome) or "").lower() in ("1", "true", "sim")


@method_decorator(csrf_exempt, name="dispatch")
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Paginação via query params
    - Tratamento de erros padronizado

    Views de negócio seguem o padrão:

        @requer_regras(Regra.ADMIN)
        def get(self, request):
            try:
                ...
            except Exception as e:
                return self.handle_exception(e)
    """

    limite_padrao = 10

    def get_container(self):
        return get_container()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def get_paginacao(self, request: HttpRequest) -> Paginacao:
        return Paginacao.de_parametros(
            request.GET.get("page"),
            request.GET.get("limit"),
            limite_padrao=self.limite_padrao,
        )

    def handle_exception(self, e: Exception) -> JsonResponse:
        return erro_response(e)

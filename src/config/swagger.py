"""
Documentação OpenAPI da API.

- GET /api-docs/openapi.json - Documento OpenAPI 3
- GET /api-docs/ - Swagger UI (assets via CDN)

O documento é gerado percorrendo o resolver de URLs do Django: cada
método implementado pelas views registradas vira uma operação com
resposta padrão {success, data | error}. Resumo vem da docstring do
método (ou da view) e as regras de acesso do @requer_regras.
"""

import re
from typing import Dict, Iterator, Tuple

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.urls import URLResolver, get_resolver

TITULO = "Help-Me API"
VERSAO = "1.0.0"

METODOS = ("get", "post", "put", "patch", "delete")

# Namespace do include() -> tag
TAGS = {
    "autenticacao": "Autenticação",
    "usuario": "Usuários",
    "tecnico": "Técnicos",
    "admin_api": "Administradores",
    "servico": "Serviços",
    "chamado": "Chamados",
    "fila": "Fila de Chamados",
}

NAO_DOCUMENTADAS = ("swagger_ui", "openapi_json")

PARAMETRO = re.compile(r"<(?:\w+:)?(\w+)>")

RESPOSTA_PADRAO = {
    "type": "object",
    "properties": {
        "success": {"type": "boolean"},
        "data": {},
        "error": {"type": "string"},
        "pagination": {"$ref": "#/components/schemas/Paginacao"},
    },
}


def _caminho(rota: str) -> str:
    # <str:pk> -> {id}
    return "/" + PARAMETRO.sub(
        lambda m: "{id}" if m.group(1) == "pk" else "{%s}" % m.group(1), rota
    )


def _percorrer(padroes, prefixo: str = "", namespace: str = "") -> Iterator[Tuple[str, str, object]]:
    for padrao in padroes:
        rota = prefixo + str(padrao.pattern)
        if isinstance(padrao, URLResolver):
            yield from _percorrer(padrao.url_patterns, rota, padrao.namespace or namespace)
        elif padrao.name not in NAO_DOCUMENTADAS:
            yield rota, namespace, padrao.callback


def _primeira_linha(doc) -> str:
    linhas = [linha.strip() for linha in (doc or "").strip().splitlines()]
    # "Query params:" e afins abrem listas, não servem de resumo
    if not linhas or linhas[0].endswith(":"):
        return ""
    return linhas[0]


def _handlers(callback) -> Iterator[Tuple[str, object, str]]:
    """(método, função, docstring da view) para cada método implementado."""
    view_class = getattr(callback, "view_class", None)
    if view_class is None:
        # Function view (health check)
        yield "get", callback, callback.__doc__
        return

    for metodo in METODOS:
        funcao = getattr(view_class, metodo, None)
        if funcao is not None and metodo in view_class.http_method_names:
            yield metodo, funcao, view_class.__doc__


def _operacao(metodo: str, caminho: str, funcao, doc_view, tag: str) -> Dict:
    resumo = (
        _primeira_linha(funcao.__doc__)
        or _primeira_linha(doc_view)
        or f"{metodo.upper()} {caminho}"
    )
    operacao = {
        "summary": resumo,
        "tags": [tag],
        "responses": {
            "200": {
                "description": "Sucesso",
                "content": {"application/json": {"schema": RESPOSTA_PADRAO}},
            },
            "400": {"description": "Dados inválidos"},
            "429": {"description": "Limite de requisições excedido"},
        },
    }

    regras = getattr(funcao, "regras_exigidas", None)
    if regras is not None:
        operacao["security"] = [{"bearerAuth": []}]
        operacao["description"] = f"Regras permitidas: {', '.join(regras) or 'Qualquer'}"
        operacao["responses"]["401"] = {"description": "Token ausente, inválido ou expirado"}
        if regras:
            operacao["responses"]["403"] = {"description": "Acesso negado."}

    parametros = re.findall(r"\{(\w+)\}", caminho)
    if parametros:
        operacao["parameters"] = [
            {"name": nome, "in": "path", "required": True, "schema": {"type": "string"}}
            for nome in parametros
        ]

    if metodo in ("post", "put", "patch"):
        operacao["requestBody"] = {
            "content": {"application/json": {"schema": {"type": "object"}}},
        }

    return operacao


def gerar_openapi(urlconf=None) -> Dict:
    paths: Dict[str, Dict] = {}
    for rota, namespace, callback in _percorrer(get_resolver(urlconf).url_patterns):
        caminho = _caminho(rota)
        tag = TAGS.get(namespace, "Infraestrutura")
        for metodo, funcao, doc_view in _handlers(callback):
            paths.setdefault(caminho, {})[metodo] = _operacao(metodo, caminho, funcao, doc_view, tag)

    return {
        "openapi": "3.0.3",
        "info": {
            "title": TITULO,
            "version": VERSAO,
            "description": "API de abertura e atendimento de chamados de suporte.",
        },
        "paths": paths,
        "components": {
            "securitySchemes": {
                "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
            },
            "schemas": {
                "Paginacao": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total": {"type": "integer"},
                        "totalPages": {"type": "integer"},
                        "hasNext": {"type": "boolean"},
                        "hasPrev": {"type": "boolean"},
                    },
                },
            },
        },
    }


SWAGGER_HTML = """<!DOCTYPE html>
<html lang="pt-br">
<head>
  <meta charset="utf-8">
  <title>{titulo}</title>
  <link rel="stylesheet" href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    window.ui = SwaggerUIBundle({{ url: "{url}", dom_id: "#swagger-ui" }});
  </script>
</body>
</html>
"""


def openapi_json(request: HttpRequest) -> JsonResponse:
    return JsonResponse(gerar_openapi())


def swagger_ui(request: HttpRequest) -> HttpResponse:
    return HttpResponse(SWAGGER_HTML.format(titulo=TITULO, url="/api-docs/openapi.json"))

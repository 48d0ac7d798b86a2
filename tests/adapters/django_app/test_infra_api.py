"""
Testes de health check, documentação e limites globais de requisição.
"""

import pytest
from django.urls import include, path

from src.adapters.django_app.shared.auth import requer_regras
from src.adapters.django_app.shared.http import BaseAPIView, json_response
from src.config.swagger import gerar_openapi
from src.core.identidade.entities import Regra

pytestmark = pytest.mark.django_db


class TestHealthCheck:

    def test_tudo_ok(self, client, mongo_simulado):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "checks": {"database": "ok", "cache": "ok", "mongodb": "ok"},
        }
        mongo_simulado.command.assert_called_once_with("ping")

    def test_mongo_fora(self, client, mongo_simulado):
        mongo_simulado.command.side_effect = ConnectionError("sem rota")

        response = client.get("/health/")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"]["mongodb"] == "erro"
        assert body["checks"]["database"] == "ok"

    def test_nao_consome_rate_limit(self, client, settings):
        settings.RATE_LIMITS = {**settings.RATE_LIMITS, "geral": {"janela": 60, "limite": 1}}

        respostas = [client.get("/health/").status_code for _ in range(3)]

        assert respostas == [200, 200, 200]


class TestDocumentacao:

    def test_swagger_ui(self, client):
        response = client.get("/api-docs/")

        assert response.status_code == 200
        assert b"swagger-ui" in response.content
        assert b"/api-docs/openapi.json" in response.content

    def test_openapi(self, client):
        documento = client.get("/api-docs/openapi.json").json()

        assert documento["openapi"] == "3.0.3"
        assert "bearerAuth" in documento["components"]["securitySchemes"]
        assert "/chamado/abertura-chamado" in documento["paths"]
        assert "post" in documento["paths"]["/auth/login"]
        assert "security" not in documento["paths"]["/auth/login"]["post"]

    def test_rotas_vem_do_resolver(self, client):
        paths = client.get("/api-docs/openapi.json").json()["paths"]

        # AdminDetailView herda get/put mas só libera delete
        assert set(paths["/admin/{id}"]) == {"delete"}
        assert set(paths["/tecnico/{id}"]) == {"get", "put", "delete"}
        assert set(paths["/usuario/"]) == {"get", "post"}
        assert "/api-docs/" not in paths
        assert "/api-docs/openapi.json" not in paths

    def test_regras_de_acesso(self, client):
        paths = client.get("/api-docs/openapi.json").json()["paths"]

        horarios = paths["/tecnico/{id}/horarios"]["put"]
        assert horarios["description"] == "Regras permitidas: ADMIN, TECNICO"
        assert "403" in horarios["responses"]
        assert horarios["parameters"][0]["name"] == "id"

        me = paths["/auth/me"]["get"]
        assert me["security"] == [{"bearerAuth": []}]
        assert me["description"] == "Regras permitidas: Qualquer"
        assert "403" not in me["responses"]

        health = paths["/health/"]["get"]
        assert "security" not in health
        assert health["tags"] == ["Infraestrutura"]

    def test_nova_rota_aparece_sem_cadastro_manual(self):
        class RelatorioView(BaseAPIView):
            @requer_regras(Regra.ADMIN)
            def get(self, request, pk):
                """Relatório do chamado"""
                return json_response(success=True)

        class UrlsDeExemplo:
            urlpatterns = [
                path("chamado/", include(([path("<str:pk>/relatorio", RelatorioView.as_view(), name="relatorio")], "chamado"))),
            ]

        documento = gerar_openapi(UrlsDeExemplo)

        operacao = documento["paths"]["/chamado/{id}/relatorio"]["get"]
        assert operacao["summary"] == "Relatório do chamado"
        assert operacao["tags"] == ["Chamados"]
        assert operacao["description"] == "Regras permitidas: ADMIN"


class TestRateLimitGlobal:

    def test_limite_geral(self, api, usuario_headers, settings):
        settings.RATE_LIMITS = {**settings.RATE_LIMITS, "geral": {"janela": 60, "limite": 2}}

        respostas = [api("get", "/auth/me", headers=usuario_headers) for _ in range(3)]

        assert [r.status_code for r in respostas] == [200, 200, 429]
        assert respostas[-1].json()["success"] is False
        assert int(respostas[-1]["Retry-After"]) > 0

    def test_limite_por_ip(self, api, usuario_headers, settings):
        settings.RATE_LIMITS = {**settings.RATE_LIMITS, "geral": {"janela": 60, "limite": 1}}
        outro_ip = {**usuario_headers, "REMOTE_ADDR": "192.168.0.9"}

        assert api("get", "/auth/me", headers=usuario_headers).status_code == 200
        assert api("get", "/auth/me", headers=outro_ip).status_code == 200
        assert api("get", "/auth/me", headers=usuario_headers).status_code == 429

    def test_x_forwarded_for_sem_proxy_confiavel_e_ignorado(self, api, usuario_headers, settings):
        settings.RATE_LIMITS = {**settings.RATE_LIMITS, "geral": {"janela": 60, "limite": 2}}

        respostas = [
            api("get", "/auth/me", headers={**usuario_headers, "HTTP_X_FORWARDED_FOR": f"10.0.0.{indice}"})
            for indice in range(3)
        ]

        assert [r.status_code for r in respostas] == [200, 200, 429]

    def test_cliente_atras_de_proxy_confiavel(self, api, usuario_headers, settings):
        settings.RATE_LIMITS = {**settings.RATE_LIMITS, "geral": {"janela": 60, "limite": 1}}
        settings.RATE_LIMIT_PROXIES_CONFIAVEIS = ["172.16.0.0/12"]
        via_proxy = {**usuario_headers, "REMOTE_ADDR": "172.16.0.1"}

        primeiro = {**via_proxy, "HTTP_X_FORWARDED_FOR": "200.1.1.1, 172.16.0.2"}
        segundo = {**via_proxy, "HTTP_X_FORWARDED_FOR": "200.2.2.2"}

        assert api("get", "/auth/me", headers=primeiro).status_code == 200
        assert api("get", "/auth/me", headers=segundo).status_code == 200
        assert api("get", "/auth/me", headers=primeiro).status_code == 429

    def test_limite_de_escrita(self, api, admin_headers, settings):
        settings.RATE_LIMITS = {**settings.RATE_LIMITS, "escrita": {"janela": 60, "limite": 2}}

        criados = [
            api("post", "/servico/", {"nome": f"Servico {indice}"}, admin_headers)
            for indice in range(3)
        ]

        assert [r.status_code for r in criados] == [201, 201, 429]
        assert criados[-1].json()["error"] == "Muitas operações de escrita. Aguarde um momento."
        # leitura continua liberada
        assert api("get", "/servico/", headers=admin_headers).status_code == 200

    def test_escrita_com_erro_nao_conta(self, api, admin_headers, settings):
        settings.RATE_LIMITS = {**settings.RATE_LIMITS, "escrita": {"janela": 60, "limite": 1}}

        invalidos = [api("post", "/servico/", {"nome": "TI"}, admin_headers) for _ in range(3)]
        valido = api("post", "/servico/", {"nome": "Telefonia"}, admin_headers)

        assert {r.status_code for r in invalidos} == {400}
        assert valido.status_code == 201

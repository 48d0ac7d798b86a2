"""
Fixtures dos testes dos adapters Django.

Este arquivo configura:
- Container DI limpo a cada teste, com histórico em memória,
  MongoDB simulado e relógio fixo dentro do expediente
- Cache limpo (rate limit e blacklist de tokens)
- Usuários por regra e headers Authorization prontos
"""

from datetime import datetime
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo
import json

import pytest
from dependency_injector import providers
from django.core.cache import cache

from src.config.container import get_container, reset_container
from src.core.catalogo.dtos import CriarServicoInputDTO
from src.core.chamados.ports import InMemoryHistoricoChamadoRepository
from src.core.identidade.dtos import CriarUsuarioInputDTO

FUSO = ZoneInfo("America/Sao_Paulo")
SENHA_PADRAO = "senhaforte1"


@pytest.fixture
def historico_em_memoria():
    return InMemoryHistoricoChamadoRepository()


@pytest.fixture
def mongo_simulado():
    return MagicMock(name="mongo_database")


@pytest.fixture(autouse=True)
def container(historico_em_memoria, mongo_simulado):
    """Container novo por teste, sem depender de MongoDB real."""
    cache.clear()
    reset_container()

    c = get_container()
    c.historico_chamado_repository.override(providers.Object(historico_em_memoria))
    c.mongo_database.override(providers.Object(mongo_simulado))
    c.relogio.override(providers.Object(lambda: datetime(2026, 3, 2, 10, 0, tzinfo=FUSO)))

    yield c

    reset_container()
    cache.clear()


# =============================================================================
# Helpers HTTP
# =============================================================================

def enviar(client, metodo: str, url: str, dados=None, headers=None):
    """Requisição JSON com headers extras (ex: HTTP_AUTHORIZATION)."""
    funcao = getattr(client, metodo.lower())
    extras = headers or {}
    if dados is None:
        return funcao(url, **extras)
    return funcao(url, data=json.dumps(dados), content_type="application/json", **extras)


@pytest.fixture
def api(client):
    """Atalho: api("post", "/servico/", {...}, headers)."""

    def chamar(metodo, url, dados=None, headers=None):
        return enviar(client, metodo, url, dados, headers)

    return chamar


# =============================================================================
# Usuários
# =============================================================================

@pytest.fixture
def criar_usuario(db, container):
    """Factory: cria usuário pelo use case e devolve o UsuarioOutputDTO."""

    def criar(regra="USUARIO", email=None, **kwargs):
        dados = {
            "nome": kwargs.pop("nome", regra.capitalize()),
            "sobrenome": kwargs.pop("sobrenome", "Teste"),
            "email": email or f"{regra.lower()}@empresa.com",
            "password": kwargs.pop("password", SENHA_PADRAO),
            "regra": regra,
            "setor": kwargs.pop("setor", "FINANCEIRO" if regra == "USUARIO" else None),
        }
        dados.update(kwargs)
        return container.criar_usuario_service().execute(CriarUsuarioInputDTO(**dados))

    return criar


@pytest.fixture
def auth_headers(container):
    """Gera header Authorization com um access token válido."""

    def gerar(usuario_output):
        entidade = container.usuario_repository().get_by_id(usuario_output.id)
        token = container.token_service().gerar_access_token(entidade)
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    return gerar


@pytest.fixture
def admin(criar_usuario):
    return criar_usuario("ADMIN", email="admin@empresa.com", nome="Ana")


@pytest.fixture
def tecnico(criar_usuario):
    return criar_usuario("TECNICO", email="tecnico@empresa.com", nome="Tiago")


@pytest.fixture
def usuario(criar_usuario):
    return criar_usuario("USUARIO", email="usuario@empresa.com", nome="Bruna")


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)


@pytest.fixture
def tecnico_headers(tecnico, auth_headers):
    return auth_headers(tecnico)


@pytest.fixture
def usuario_headers(usuario, auth_headers):
    return auth_headers(usuario)


# =============================================================================
# Catálogo
# =============================================================================

@pytest.fixture
def servicos(db, container):
    """Serviços ativos usados na abertura de chamados."""
    service = container.criar_servico_service()
    return [
        service.execute(CriarServicoInputDTO(nome=nome, descricao=f"Suporte de {nome}"))
        for nome in ("Impressoras", "Rede")
    ]

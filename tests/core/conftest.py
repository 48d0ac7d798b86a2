"""
Fixtures dos testes unitários do Core.

Usa os repositórios em memória e fakes de infraestrutura
(UoW, hasher de senha e serviço de tokens) para isolar os
use cases do Django e do MongoDB.
"""

from datetime import datetime
from typing import Any, Dict, List
from zoneinfo import ZoneInfo

import pytest

from src.core.catalogo.entities import ServicoEntity
from src.core.catalogo.ports import InMemoryServicoRepository
from src.core.chamados.ports import InMemoryChamadoRepository, InMemoryHistoricoChamadoRepository
from src.core.identidade.entities import (
    ExpedienteEntity,
    Regra,
    Setor,
    UsuarioAutenticado,
    UsuarioEntity,
)
from src.core.identidade.ports import (
    InMemoryExpedienteRepository,
    InMemoryTokenBlacklist,
    InMemoryUsuarioRepository,
)
from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import AutenticacaoError

FUSO = ZoneInfo("America/Sao_Paulo")


class FakeUnitOfWork:
    """
    Fake Unit of Work para testes.

    Permite testar:
    - Comportamento de commit/rollback
    - Eventos publicados (somente após commit)
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self.published: List[DomainEvent] = []
        self.commits = 0
        self.rollbacks = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    def commit(self):
        self.commits += 1
        self.published.extend(self._events)
        self._events.clear()

    def rollback(self):
        self.rollbacks += 1
        self._events.clear()

    def publish_event(self, event: DomainEvent):
        self._events.append(event)


class FakePasswordHasher:
    def gerar_hash(self, senha: str) -> str:
        return f"hash::{senha}"

    def verificar(self, senha: str, password_hash: str) -> bool:
        return password_hash == f"hash::{senha}"


class FakeTokenService:
    """Emite tokens opacos e guarda as claims de cada um."""

    access_token_ttl = 3600

    def __init__(self):
        self._claims: Dict[str, Dict[str, Any]] = {}
        self._contador = 0

    def _emitir(self, usuario: UsuarioEntity, tipo: str) -> str:
        self._contador += 1
        token = f"{tipo}-{usuario.id}-{self._contador}"
        self._claims[token] = {
            "id": usuario.id,
            "regra": usuario.regra.value,
            "type": tipo,
            "jti": f"jti-{self._contador}",
            "exp": int(datetime.now().timestamp()) + self.access_token_ttl,
        }
        return token

    def gerar_access_token(self, usuario: UsuarioEntity) -> str:
        return self._emitir(usuario, "access")

    def gerar_refresh_token(self, usuario: UsuarioEntity) -> str:
        return self._emitir(usuario, "refresh")

    def decodificar_access_token(self, token: str) -> Dict[str, Any]:
        return self._decodificar(token, "access")

    def decodificar_refresh_token(self, token: str) -> Dict[str, Any]:
        return self._decodificar(token, "refresh")

    def _decodificar(self, token: str, tipo: str) -> Dict[str, Any]:
        claims = self._claims.get(token)
        if claims is None or claims["type"] != tipo:
            raise AutenticacaoError("Token inválido.")
        return claims


def ator_de(usuario: UsuarioEntity) -> UsuarioAutenticado:
    return UsuarioAutenticado(
        id=usuario.id,
        regra=usuario.regra,
        email=usuario.email,
        nome=usuario.nome_completo,
    )


# =============================================================================
# Infraestrutura fake
# =============================================================================

@pytest.fixture
def uow():
    return FakeUnitOfWork()


@pytest.fixture
def hasher():
    return FakePasswordHasher()


@pytest.fixture
def token_service():
    return FakeTokenService()


@pytest.fixture
def token_blacklist():
    return InMemoryTokenBlacklist()


# =============================================================================
# Repositórios em memória
# =============================================================================

@pytest.fixture
def usuario_repo():
    return InMemoryUsuarioRepository()


@pytest.fixture
def expediente_repo():
    return InMemoryExpedienteRepository()


@pytest.fixture
def servico_repo():
    repo = InMemoryServicoRepository()
    for nome in ("Impressoras", "Rede", "E-mail"):
        repo.save(ServicoEntity.criar(nome=nome, descricao=f"Atendimento de {nome}"))
    return repo


@pytest.fixture
def chamado_repo(usuario_repo):
    return InMemoryChamadoRepository(usuario_repo=usuario_repo)


@pytest.fixture
def historico_repo():
    return InMemoryHistoricoChamadoRepository()


# =============================================================================
# Usuários
# =============================================================================

@pytest.fixture
def usuario(usuario_repo):
    entidade = UsuarioEntity.criar(
        nome="Bruna",
        sobrenome="Souza",
        email="bruna@empresa.com",
        password_hash="hash::senhaforte1",
        regra=Regra.USUARIO,
        setor=Setor.FINANCEIRO,
    )
    usuario_repo.save(entidade)
    return entidade


@pytest.fixture
def outro_usuario(usuario_repo):
    entidade = UsuarioEntity.criar(
        nome="Carlos",
        sobrenome="Lima",
        email="carlos@empresa.com",
        password_hash="hash::senhaforte1",
        regra=Regra.USUARIO,
        setor=Setor.LOGISTICA,
    )
    usuario_repo.save(entidade)
    return entidade


@pytest.fixture
def tecnico(usuario_repo, expediente_repo):
    entidade = UsuarioEntity.criar(
        nome="Tiago",
        sobrenome="Reis",
        email="tiago@empresa.com",
        password_hash="hash::senhaforte1",
        regra=Regra.TECNICO,
    )
    usuario_repo.save(entidade)
    expediente_repo.save(ExpedienteEntity.criar(entidade.id, "08:00", "17:00"))
    return entidade


@pytest.fixture
def admin(usuario_repo):
    entidade = UsuarioEntity.criar(
        nome="Ana",
        sobrenome="Alves",
        email="ana@empresa.com",
        password_hash="hash::senhaforte1",
        regra=Regra.ADMIN,
    )
    usuario_repo.save(entidade)
    return entidade


@pytest.fixture
def ator_usuario(usuario):
    return ator_de(usuario)


@pytest.fixture
def ator_outro_usuario(outro_usuario):
    return ator_de(outro_usuario)


@pytest.fixture
def ator_tecnico(tecnico):
    return ator_de(tecnico)


@pytest.fixture
def ator_admin(admin):
    return ator_de(admin)


@pytest.fixture
def dez_da_manha():
    """Relógio fixo dentro do expediente padrão."""
    return lambda: datetime(2026, 3, 2, 10, 0, tzinfo=FUSO)

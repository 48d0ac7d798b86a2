"""
Ports (Interfaces) do Domínio de Identidade.

Contratos implementados pelos adapters:
- UsuarioRepository: Persistência de usuários (Django ORM)
- ExpedienteRepository: Persistência de expedientes (Django ORM)
- PasswordHasher: Hash de senhas (django.contrib.auth.hashers)
- TokenService: Emissão/validação de JWT (python-jose)
- TokenBlacklist: Revogação de tokens (cache Redis)

Também traz implementações em memória usadas nos testes do Core.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
import time

from src.core.shared.paginacao import Pagina, Paginacao, paginar_lista

from .entities import UsuarioEntity, ExpedienteEntity, Regra


@runtime_checkable
class UsuarioRepository(Protocol):
    """Interface para persistência de usuários."""

    def save(self, usuario: UsuarioEntity) -> None:
        ...

    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        ...

    def get_by_email(self, email: str) -> Optional[UsuarioEntity]:
        ...

    def existe_email(self, email: str, excluir_id: Optional[str] = None) -> bool:
        ...

    def delete(self, usuario_id: str) -> None:
        """Remoção física (apenas exclusão permanente solicitada por admin)."""
        ...

    def listar(
        self,
        paginacao: Paginacao,
        regra: Optional[Regra] = None,
        busca: Optional[str] = None,
        incluir_inativos: bool = False,
    ) -> Pagina[UsuarioEntity]:
        ...


@runtime_checkable
class ExpedienteRepository(Protocol):
    """Interface para persistência de expedientes."""

    def save(self, expediente: ExpedienteEntity) -> None:
        ...

    def get_ativo_por_usuario(self, usuario_id: str) -> Optional[ExpedienteEntity]:
        ...

    def delete_por_usuario(self, usuario_id: str) -> None:
        ...


class PasswordHasher(Protocol):
    def gerar_hash(self, senha: str) -> str:
        ...

    def verificar(self, senha: str, password_hash: str) -> bool:
        ...


class TokenService(Protocol):
    """
    Emissão e validação de tokens de acesso.

    Claims obrigatórias: id, regra, type ("access"|"refresh"), jti, exp.

    decodificar_* lança AutenticacaoError("Token expirado.") ou
    AutenticacaoError("Token inválido.").
    """

    access_token_ttl: int

    def gerar_access_token(self, usuario: UsuarioEntity) -> str:
        ...

    def gerar_refresh_token(self, usuario: UsuarioEntity) -> str:
        ...

    def decodificar_access_token(self, token: str) -> Dict[str, Any]:
        ...

    def decodificar_refresh_token(self, token: str) -> Dict[str, Any]:
        ...


class TokenBlacklist(Protocol):
    def revogar(self, jti: str, ttl: int) -> None:
        ...

    def esta_revogado(self, jti: str) -> bool:
        ...


# =============================================================================
# Implementações em memória (testes / prototipagem)
# =============================================================================

class InMemoryUsuarioRepository:
    """
    Implementação em memória do UsuarioRepository.

    Não usar em produção!
    """

    def __init__(self):
        self._usuarios: Dict[str, UsuarioEntity] = {}

    def save(self, usuario: UsuarioEntity) -> None:
        self._usuarios[usuario.id] = usuario

    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        return self._usuarios.get(usuario_id)

    def get_by_email(self, email: str) -> Optional[UsuarioEntity]:
        email = (email or "").strip().lower()
        for usuario in self._usuarios.values():
            if usuario.email == email:
                return usuario
        return None

    def existe_email(self, email: str, excluir_id: Optional[str] = None) -> bool:
        usuario = self.get_by_email(email)
        return usuario is not None and usuario.id != excluir_id

    def delete(self, usuario_id: str) -> None:
        self._usuarios.pop(usuario_id, None)

    def listar(
        self,
        paginacao: Paginacao,
        regra: Optional[Regra] = None,
        busca: Optional[str] = None,
        incluir_inativos: bool = False,
    ) -> Pagina[UsuarioEntity]:
        usuarios: List[UsuarioEntity] = list(self._usuarios.values())
        if regra is not None:
            usuarios = [u for u in usuarios if u.regra == regra]
        if not incluir_inativos:
            usuarios = [u for u in usuarios if u.pode_autenticar]
        if busca:
            termo = busca.lower()
            usuarios = [
                u for u in usuarios
                if termo in u.nome_completo.lower() or termo in u.email
            ]
        usuarios.sort(key=lambda u: u.nome)
        return paginar_lista(usuarios, paginacao)

    def clear(self) -> None:
        self._usuarios.clear()


class InMemoryExpedienteRepository:
    def __init__(self):
        self._expedientes: Dict[str, ExpedienteEntity] = {}

    def save(self, expediente: ExpedienteEntity) -> None:
        self._expedientes[expediente.id] = expediente

    def get_ativo_por_usuario(self, usuario_id: str) -> Optional[ExpedienteEntity]:
        for expediente in self._expedientes.values():
            if expediente.usuario_id == usuario_id and expediente.ativo:
                return expediente
        return None

    def delete_por_usuario(self, usuario_id: str) -> None:
        self._expedientes = {
            k: v for k, v in self._expedientes.items()
            if v.usuario_id != usuario_id
        }


class InMemoryTokenBlacklist:
    """Blacklist com expiração por relógio monotônico."""

    def __init__(self):
        self._revogados: Dict[str, float] = {}

    def revogar(self, jti: str, ttl: int) -> None:
        self._revogados[jti] = time.monotonic() + max(ttl, 0)

    def esta_revogado(self, jti: str) -> bool:
        expira = self._revogados.get(jti)
        if expira is None:
            return False
        if expira < time.monotonic():
            del self._revogados[jti]
            return False
        return True

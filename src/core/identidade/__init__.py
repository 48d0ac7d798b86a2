"""
Domínio de Identidade - Usuários, Papéis e Expedientes.

Este módulo contém a lógica de autenticação e autorização:
- Entidades (UsuarioEntity, ExpedienteEntity, Regra, Setor)
- Use Cases (login, refresh, logout, cadastros, expediente)
- Ports (repositórios, hash de senha, tokens, blacklist)

Características do Domínio:
- Papéis como enum fechado (USUARIO, TECNICO, ADMIN)
- Erros de autenticação/autorização sempre genéricos
- Exclusão lógica como padrão
"""

from .entities import (
    Regra,
    Setor,
    UsuarioEntity,
    ExpedienteEntity,
    UsuarioAutenticado,
)
from .autorizacao import exigir_regra, exigir_proprio_ou_admin
from .ports import (
    UsuarioRepository,
    ExpedienteRepository,
    PasswordHasher,
    TokenService,
    TokenBlacklist,
)

__all__ = [
    "Regra",
    "Setor",
    "UsuarioEntity",
    "ExpedienteEntity",
    "UsuarioAutenticado",
    "exigir_regra",
    "exigir_proprio_ou_admin",
    "UsuarioRepository",
    "ExpedienteRepository",
    "PasswordHasher",
    "TokenService",
    "TokenBlacklist",
]

"""
Data Transfer Objects (DTOs) do Domínio de Identidade.

Tipos de DTOs:
- Input DTOs: Dados de entrada já extraídos do request
- Output DTOs: Formatam dados para resposta (nunca expõem hash de senha)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import UsuarioEntity, ExpedienteEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class LoginInputDTO:
    """Credenciais do login."""

    email: str
    password: str


@dataclass(frozen=True)
class CriarUsuarioInputDTO:
    """
    DTO de entrada para cadastro de usuário, técnico ou admin.

    Attributes:
        regra: Nome do enum Regra (a view define conforme a rota)
        setor: Nome do enum Setor (obrigatório para USUARIO)
        entrada / saida: Expediente inicial (apenas técnicos)
    """

    nome: str
    sobrenome: str
    email: str
    password: str
    regra: str = "USUARIO"
    setor: Optional[str] = None
    telefone: Optional[str] = None
    ramal: Optional[str] = None
    entrada: Optional[str] = None
    saida: Optional[str] = None


@dataclass(frozen=True)
class AtualizarUsuarioInputDTO:
    """Atualização parcial; None significa "não alterar"."""

    usuario_id: str
    nome: Optional[str] = None
    sobrenome: Optional[str] = None
    email: Optional[str] = None
    setor: Optional[str] = None
    telefone: Optional[str] = None
    ramal: Optional[str] = None
    avatar_url: Optional[str] = None
    password: Optional[str] = None


@dataclass(frozen=True)
class AlterarSenhaInputDTO:
    usuario_id: str
    senha_atual: str
    nova_senha: str


@dataclass(frozen=True)
class DefinirExpedienteInputDTO:
    tecnico_id: str
    entrada: str
    saida: str


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class ExpedienteOutputDTO:
    id: str
    entrada: str
    saida: str
    ativo: bool

    @classmethod
    def from_entity(cls, entity: ExpedienteEntity) -> "ExpedienteOutputDTO":
        return cls(
            id=entity.id,
            entrada=entity.entrada,
            saida=entity.saida,
            ativo=entity.ativo,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "entrada": self.entrada,
            "saida": self.saida,
            "ativo": self.ativo,
        }


@dataclass
class UsuarioOutputDTO:
    """
    DTO de saída de usuário.

    Usado por /auth/me e pelas rotas de cadastro.
    """

    id: str
    nome: str
    sobrenome: str
    email: str
    regra: str
    setor: Optional[str]
    telefone: Optional[str]
    ramal: Optional[str]
    avatar_url: Optional[str]
    ativo: bool
    gerado_em: datetime
    atualizado_em: datetime
    expediente: Optional[ExpedienteOutputDTO] = None

    @classmethod
    def from_entity(
        cls,
        entity: UsuarioEntity,
        expediente: Optional[ExpedienteEntity] = None,
    ) -> "UsuarioOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            sobrenome=entity.sobrenome,
            email=entity.email,
            regra=entity.regra.value,
            setor=entity.setor.value if entity.setor else None,
            telefone=entity.telefone,
            ramal=entity.ramal,
            avatar_url=entity.avatar_url,
            ativo=entity.ativo,
            gerado_em=entity.gerado_em,
            atualizado_em=entity.atualizado_em,
            expediente=ExpedienteOutputDTO.from_entity(expediente) if expediente else None,
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "nome": self.nome,
            "sobrenome": self.sobrenome,
            "email": self.email,
            "regra": self.regra,
            "setor": self.setor,
            "telefone": self.telefone,
            "ramal": self.ramal,
            "avatarUrl": self.avatar_url,
            "ativo": self.ativo,
            "geradoEm": self.gerado_em.isoformat(),
            "atualizadoEm": self.atualizado_em.isoformat(),
        }
        if self.expediente:
            data["expediente"] = self.expediente.to_dict()
        return data


@dataclass
class TokensOutputDTO:
    """Par de tokens emitido no login e na renovação."""

    access_token: str
    refresh_token: str
    expires_in: int
    usuario: UsuarioOutputDTO

    def to_dict(self) -> dict:
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "expiresIn": self.expires_in,
            "usuario": self.usuario.to_dict(),
        }

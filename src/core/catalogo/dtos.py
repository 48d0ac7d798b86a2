"""DTOs do Catálogo de Serviços."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import ServicoEntity


@dataclass(frozen=True)
class CriarServicoInputDTO:
    nome: str
    descricao: Optional[str] = None


@dataclass(frozen=True)
class AtualizarServicoInputDTO:
    servico_id: str
    nome: Optional[str] = None
    descricao: Optional[str] = None


@dataclass
class ServicoOutputDTO:
    id: str
    nome: str
    descricao: Optional[str]
    ativo: bool
    gerado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, entity: ServicoEntity) -> "ServicoOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            descricao=entity.descricao,
            ativo=entity.ativo,
            gerado_em=entity.gerado_em,
            atualizado_em=entity.atualizado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "descricao": self.descricao,
            "ativo": self.ativo,
            "geradoEm": self.gerado_em.isoformat(),
            "atualizadoEm": self.atualizado_em.isoformat(),
        }

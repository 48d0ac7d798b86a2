"""
Data Transfer Objects (DTOs) do Domínio de Chamados.

Tipos de DTOs:
- Input DTOs: Dados já extraídos do corpo da requisição
- Filtro: Critérios de consulta das filas
- Output DTOs: Formatam dados para resposta (camelCase)
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional, Tuple

from .entities import ChamadoEntity, ChamadoStatus


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class AbrirChamadoInputDTO:
    """
    DTO de entrada para abrir chamado.

    Attributes:
        descricao: Problema relatado
        servicos: Nomes dos serviços (tuple para ser hashable)
    """

    descricao: str
    servicos: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AlterarStatusInputDTO:
    """
    DTO do endpoint de status.

    Attributes:
        status: EM_ATENDIMENTO, ENCERRADO ou CANCELADO
        descricao_encerramento: Obrigatória para ENCERRADO/CANCELADO
        atualizacao_descricao: Substitui a descrição padrão do histórico
        tecnico_id: Técnico a atribuir (apenas quando um admin atribui)
    """

    chamado_id: str
    status: str
    descricao_encerramento: Optional[str] = None
    atualizacao_descricao: Optional[str] = None
    tecnico_id: Optional[str] = None


@dataclass(frozen=True)
class FiltroChamadosDTO:
    """
    Critérios de consulta usados pelas filas.

    Campos None não filtram. `status` é uma tupla de status aceitos.
    """

    usuario_id: Optional[str] = None
    tecnico_id: Optional[str] = None
    status: Tuple[ChamadoStatus, ...] = ()
    setor: Optional[str] = None
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    busca: Optional[str] = None
    mais_recentes_primeiro: bool = True
    reabertos_primeiro: bool = False
    sem_tecnico: Optional[bool] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class ChamadoOutputDTO:
    id: str
    os: str
    descricao: str
    descricao_encerramento: Optional[str]
    status: str
    usuario_id: str
    tecnico_id: Optional[str]
    servicos: list
    gerado_em: datetime
    atualizado_em: datetime
    encerrado_em: Optional[datetime]
    pode_reabrir: bool = False

    @classmethod
    def from_entity(cls, entity: ChamadoEntity) -> "ChamadoOutputDTO":
        return cls(
            id=entity.id,
            os=entity.os,
            descricao=entity.descricao,
            descricao_encerramento=entity.descricao_encerramento,
            status=entity.status.value,
            usuario_id=entity.usuario_id,
            tecnico_id=entity.tecnico_id,
            servicos=list(entity.servicos),
            gerado_em=entity.gerado_em,
            atualizado_em=entity.atualizado_em,
            encerrado_em=entity.encerrado_em,
            pode_reabrir=entity.pode_reabrir(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "OS": self.os,
            "descricao": self.descricao,
            "descricaoEncerramento": self.descricao_encerramento,
            "status": self.status,
            "usuarioId": self.usuario_id,
            "tecnicoId": self.tecnico_id,
            "servicos": self.servicos,
            "geradoEm": self.gerado_em.isoformat(),
            "atualizadoEm": self.atualizado_em.isoformat(),
            "encerradoEm": self.encerrado_em.isoformat() if self.encerrado_em else None,
            "podeReabrir": self.pode_reabrir,
        }


@dataclass
class EstatisticasOutputDTO:
    """Contadores do painel administrativo."""

    total: int
    por_status: Dict[str, int]
    pendentes: int
    sem_tecnico: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "porStatus": self.por_status,
            "pendentes": self.pendentes,
            "semTecnico": self.sem_tecnico,
        }

"""
Domínio de Chamados.

Ciclo de vida do chamado (abertura, atendimento, encerramento,
reabertura e cancelamento), histórico append-only e filas por regra.
"""

from .entities import ChamadoEntity, ChamadoStatus, HistoricoChamado, TipoHistorico
from .fila import FilaDeChamadosService
from .ports import ChamadoRepository, HistoricoChamadoRepository

__all__ = [
    "ChamadoEntity",
    "ChamadoStatus",
    "HistoricoChamado",
    "TipoHistorico",
    "FilaDeChamadosService",
    "ChamadoRepository",
    "HistoricoChamadoRepository",
]

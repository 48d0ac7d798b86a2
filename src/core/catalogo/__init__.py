"""
Catálogo de Serviços.

Serviços são escolhidos pelo usuário na abertura do chamado e
vinculados a ele por Ordens de Serviço.
"""

from .entities import ServicoEntity
from .ports import ServicoRepository

__all__ = [
    "ServicoEntity",
    "ServicoRepository",
]

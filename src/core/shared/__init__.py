"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base classes para Domain Events
- Paginação
"""

from .exceptions import (
    DomainException,
    ValidationError,
    AutenticacaoError,
    CredenciaisInvalidasError,
    AcessoNegadoError,
    EntityNotFoundError,
    ConflitoError,
    BusinessRuleViolationError,
    LimiteRequisicoesExcedidoError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher
from .paginacao import Pagina, Paginacao

__all__ = [
    "DomainException",
    "ValidationError",
    "AutenticacaoError",
    "CredenciaisInvalidasError",
    "AcessoNegadoError",
    "EntityNotFoundError",
    "ConflitoError",
    "BusinessRuleViolationError",
    "LimiteRequisicoesExcedidoError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "Pagina",
    "Paginacao",
]

"""
Domain Events do Domínio de Chamados.

Eventos:
- ChamadoAbertoEvent: Novo chamado foi aberto
- ChamadoAtribuidoEvent: Técnico assumiu o chamado
- ChamadoEncerradoEvent: Chamado foi encerrado
- ChamadoReabertoEvent: Chamado encerrado foi reaberto
- ChamadoCanceladoEvent: Chamado foi cancelado

Uso:
    Eventos são criados nos use cases e publicados através do
    UnitOfWork após commit bem-sucedido.

    with uow:
        chamado = ChamadoEntity.criar(...)
        repo.save(chamado)
        uow.publish_event(ChamadoAbertoEvent(aggregate_id=chamado.id, ...))
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.core.shared.events import DomainEvent


@dataclass
class ChamadoAbertoEvent(DomainEvent):
    """
    Evento: Chamado foi aberto.

    Handlers típicos:
    - Enviar email de confirmação ao solicitante

    Attributes:
        os: Número da ordem de serviço
        usuario_id: Solicitante
        usuario_email: Email para notificação
        servicos: Serviços vinculados
    """

    os: str = ""
    usuario_id: str = ""
    usuario_email: str = ""
    servicos: List[str] = field(default_factory=list)

    def __post_init__(self):
        pass

    @property
    def aggregate_type(self) -> str:
        return "Chamado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "os": self.os,
            "usuario_id": self.usuario_id,
            "usuario_email": self.usuario_email,
            "servicos": list(self.servicos),
        }


@dataclass
class ChamadoAtribuidoEvent(DomainEvent):
    """
    Evento: Chamado foi assumido por um técnico.

    Attributes:
        tecnico_id: Técnico responsável
        atribuido_por_id: Quem fez a atribuição (o próprio técnico ou um admin)
    """

    os: str = ""
    tecnico_id: str = ""
    atribuido_por_id: Optional[str] = None

    def __post_init__(self):
        pass

    @property
    def aggregate_type(self) -> str:
        return "Chamado"

    def _get_event_data(self) -> Dict[str, Any]:
        data = {"os": self.os, "tecnico_id": self.tecnico_id}
        if self.atribuido_por_id:
            data["atribuido_por_id"] = self.atribuido_por_id
        return data


@dataclass
class ChamadoEncerradoEvent(DomainEvent):
    """
    Evento: Chamado foi encerrado.

    Handlers típicos:
    - Avisar o solicitante de que o problema foi resolvido

    Attributes:
        encerrado_por_id: Quem encerrou
        usuario_email: Email do solicitante
        descricao_encerramento: Solução registrada
    """

    os: str = ""
    encerrado_por_id: str = ""
    usuario_email: str = ""
    descricao_encerramento: str = ""

    def __post_init__(self):
        pass

    @property
    def aggregate_type(self) -> str:
        return "Chamado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "os": self.os,
            "encerrado_por_id": self.encerrado_por_id,
            "usuario_email": self.usuario_email,
            "descricao_encerramento": self.descricao_encerramento,
        }


@dataclass
class ChamadoReabertoEvent(DomainEvent):
    os: str = ""
    reaberto_por_id: str = ""
    tecnico_id: Optional[str] = None

    def __post_init__(self):
        pass

    @property
    def aggregate_type(self) -> str:
        return "Chamado"

    def _get_event_data(self) -> Dict[str, Any]:
        data = {"os": self.os, "reaberto_por_id": self.reaberto_por_id}
        if self.tecnico_id:
            data["tecnico_id"] = self.tecnico_id
        return data


@dataclass
class ChamadoCanceladoEvent(DomainEvent):
    os: str = ""
    cancelado_por_id: str = ""
    justificativa: str = ""

    def __post_init__(self):
        pass

    @property
    def aggregate_type(self) -> str:
        return "Chamado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "os": self.os,
            "cancelado_por_id": self.cancelado_por_id,
            "justificativa": self.justificativa,
        }

"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo consistência de dados.

Responsabilidades:
- Iniciar/finalizar transações (django.db.transaction.atomic)
- Commit/Rollback coordenado
- Publicar eventos após commit bem-sucedido

Como usa atomic(), o bloco vira savepoint quando já existe uma
transação aberta (ATOMIC_REQUESTS ou testes com pytest-django).
"""

from typing import Optional
import logging

from django.db import transaction

from src.core.shared.interfaces import EventPublisher, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Eventos são publicados apenas após commit bem-sucedido.

    Example:
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            chamado_repo.save(chamado)
            uow.publish_event(ChamadoAbertoEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            chamado_repo.save(chamado)
            raise Exception("Erro!")
        # Rollback automático, eventos descartados
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        if self._atomic is None:
            self._committed = False
            self._rolled_back = False
            self._atomic = transaction.atomic()
            self._atomic.__enter__()
            logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Ordem de execução:
        1. Commit da transação (saída do bloco atomic)
        2. Publicação dos eventos enfileirados
        3. Limpeza do estado interno

        Raises:
            Exception: Se commit falhar, re-lança exceção
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        atomic, self._atomic = self._atomic, None
        try:
            if atomic is not None:
                atomic.__exit__(None, None, None)
                logger.debug("Transaction committed")
        except Exception as e:
            logger.error(f"Commit failed: {e}")
            self._rolled_back = True
            self.clear_events()
            raise

        self._committed = True
        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        if self._committed or self._rolled_back:
            return

        atomic, self._atomic = self._atomic, None
        try:
            if atomic is not None:
                # Sinaliza erro para o atomic desfazer o bloco
                atomic.__exit__(Exception, Exception("rollback"), None)
                logger.debug("Transaction rolled back")
        except Exception as e:
            logger.error(f"Rollback failed: {e}")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _publish_events(self) -> None:
        """
        Publica eventos para handlers assíncronos.

        Falha na publicação é logada e não desfaz a operação:
        os dados já foram comitados.
        """
        eventos = list(self._events)
        self.clear_events()

        for event in eventos:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )
            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event: {e}")

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back

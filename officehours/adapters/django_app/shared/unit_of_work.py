"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo consistência de dados.

Responsabilidades:
- Iniciar/finalizar transações
- Commit/Rollback coordenado
- Persistir eventos no Event Store (dentro da transação)
- Publicar eventos após commit bem-sucedido

A criação de ticket grava três coisas na mesma transação:
a linha do ticket, a entrada no roster da fila e o evento.
Nenhuma delas existe sem as outras.
"""

from typing import Dict, List, Optional
import logging

from django.db import DEFAULT_DB_ALIAS, transaction

from officehours.core.shared.events import DomainEvent
from officehours.core.shared.interfaces import EventPublisher, EventStore, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Envolve o bloco em transaction.atomic(); quando já existe uma
    transação externa (ex: testes com pytest-django), vira savepoint.
    Eventos são publicados apenas após commit bem-sucedido.

    Cada `with uow:` abre uma transação nova, então a mesma
    instância pode ser reutilizada por chamadas sucessivas.

    Example:
        with DjangoUnitOfWork(event_publisher, event_store) as uow:
            ticket_repo.add(ticket)
            queue_repo.append_ticket(queue.id, ticket.id)
            uow.publish_event(TicketCreatedEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            ticket_repo.add(ticket)
            raise InvalidSecretError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store: Optional[EventStore] = None,
        using: str = DEFAULT_DB_ALIAS,
    ):
        """
        Inicializa Unit of Work.

        Args:
            event_publisher: Publicador de eventos (log, Celery)
            event_store: Store para persistência de eventos
            using: Alias do banco de dados
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._using = using
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self.clear_events()
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Ordem de execução:
        1. Persistir eventos no Event Store (mesma transação)
        2. Commit da transação no banco
        3. Publicar eventos para handlers assíncronos

        Raises:
            Exception: Se commit falhar, desfaz e re-lança exceção
        """
        if self._atomic is None:
            logger.warning("Transaction already finalized")
            return

        try:
            if self._event_store and self._events:
                self._persist_events()
        except Exception as e:
            logger.error(f"Commit failed: {e}")
            self.rollback()
            raise

        atomic, self._atomic = self._atomic, None
        atomic.__exit__(None, None, None)
        self._committed = True
        logger.debug("Transaction committed")

        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if self._atomic is None:
            return

        atomic, self._atomic = self._atomic, None
        try:
            transaction.set_rollback(True, using=self._using)
            atomic.__exit__(None, None, None)
            logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _persist_events(self) -> None:
        """Persiste eventos no Event Store, numerados por agregado."""
        sequences: Dict[str, int] = {}
        for event in self._events:
            aggregate_id = event.aggregate_id
            if aggregate_id not in sequences:
                sequences[aggregate_id] = self._event_store.last_sequence(aggregate_id)
            sequences[aggregate_id] += 1

            self._event_store.append(event=event, sequence=sequences[aggregate_id])

    def _publish_events(self) -> None:
        """
        Publica eventos para handlers assíncronos.

        Falha na publicação não desfaz a operação já comitada.
        """
        events = list(self._events)
        self.clear_events()

        for event in events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event: {e}", exc_info=True)

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula comportamento
    para testes unitários sem banco de dados.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        """Simula início de transação."""
        pass

    def commit(self) -> None:
        """Simula commit e repassa eventos ao publisher (se houver)."""
        self._committed = True
        events = list(self._events)
        self._published_events.extend(events)
        self.clear_events()

        if self._event_publisher:
            self._event_publisher.publish_batch(events)

    def rollback(self) -> None:
        """Simula rollback."""
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Retorna eventos que foram 'publicados'."""
        return self._published_events

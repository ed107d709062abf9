"""
Repositórios Django para persistência de Tickets.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository, QueueRepository, SessionRepository
- Implementar EventStore
- Mapear entities para models e vice-versa

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from typing import List, Optional
import logging

from django.db import IntegrityError, transaction
from django.db.models import Max

from officehours.core.shared.events import DomainEvent
from officehours.core.shared.exceptions import EntityNotFoundError
from officehours.core.shared.interfaces import EventStore
from officehours.core.tickets.entities import (
    QueueEntity,
    SessionEntity,
    TicketEntity,
    TicketStatus,
)

from .mappers import DomainEventMapper, QueueMapper, SessionMapper, TicketMapper
from .models import DomainEventModel, QueueModel, QueueTicketModel, SessionModel, TicketModel

logger = logging.getLogger(__name__)


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Example:
        repo = DjangoTicketRepository()
        repo.add(ticket_entity)
        ticket = repo.get_by_id("uuid-here")
        ticket.claim(ta_id)
        repo.apply_transition(ticket)
    """

    def __init__(self):
        self._mapper = TicketMapper()

    def add(self, ticket: TicketEntity) -> None:
        """Insere ticket recém-criado (nunca faz upsert)."""
        self._mapper.to_model(ticket).save(force_insert=True)
        logger.debug(f"Ticket inserted: {ticket.id}")

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        try:
            model = TicketModel.objects.get(id=ticket_id)
        except TicketModel.DoesNotExist:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None
        return self._mapper.to_entity(model)

    def apply_transition(self, ticket: TicketEntity, require_active: bool = True) -> bool:
        """
        Update condicional: UPDATE ... WHERE id = ? [AND status <> 'deleted'].

        Escreve apenas o status e o par de carimbos da transição;
        os demais carimbos gravados permanecem intactos.

        Returns:
            True se uma linha foi atualizada
        """
        queryset = TicketModel.objects.filter(id=ticket.id)
        if require_active:
            queryset = queryset.exclude(status=TicketStatus.DELETED.value)

        updated = queryset.update(**self._mapper.transition_values(ticket))

        if not updated:
            logger.debug(f"Conditional update skipped for ticket {ticket.id}")
        return updated > 0


class DjangoQueueRepository:
    """Implementação Django do QueueRepository."""

    def get_by_id(self, queue_id: str) -> Optional[QueueEntity]:
        try:
            model = QueueModel.objects.get(id=queue_id)
        except QueueModel.DoesNotExist:
            return None
        return QueueMapper.to_entity(model)

    def add(self, queue: QueueEntity) -> QueueEntity:
        """Cria fila (usado em setup e testes)."""
        model = QueueModel.objects.create(
            id=queue.id,
            course_id=queue.course_id,
            name=queue.name,
        )
        if queue.restricted_session_ids:
            model.restricted_sessions.set(queue.restricted_session_ids)
        return queue

    def append_ticket(self, queue_id: str, ticket_id: str) -> bool:
        """
        Anexa ticket ao roster; reenvio não duplica a entrada.

        Raises:
            EntityNotFoundError: Fila inexistente
        """
        if not QueueModel.objects.filter(id=queue_id).exists():
            raise EntityNotFoundError(
                f"No queue exists with id {queue_id}",
                entity_type="Queue",
                entity_id=queue_id,
                code="queues.doesNotExist",
            )

        if QueueTicketModel.objects.filter(queue_id=queue_id, ticket_id=ticket_id).exists():
            return False

        try:
            with transaction.atomic():
                QueueTicketModel.objects.create(queue_id=queue_id, ticket_id=ticket_id)
        except IntegrityError:
            logger.debug(f"Ticket {ticket_id} already in queue {queue_id}")
            return False
        return True


class DjangoSessionRepository:
    """Implementação Django do SessionRepository."""

    def get_by_id(self, session_id: str) -> Optional[SessionEntity]:
        try:
            model = SessionModel.objects.get(id=session_id)
        except SessionModel.DoesNotExist:
            return None
        return SessionMapper.to_entity(model)

    def add(self, session: SessionEntity) -> SessionEntity:
        SessionModel.objects.create(
            id=session.id,
            course_id=session.course_id,
            secret=session.secret,
        )
        return session


class DjangoEventStore(EventStore):
    """
    Event Store sobre DomainEventModel.

    Chamado pelo DjangoUnitOfWork dentro da transação da operação,
    então evento e mudança de estado são gravados juntos.
    """

    def append(self, event: DomainEvent, sequence: int) -> None:
        DomainEventMapper.to_model(event, sequence=sequence).save(force_insert=True)

    def last_sequence(self, aggregate_id: str) -> int:
        result = DomainEventModel.objects.filter(
            aggregate_id=aggregate_id,
        ).aggregate(last=Max('sequence'))
        return result['last'] or 0

    def get_events_for_aggregate(self, aggregate_id: str) -> List[dict]:
        models = DomainEventModel.objects.filter(
            aggregate_id=aggregate_id,
        ).order_by('sequence', 'recorded_at')
        return [DomainEventMapper.to_dict(model) for model in models]

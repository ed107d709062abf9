"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter TicketEntity ⇄ TicketModel
- Converter QueueModel / SessionModel → Entities
- Converter DomainEvent → DomainEventModel (para Event Store)

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import Dict, Any

from officehours.core.shared.events import DomainEvent
from officehours.core.tickets.entities import (
    Notifications,
    QueueEntity,
    SessionEntity,
    TicketEntity,
    TicketStatus,
)

from .models import DomainEventModel, QueueModel, SessionModel, TicketModel


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - transition_values(): campos da última transição (update condicional)
    """

    @staticmethod
    def to_model(entity: TicketEntity) -> TicketModel:
        """
        Converte TicketEntity para TicketModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return TicketModel(
            id=entity.id,
            course_id=entity.course_id,
            queue_id=entity.queue_id,
            student_ids=list(entity.student_ids),
            question=entity.question,
            notifications=entity.notifications.to_dict(),
            status=entity.status.value,
            created_at=entity.created_at,
            created_by=entity.created_by,
            claimed_at=entity.claimed_at,
            claimed_by=entity.claimed_by,
            marked_as_missing_at=entity.marked_as_missing_at,
            marked_as_missing_by=entity.marked_as_missing_by,
            marked_as_done_at=entity.marked_as_done_at,
            marked_as_done_by=entity.marked_as_done_by,
            deleted_at=entity.deleted_at,
            deleted_by=entity.deleted_by,
        )

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory method .create()
            pois dados já foram validados na criação original
        """
        return TicketEntity(
            id=model.id,
            course_id=model.course_id,
            queue_id=model.queue_id,
            student_ids=list(model.student_ids or []),
            question=model.question,
            notifications=Notifications.from_dict(model.notifications or None),
            status=TicketStatus(model.status),
            created_at=model.created_at,
            created_by=model.created_by,
            claimed_at=model.claimed_at,
            claimed_by=model.claimed_by,
            marked_as_missing_at=model.marked_as_missing_at,
            marked_as_missing_by=model.marked_as_missing_by,
            marked_as_done_at=model.marked_as_done_at,
            marked_as_done_by=model.marked_as_done_by,
            deleted_at=model.deleted_at,
            deleted_by=model.deleted_by,
        )

    @staticmethod
    def transition_values(entity: TicketEntity) -> Dict[str, Any]:
        """Somente os campos da transição aplicada (ver TicketEntity.transition_fields)."""
        values = {name: getattr(entity, name) for name in entity.transition_fields()}
        values['status'] = entity.status.value
        return values


class QueueMapper:

    @staticmethod
    def to_entity(model: QueueModel) -> QueueEntity:
        return QueueEntity(
            id=model.id,
            course_id=model.course_id,
            name=model.name,
            ticket_ids=list(
                model.roster.order_by('id').values_list('ticket_id', flat=True)
            ),
            restricted_session_ids=list(
                model.restricted_sessions.order_by('id').values_list('id', flat=True)
            ),
        )


class SessionMapper:

    @staticmethod
    def to_entity(model: SessionModel) -> SessionEntity:
        return SessionEntity(id=model.id, course_id=model.course_id, secret=model.secret)


class DomainEventMapper:
    """
    Mapper para conversão entre DomainEvent e DomainEventModel.

    Usado para persistir eventos no Event Store.
    """

    @staticmethod
    def to_model(event: DomainEvent, sequence: int = 0) -> DomainEventModel:
        """
        Converte DomainEvent para DomainEventModel.

        Args:
            event: Evento de domínio
            sequence: Número de sequência no agregado
        """
        return DomainEventModel(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=event._get_event_data(),
            version=event.version,
            sequence=sequence,
            occurred_at=event.occurred_at,
            user_id=event.actor_id,
        )

    @staticmethod
    def to_dict(model: DomainEventModel) -> Dict[str, Any]:
        return {
            'event_id': model.event_id,
            'event_type': model.event_type,
            'aggregate_type': model.aggregate_type,
            'aggregate_id': model.aggregate_id,
            'actor_id': model.user_id,
            'sequence': model.sequence,
            'version': model.version,
            'occurred_at': model.occurred_at.isoformat(),
            **(model.event_data or {}),
        }

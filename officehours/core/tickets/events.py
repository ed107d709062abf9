"""
Domain Events do Domínio de Tickets.

Este módulo define os eventos de domínio que são disparados
quando algo significativo acontece com tickets.

Eventos:
- TicketCreatedEvent: Estudante(s) entraram na fila
- TicketClaimedEvent: Membro da equipe reivindicou o ticket
- TicketReleasedEvent: Ticket voltou para a fila
- TicketMarkedAsMissingEvent: Estudante não compareceu
- TicketMarkedAsDoneEvent: Atendimento concluído
- TicketDeletedEvent: Ticket removido (terminal)

Uso:
    with uow:
        ticket.claim(actor_id)
        repo.apply_transition(ticket)
        uow.publish_event(TicketClaimedEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass, field
from typing import List, Optional

from officehours.core.shared.events import DomainEvent


@dataclass
class TicketEvent(DomainEvent):
    """
    Base dos eventos de ticket.

    Attributes:
        course_id: Curso do ticket
        queue_id: Fila do ticket
    """

    course_id: str = ""
    queue_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketCreatedEvent(TicketEvent):
    """
    Evento: Ticket foi criado.

    Attributes:
        student_ids: Estudantes do ticket
        session_id: Sessão usada em fila restrita (se houver)
    """

    student_ids: List[str] = field(default_factory=list)
    session_id: Optional[str] = None


@dataclass
class TicketStatusChangedEvent(TicketEvent):
    """
    Base das transições de status.

    Attributes:
        previous_status: Status gravado antes da transição
        status: Novo status
    """

    previous_status: str = ""
    status: str = ""


@dataclass
class TicketClaimedEvent(TicketStatusChangedEvent):
    pass


@dataclass
class TicketReleasedEvent(TicketStatusChangedEvent):
    pass


@dataclass
class TicketMarkedAsMissingEvent(TicketStatusChangedEvent):
    pass


@dataclass
class TicketMarkedAsDoneEvent(TicketStatusChangedEvent):
    pass


@dataclass
class TicketDeletedEvent(TicketStatusChangedEvent):
    """
    Evento: Ticket removido.

    Attributes:
        by_owner: Remoção feita por um dos estudantes do ticket
    """

    by_owner: bool = False

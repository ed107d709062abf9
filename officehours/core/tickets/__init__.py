"""
Domínio de Tickets - Ciclo de Vida de Pedidos de Ajuda.

Este módulo contém toda a lógica de negócio relacionada aos tickets
de uma fila de office hours, incluindo:
- Entidades (TicketEntity, TicketStatus, Notifications, QueueEntity, SessionEntity)
- Use Cases (Create, Claim, Release, MarkAsMissing, MarkAsDone, Delete)
- Domain Events (TicketCreated, TicketClaimed, ..., TicketDeleted)
- DTOs (Input/Output Data Transfer Objects)
- Ports (Interfaces para repositórios)

Características do Domínio:
- Máquina de estados permissiva: só "deleted" bloqueia transições
- Filas restritas exigem sessão e segredo
- Estudantes identificados por email, provisionados sob demanda
- Eventos disparados para side-effects assíncronos
"""

from .entities import (
    TicketEntity,
    TicketStatus,
    Notifications,
    QueueEntity,
    SessionEntity,
)
from .events import (
    TicketCreatedEvent,
    TicketStatusChangedEvent,
    TicketClaimedEvent,
    TicketReleasedEvent,
    TicketMarkedAsMissingEvent,
    TicketMarkedAsDoneEvent,
    TicketDeletedEvent,
)
from .dtos import (
    CreateTicketInputDTO,
    TicketActionInputDTO,
    TicketOutputDTO,
)
from .ports import TicketRepository, QueueRepository, SessionRepository
from .use_cases import (
    RedeletePolicy,
    CreateTicketService,
    ClaimTicketService,
    ReleaseTicketService,
    MarkTicketAsMissingService,
    MarkTicketAsDoneService,
    DeleteTicketService,
)

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "Notifications",
    "QueueEntity",
    "SessionEntity",
    # Events
    "TicketCreatedEvent",
    "TicketStatusChangedEvent",
    "TicketClaimedEvent",
    "TicketReleasedEvent",
    "TicketMarkedAsMissingEvent",
    "TicketMarkedAsDoneEvent",
    "TicketDeletedEvent",
    # DTOs
    "CreateTicketInputDTO",
    "TicketActionInputDTO",
    "TicketOutputDTO",
    # Ports
    "TicketRepository",
    "QueueRepository",
    "SessionRepository",
    # Use Cases
    "RedeletePolicy",
    "CreateTicketService",
    "ClaimTicketService",
    "ReleaseTicketService",
    "MarkTicketAsMissingService",
    "MarkTicketAsDoneService",
    "DeleteTicketService",
]

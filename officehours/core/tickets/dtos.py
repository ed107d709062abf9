"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento de entidades para a camada de API.

Tipos de DTOs:
- Input DTOs: payload já validado na borda (forms), um por operação
- Output DTOs: formato de resposta
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .entities import Notifications, TicketEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CreateTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Imutável (frozen=True) para garantir que dados
    validados não sejam alterados acidentalmente.

    Attributes:
        queue_id: Fila onde o ticket entra
        student_emails: Emails dos estudantes (ordem preservada)
        notifications: Preferências de notificação validadas
        question: Pergunta opcional
        session_id: Sessão (obrigatória em filas restritas)
        secret: Segredo da sessão (obrigatório em filas restritas)
        actor_id: Usuário autenticado (None em autoatendimento)
    """

    queue_id: str
    student_emails: tuple
    notifications: Notifications = field(default_factory=Notifications)
    question: Optional[str] = None
    session_id: Optional[str] = None
    secret: Optional[str] = None
    actor_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Converte para dicionário (o segredo nunca é exposto)."""
        return {
            "queue_id": self.queue_id,
            "student_emails": list(self.student_emails),
            "notifications": self.notifications.to_dict(),
            "question": self.question,
            "session_id": self.session_id,
            "actor_id": self.actor_id,
        }


@dataclass(frozen=True)
class TicketActionInputDTO:
    """
    DTO de entrada para claim/release/mark/delete.

    Attributes:
        ticket_id: ID do ticket
        actor_id: Usuário que executa a ação
    """

    ticket_id: str
    actor_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "actor_id": self.actor_id,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class TicketOutputDTO:
    """
    DTO de saída com dados completos do ticket.

    Carimbos ausentes são omitidos do dicionário, de modo que
    um ticket liberado não exibe claimed_at/claimed_by.
    """

    id: str
    course_id: str
    queue_id: str
    student_ids: List[str]
    question: Optional[str]
    notifications: Dict[str, Any]
    status: str
    created_at: datetime
    created_by: Optional[str]
    stamps: Dict[str, Any] = field(default_factory=dict)

    STAMP_FIELDS = (
        "claimed_at",
        "claimed_by",
        "marked_as_missing_at",
        "marked_as_missing_by",
        "marked_as_done_at",
        "marked_as_done_by",
        "deleted_at",
        "deleted_by",
    )

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketOutputDTO":
        """Cria DTO a partir da entidade."""
        stamps = {}
        for name in cls.STAMP_FIELDS:
            value = getattr(entity, name)
            if value is not None:
                stamps[name] = value

        return cls(
            id=entity.id,
            course_id=entity.course_id,
            queue_id=entity.queue_id,
            student_ids=list(entity.student_ids),
            question=entity.question,
            notifications=entity.notifications.to_dict(),
            status=entity.status.value,
            created_at=entity.created_at,
            created_by=entity.created_by,
            stamps=stamps,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (para JSON)."""
        result = {
            "id": self.id,
            "course_id": self.course_id,
            "queue_id": self.queue_id,
            "student_ids": self.student_ids,
            "question": self.question,
            "notifications": self.notifications,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "created_by": self.created_by,
        }
        for name, value in self.stamps.items():
            result[name] = _iso(value) if isinstance(value, datetime) else value
        return result

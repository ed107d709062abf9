"""
Entidades do Domínio de Tickets.

Este módulo define as entidades de domínio que encapsulam
as regras do ciclo de vida de um pedido de ajuda ("ticket")
em uma fila de office hours.

Entidades:
- TicketEntity: Agregado principal do domínio
- TicketStatus: Estados possíveis de um ticket
- Notifications: Preferências de notificação (valor imutável)
- QueueEntity: Fila (apenas os campos consumidos na criação)
- SessionEntity: Sessão (segredo para filas restritas)

Regras de Negócio Encapsuladas:
- Ticket nasce "open"
- Única guarda de transição: ticket não removido
- Claim/release controlam o par claimed_at/claimed_by
- Demais carimbos (missing, done, deleted) nunca são apagados
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import hmac
import re

from officehours.core.shared.events import utc_now
from officehours.core.shared.exceptions import EntityNotFoundError, ValidationError
from officehours.core.shared.identifiers import new_id


class TicketStatus(Enum):
    """
    Estados possíveis de um ticket.

    Fluxo de Estados (permissivo, só "deleted" bloqueia):
        open ⇄ claimed
        open/claimed → markedAsMissing → (claim/release) ...
        open/claimed → markedAsDone
        qualquer → deleted (terminal)
    """

    OPEN = "open"
    CLAIMED = "claimed"
    MARKED_AS_MISSING = "markedAsMissing"
    MARKED_AS_DONE = "markedAsDone"
    DELETED = "deleted"


# Colunas de carimbo que cada transição escreve, além do status.
# Release é a transição para "open" e só mexe no par de claim.
TRANSITION_STAMPS = {
    TicketStatus.OPEN: ("claimed_at", "claimed_by"),
    TicketStatus.CLAIMED: ("claimed_at", "claimed_by"),
    TicketStatus.MARKED_AS_MISSING: ("marked_as_missing_at", "marked_as_missing_by"),
    TicketStatus.MARKED_AS_DONE: ("marked_as_done_at", "marked_as_done_by"),
    TicketStatus.DELETED: ("deleted_at", "deleted_by"),
}


PHONE_RE = re.compile(r"^\d{10,15}$")


@dataclass(frozen=True)
class Notifications:
    """
    Preferências de notificação do ticket.

    Esquema fixo; chaves desconhecidas são rejeitadas.
    O envio das notificações não faz parte deste sistema.

    Attributes:
        email: Notificar por email
        web: Notificar no navegador
        phone: Telefone (somente dígitos, 10 a 15)
        carrier: Operadora, obrigatória quando há telefone
    """

    email: bool = False
    web: bool = True
    phone: Optional[str] = None
    carrier: Optional[str] = None

    FIELDS = ("email", "web", "phone", "carrier")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Notifications":
        """
        Constrói e valida preferências a partir de um dicionário.

        Raises:
            ValidationError: Se o formato não corresponde ao esquema
        """
        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise ValidationError("notifications deve ser um objeto", field="notifications")

        unknown = set(data) - set(cls.FIELDS)
        if unknown:
            raise ValidationError(
                f"Campos desconhecidos em notifications: {', '.join(sorted(unknown))}",
                field="notifications",
            )

        for flag in ("email", "web"):
            if flag in data and not isinstance(data[flag], bool):
                raise ValidationError(
                    f"notifications.{flag} deve ser booleano",
                    field="notifications",
                )

        phone = data.get("phone") or None
        carrier = data.get("carrier") or None

        if phone is not None and (not isinstance(phone, str) or not PHONE_RE.match(phone)):
            raise ValidationError(
                "notifications.phone deve conter de 10 a 15 dígitos",
                field="notifications",
            )

        if carrier is not None and not isinstance(carrier, str):
            raise ValidationError("notifications.carrier deve ser texto", field="notifications")

        if phone and not carrier:
            raise ValidationError(
                "notifications.carrier é obrigatório quando há telefone",
                field="notifications",
            )

        return cls(
            email=data.get("email", False),
            web=data.get("web", True),
            phone=phone,
            carrier=carrier,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "web": self.web,
            "phone": self.phone,
            "carrier": self.carrier,
        }


@dataclass
class QueueEntity:
    """
    Fila de atendimento de um curso.

    Apenas os campos consumidos pela criação de tickets.
    O roster (ticket_ids) é append-only e sem duplicatas.
    """

    id: str = field(default_factory=new_id)
    course_id: str = ""
    name: str = ""
    ticket_ids: List[str] = field(default_factory=list)
    restricted_session_ids: List[str] = field(default_factory=list)

    def is_restricted(self) -> bool:
        """Fila restrita exige sessão + segredo válidos para entrar."""
        return bool(self.restricted_session_ids)

    def accepts_session(self, session_id: Optional[str]) -> bool:
        return session_id is not None and session_id in self.restricted_session_ids


@dataclass
class SessionEntity:
    """Sessão de office hours com segredo compartilhado."""

    id: str = field(default_factory=new_id)
    course_id: str = ""
    secret: str = field(default_factory=new_id)

    def secret_matches(self, secret: Optional[str]) -> bool:
        """Comparação em tempo constante; segredo ausente nunca confere."""
        if not secret:
            return False
        return hmac.compare_digest(self.secret.encode(), secret.encode())


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Agregado principal do domínio de office hours.

    Invariantes:
    - student_ids não vazio, imutável após criação
    - course_id, queue_id, question, notifications imutáveis
    - created_at/created_by definidos uma única vez
    - Ticket removido não aceita claim/release/mark (tratado como inexistente)
    - Release limpa claimed_at/claimed_by; demais carimbos persistem

    Example:
        ticket = TicketEntity.create(
            course_id="c1",
            queue_id="q1",
            student_ids=["s1"],
            notifications=Notifications(),
        )
        ticket.claim("ta-1")
        ticket.release()
    """

    # Identificação
    id: str = field(default_factory=new_id)
    course_id: str = ""
    queue_id: str = ""

    # Dados imutáveis
    student_ids: List[str] = field(default_factory=list)
    question: Optional[str] = None
    notifications: Notifications = field(default_factory=Notifications)

    # Estado
    status: TicketStatus = TicketStatus.OPEN

    # Carimbos
    created_at: datetime = field(default_factory=utc_now)
    created_by: Optional[str] = None
    claimed_at: Optional[datetime] = None
    claimed_by: Optional[str] = None
    marked_as_missing_at: Optional[datetime] = None
    marked_as_missing_by: Optional[str] = None
    marked_as_done_at: Optional[datetime] = None
    marked_as_done_by: Optional[str] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None

    @classmethod
    def create(
        cls,
        course_id: str,
        queue_id: str,
        student_ids: List[str],
        notifications: Notifications,
        question: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket com validações.

        Args:
            course_id: Curso dono da fila
            queue_id: Fila do ticket
            student_ids: Estudantes (já resolvidos), na ordem informada
            notifications: Preferências de notificação
            question: Pergunta opcional
            created_by: Ator autenticado; se None, o primeiro estudante

        Raises:
            ValidationError: Se não há estudantes
        """
        if not student_ids:
            raise ValidationError(
                "Ticket precisa de ao menos um estudante",
                field="student_ids",
            )

        return cls(
            course_id=course_id,
            queue_id=queue_id,
            student_ids=list(student_ids),
            question=question.strip() if question else None,
            notifications=notifications,
            status=TicketStatus.OPEN,
            created_by=created_by or student_ids[0],
        )

    @property
    def is_deleted(self) -> bool:
        return self.status == TicketStatus.DELETED

    def belongs_to_user(self, user_id: Optional[str]) -> bool:
        """Verifica se o usuário é um dos estudantes do ticket."""
        return user_id is not None and user_id in self.student_ids

    def ensure_active(self) -> None:
        """
        Garante que o ticket não foi removido.

        Raises:
            EntityNotFoundError: Ticket removido é tratado como inexistente
        """
        if self.is_deleted:
            raise EntityNotFoundError(
                f"No ticket exists with id {self.id}",
                entity_type="Ticket",
                entity_id=self.id,
                code="tickets.doesNotExist",
            )

    def transition_fields(self) -> Tuple[str, ...]:
        """
        Campos escritos pela última transição aplicada.

        O update condicional grava somente estes campos; carimbos de
        outras transições ficam como estão no armazenamento.
        """
        return ("status",) + TRANSITION_STAMPS[self.status]

    def claim(self, actor_id: str, at: Optional[datetime] = None) -> None:
        """
        Reivindica o ticket.

        Chamadas repetidas sobrescrevem o carimbo (último claim vence).
        """
        self.status = TicketStatus.CLAIMED
        self.claimed_at = at or utc_now()
        self.claimed_by = actor_id

    def release(self) -> None:
        """Devolve o ticket à fila, removendo o par de claim."""
        self.status = TicketStatus.OPEN
        self.claimed_at = None
        self.claimed_by = None

    def mark_as_missing(self, actor_id: str, at: Optional[datetime] = None) -> None:
        self.status = TicketStatus.MARKED_AS_MISSING
        self.marked_as_missing_at = at or utc_now()
        self.marked_as_missing_by = actor_id

    def mark_as_done(self, actor_id: str, at: Optional[datetime] = None) -> None:
        self.status = TicketStatus.MARKED_AS_DONE
        self.marked_as_done_at = at or utc_now()
        self.marked_as_done_by = actor_id

    def delete(self, actor_id: Optional[str], at: Optional[datetime] = None) -> None:
        """Remove o ticket (estado terminal)."""
        self.status = TicketStatus.DELETED
        self.deleted_at = at or utc_now()
        self.deleted_by = actor_id

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"queue_id={self.queue_id[:8]}..., "
            f"status={self.status.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

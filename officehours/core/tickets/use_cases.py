"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
o ciclo de vida dos tickets coordenando entidades, ports e eventos.

Use Cases implementados:
- CreateTicketService: Estudantes entram na fila
- ClaimTicketService: Equipe reivindica ticket
- ReleaseTicketService: Equipe devolve ticket à fila
- MarkTicketAsMissingService: Estudante ausente
- MarkTicketAsDoneService: Atendimento concluído
- DeleteTicketService: Dono ou equipe remove ticket

Ordem das verificações nas transições:
1. Ticket existe (e não foi removido, exceto em delete)
2. Autorização do ator
3. Update condicional (evita perda de atualização concorrente)

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Toda escrita dentro do UnitOfWork; eventos após commit
"""

from enum import Enum
from typing import Optional, Type
import logging

from officehours.core.shared.interfaces import UnitOfWork
from officehours.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    InvalidSecretError,
    InvalidSessionError,
    UnauthorizedError,
)
from officehours.core.users.entities import STAFF_ROLES
from officehours.core.users.ports import AuthorizationOracle, IdentityResolver

from .dtos import CreateTicketInputDTO, TicketActionInputDTO, TicketOutputDTO
from .entities import TicketEntity
from .events import (
    TicketClaimedEvent,
    TicketCreatedEvent,
    TicketDeletedEvent,
    TicketMarkedAsDoneEvent,
    TicketMarkedAsMissingEvent,
    TicketReleasedEvent,
    TicketStatusChangedEvent,
)
from .ports import QueueRepository, SessionRepository, TicketRepository

logger = logging.getLogger(__name__)


def _ticket_not_found(ticket_id: str) -> EntityNotFoundError:
    return EntityNotFoundError(
        f"No ticket exists with id {ticket_id}",
        entity_type="Ticket",
        entity_id=ticket_id,
        code="tickets.doesNotExist",
    )


class RedeletePolicy(Enum):
    """
    Política para remover um ticket que já foi removido.

    - IGNORE: no-op idempotente, preserva os carimbos da primeira remoção
    - OVERWRITE: regrava deleted_at/deleted_by com a nova remoção
    - REJECT: BusinessRuleViolationError
    """

    IGNORE = "ignore"
    OVERWRITE = "overwrite"
    REJECT = "reject"

    @classmethod
    def from_string(cls, value: str) -> "RedeletePolicy":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Política de remoção inválida: {value}")


class CreateTicketService:
    """
    Use Case: Criar um novo ticket.

    Fluxo:
    1. Fila existe; sessão existe (se informada)
    2. Fila restrita: sessão pertence às sessões restritas e segredo confere
    3. Resolver (ou provisionar) cada email de estudante, na ordem
    4. Inserir ticket e anexá-lo ao roster da fila na mesma transação
    5. Disparar TicketCreatedEvent

    A verificação de fila restrita acontece antes do provisionamento,
    então uma criação rejeitada não cria contas.

    Example:
        service = CreateTicketService(ticket_repo, queue_repo, session_repo, identity, uow)
        output = service.execute(CreateTicketInputDTO(
            queue_id=queue.id,
            student_emails=("ana@brown.edu",),
        ))
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        queue_repo: QueueRepository,
        session_repo: SessionRepository,
        identity_resolver: IdentityResolver,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.queue_repo = queue_repo
        self.session_repo = session_repo
        self.identity_resolver = identity_resolver
        self.uow = uow

    def execute(self, input_dto: CreateTicketInputDTO) -> TicketOutputDTO:
        """
        Executa criação de ticket em transação atômica.

        Raises:
            EntityNotFoundError: Fila ou sessão inexistente
            InvalidSessionError: Sessão fora das sessões restritas
            InvalidSecretError: Segredo ausente ou divergente
        """
        with self.uow:
            queue = self.queue_repo.get_by_id(input_dto.queue_id)
            if queue is None:
                raise EntityNotFoundError(
                    f"No queue exists with id {input_dto.queue_id}",
                    entity_type="Queue",
                    entity_id=input_dto.queue_id,
                    code="queues.doesNotExist",
                )

            session = None
            if input_dto.session_id:
                session = self.session_repo.get_by_id(input_dto.session_id)
                if session is None:
                    raise EntityNotFoundError(
                        f"No session exists with id {input_dto.session_id}",
                        entity_type="Session",
                        entity_id=input_dto.session_id,
                        code="sessions.doesNotExist",
                    )

            if queue.is_restricted():
                if not queue.accepts_session(input_dto.session_id):
                    raise InvalidSessionError(
                        f"Cannot signup with invalid session {input_dto.session_id}",
                        session_id=input_dto.session_id,
                    )
                if session is None or not session.secret_matches(input_dto.secret):
                    raise InvalidSecretError("Cannot signup with invalid secret")

            student_ids = [
                self.identity_resolver.resolve(email)
                for email in input_dto.student_emails
            ]

            ticket = TicketEntity.create(
                course_id=queue.course_id,
                queue_id=queue.id,
                student_ids=student_ids,
                notifications=input_dto.notifications,
                question=input_dto.question,
                created_by=input_dto.actor_id,
            )

            self.ticket_repo.add(ticket)
            self.queue_repo.append_ticket(queue.id, ticket.id)

            self.uow.publish_event(
                TicketCreatedEvent(
                    aggregate_id=ticket.id,
                    actor_id=ticket.created_by,
                    course_id=ticket.course_id,
                    queue_id=ticket.queue_id,
                    student_ids=list(ticket.student_ids),
                    session_id=input_dto.session_id,
                )
            )

        logger.info(f"Ticket {ticket.id} created in queue {queue.id}")

        return TicketOutputDTO.from_entity(ticket)


class StaffTransitionService:
    """
    Base das transições restritas à equipe (TA ou acima no curso).

    Subclasses definem a operação, a mensagem de autorização,
    o evento e a mutação da entidade.
    """

    operation: str = ""
    unauthorized_message: str = ""
    event_class: Type[TicketStatusChangedEvent] = TicketStatusChangedEvent

    def __init__(
        self,
        ticket_repo: TicketRepository,
        authorization: AuthorizationOracle,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.authorization = authorization
        self.uow = uow

    def apply(self, ticket: TicketEntity, actor_id: str) -> None:
        raise NotImplementedError

    def execute(self, input_dto: TicketActionInputDTO) -> TicketOutputDTO:
        """
        Executa a transição.

        Raises:
            EntityNotFoundError: Ticket inexistente ou removido
            UnauthorizedError: Ator sem papel de equipe no curso
        """
        with self.uow:
            ticket = self.ticket_repo.get_by_id(input_dto.ticket_id)
            if ticket is None:
                raise _ticket_not_found(input_dto.ticket_id)
            ticket.ensure_active()

            if not self.authorization.has_role(input_dto.actor_id, STAFF_ROLES, ticket.course_id):
                raise UnauthorizedError(
                    self.unauthorized_message,
                    code=f"tickets.{self.operation}.unauthorized",
                )

            previous_status = ticket.status
            self.apply(ticket, input_dto.actor_id)

            # Removido entre a leitura e a escrita
            if not self.ticket_repo.apply_transition(ticket, require_active=True):
                raise _ticket_not_found(ticket.id)

            self.uow.publish_event(
                self.event_class(
                    aggregate_id=ticket.id,
                    actor_id=input_dto.actor_id,
                    course_id=ticket.course_id,
                    queue_id=ticket.queue_id,
                    previous_status=previous_status.value,
                    status=ticket.status.value,
                )
            )

        logger.info(
            f"Ticket {ticket.id}: {previous_status.value} -> {ticket.status.value} "
            f"by {input_dto.actor_id}"
        )

        return TicketOutputDTO.from_entity(ticket)


class ClaimTicketService(StaffTransitionService):
    """
    Use Case: Reivindicar ticket.

    Não verifica o status anterior além de "não removido":
    reivindicar de novo apenas regrava o carimbo.
    """

    operation = "claimTicket"
    unauthorized_message = "Only TAs and above can claim tickets."
    event_class = TicketClaimedEvent

    def apply(self, ticket: TicketEntity, actor_id: str) -> None:
        ticket.claim(actor_id)


class ReleaseTicketService(StaffTransitionService):
    """Use Case: Devolver ticket à fila (limpa claimed_at/claimed_by)."""

    operation = "releaseTicket"
    unauthorized_message = "Only TAs and above can release tickets."
    event_class = TicketReleasedEvent

    def apply(self, ticket: TicketEntity, actor_id: str) -> None:
        ticket.release()


class MarkTicketAsMissingService(StaffTransitionService):
    operation = "markTicketAsMissing"
    unauthorized_message = "Only TAs and above can mark tickets as missing."
    event_class = TicketMarkedAsMissingEvent

    def apply(self, ticket: TicketEntity, actor_id: str) -> None:
        ticket.mark_as_missing(actor_id)


class MarkTicketAsDoneService(StaffTransitionService):
    operation = "markTicketAsDone"
    unauthorized_message = "Only TAs and above can mark tickets as done."
    event_class = TicketMarkedAsDoneEvent

    def apply(self, ticket: TicketEntity, actor_id: str) -> None:
        ticket.mark_as_done(actor_id)


class DeleteTicketService:
    """
    Use Case: Remover ticket.

    Permitido ao dono (um dos student_ids) ou à equipe do curso.
    Verifica apenas existência; a remoção de um ticket já removido
    segue a RedeletePolicy configurada.

    Fluxo:
    1. Buscar ticket (inexistente → NotFound)
    2. Autorizar (dono ou TA e acima)
    3. Aplicar política de re-remoção
    4. Update condicional + TicketDeletedEvent
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        authorization: AuthorizationOracle,
        uow: UnitOfWork,
        redelete_policy: RedeletePolicy = RedeletePolicy.IGNORE,
    ):
        self.ticket_repo = ticket_repo
        self.authorization = authorization
        self.uow = uow
        self.redelete_policy = redelete_policy

    def execute(self, input_dto: TicketActionInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Ticket inexistente
            UnauthorizedError: Ator não é dono nem equipe
            BusinessRuleViolationError: Re-remoção com política REJECT
        """
        actor_id = input_dto.actor_id

        with self.uow:
            ticket = self.ticket_repo.get_by_id(input_dto.ticket_id)
            if ticket is None:
                raise _ticket_not_found(input_dto.ticket_id)

            by_owner = ticket.belongs_to_user(actor_id)
            is_staff = self.authorization.has_role(actor_id, STAFF_ROLES, ticket.course_id)
            if not (by_owner or is_staff):
                raise UnauthorizedError(
                    "Only ticket owners or TAs and above can delete tickets.",
                    code="tickets.deleteTicket.unauthorized",
                )

            if ticket.is_deleted:
                already = self._handle_redelete(ticket)
                if already is not None:
                    return already

            previous_status = ticket.status
            ticket.delete(actor_id)

            require_active = self.redelete_policy is not RedeletePolicy.OVERWRITE
            if not self.ticket_repo.apply_transition(ticket, require_active=require_active):
                # Removido por outra requisição entre a leitura e a escrita
                current = self.ticket_repo.get_by_id(ticket.id)
                if current is None:
                    raise _ticket_not_found(ticket.id)
                return self._handle_redelete(current)

            self.uow.publish_event(
                TicketDeletedEvent(
                    aggregate_id=ticket.id,
                    actor_id=actor_id,
                    course_id=ticket.course_id,
                    queue_id=ticket.queue_id,
                    previous_status=previous_status.value,
                    status=ticket.status.value,
                    by_owner=by_owner,
                )
            )

        logger.info(f"Ticket {ticket.id} deleted by {actor_id} (owner={by_owner})")

        return TicketOutputDTO.from_entity(ticket)

    def _handle_redelete(self, ticket: TicketEntity) -> Optional[TicketOutputDTO]:
        """
        Aplica a política a um ticket já removido.

        Returns:
            DTO do ticket inalterado (IGNORE) ou None para seguir
            com a regravação (OVERWRITE)
        """
        if self.redelete_policy is RedeletePolicy.REJECT:
            raise BusinessRuleViolationError(
                f"Ticket {ticket.id} was already deleted",
                rule="tickets.deleteTicket.alreadyDeleted",
            )

        if self.redelete_policy is RedeletePolicy.IGNORE:
            logger.info(f"Ticket {ticket.id} already deleted, keeping first deletion stamps")
            return TicketOutputDTO.from_entity(ticket)

        return None

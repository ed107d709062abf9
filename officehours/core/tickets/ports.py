"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência de tickets, filas e sessões.

Tipos de Ports:
- TicketRepository: escrita exclusiva do ciclo de vida dos tickets
- QueueRepository: leitura de filas + sincronização do roster
- SessionRepository: leitura de sessões

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable
import copy

from officehours.core.shared.exceptions import EntityNotFoundError

from .entities import QueueEntity, SessionEntity, TicketEntity, TicketStatus


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (PostgreSQL/SQLite via ORM)
    - InMemoryTicketRepository (para testes)
    """

    def add(self, ticket: TicketEntity) -> None:
        """Insere ticket recém-criado."""
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        """
        Busca ticket por ID (inclusive removidos).

        Returns:
            Entidade encontrada ou None se não existir
        """
        ...

    def apply_transition(self, ticket: TicketEntity, require_active: bool = True) -> bool:
        """
        Grava a transição do ticket com update condicional.

        Somente ticket.transition_fields() são escritos, para que uma
        leitura antiga não apague carimbos gravados por outra transição.
        A escrita só acontece se o ticket ainda existe e, quando
        require_active=True, se o status gravado não é "deleted".

        Returns:
            True se uma linha foi atualizada, False caso contrário
        """
        ...


@runtime_checkable
class QueueRepository(Protocol):
    """Interface para filas (somente o necessário à criação)."""

    def get_by_id(self, queue_id: str) -> Optional[QueueEntity]:
        ...

    def append_ticket(self, queue_id: str, ticket_id: str) -> bool:
        """
        Anexa ticket ao roster da fila.

        Idempotente: reenvio do mesmo ticket_id não duplica a entrada.

        Returns:
            True se anexado agora, False se já estava no roster
        """
        ...


@runtime_checkable
class SessionRepository(Protocol):
    """Interface para sessões."""

    def get_by_id(self, session_id: str) -> Optional[SessionEntity]:
        ...


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Armazena cópias das entidades para que o update condicional
    compare contra o estado gravado, não contra o objeto em memória
    do caso de uso.

    Example:
        repo = InMemoryTicketRepository()
        repo.add(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self):
        self._tickets: Dict[str, TicketEntity] = {}

    def add(self, ticket: TicketEntity) -> None:
        self._tickets[ticket.id] = copy.deepcopy(ticket)

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        stored = self._tickets.get(ticket_id)
        return copy.deepcopy(stored) if stored else None

    def apply_transition(self, ticket: TicketEntity, require_active: bool = True) -> bool:
        stored = self._tickets.get(ticket.id)
        if stored is None:
            return False
        if require_active and stored.status == TicketStatus.DELETED:
            return False
        for name in ticket.transition_fields():
            setattr(stored, name, getattr(ticket, name))
        return True

    def list_all(self) -> List[TicketEntity]:
        return [copy.deepcopy(t) for t in self._tickets.values()]


class InMemoryQueueRepository:
    """Filas em memória, com roster sem duplicatas."""

    def __init__(self):
        self._queues: Dict[str, QueueEntity] = {}

    def add(self, queue: QueueEntity) -> QueueEntity:
        self._queues[queue.id] = copy.deepcopy(queue)
        return queue

    def get_by_id(self, queue_id: str) -> Optional[QueueEntity]:
        stored = self._queues.get(queue_id)
        return copy.deepcopy(stored) if stored else None

    def append_ticket(self, queue_id: str, ticket_id: str) -> bool:
        queue = self._queues.get(queue_id)
        if queue is None:
            raise EntityNotFoundError(
                f"No queue exists with id {queue_id}",
                entity_type="Queue",
                entity_id=queue_id,
                code="queues.doesNotExist",
            )
        if ticket_id in queue.ticket_ids:
            return False
        queue.ticket_ids.append(ticket_id)
        return True


class InMemorySessionRepository:
    """Sessões em memória."""

    def __init__(self):
        self._sessions: Dict[str, SessionEntity] = {}

    def add(self, session: SessionEntity) -> SessionEntity:
        self._sessions[session.id] = session
        return session

    def get_by_id(self, session_id: str) -> Optional[SessionEntity]:
        return self._sessions.get(session_id)

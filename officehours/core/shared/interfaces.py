"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Este módulo define as interfaces transversais que os Adapters
devem implementar. São os "Ports" da Arquitetura Hexagonal.

- UnitOfWork: transação atômica + fila de eventos
- EventPublisher: entrega de eventos após commit
- EventStore: persistência de eventos para auditoria

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Garante que múltiplas escritas (ex: inserir ticket e anexá-lo
    ao roster da fila) sejam persistidas como uma única unidade:
    ou todas são persistidas ou nenhuma é.

    Pattern: Context Manager
        with uow:
            ticket_repo.add(ticket)
            queue_repo.append_ticket(queue.id, ticket.id)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção

    Eventos enfileirados só são publicados após commit bem-sucedido.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Ordem de execução:
        1. Commit da transação no banco
        2. Publicação de eventos enfileirados
        3. Limpeza de estado interno
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Adapters implementam para integrar com diferentes
    sistemas de mensageria (Celery, logs, memória).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publica evento para consumidores."""
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos, na ordem recebida."""
        for event in events:
            self.publish(event)


class EventStore(ABC):
    """
    Interface para persistência de eventos.

    Mantém o histórico de transições de cada ticket
    (quem reivindicou, quem removeu, quando).
    """

    @abstractmethod
    def append(self, event: DomainEvent, sequence: int) -> None:
        """
        Adiciona evento ao store.

        Args:
            event: Evento a ser persistido
            sequence: Posição do evento no agregado
        """
        raise NotImplementedError

    @abstractmethod
    def last_sequence(self, aggregate_id: str) -> int:
        """Última sequência gravada para o agregado (0 se nenhuma)."""
        raise NotImplementedError

    @abstractmethod
    def get_events_for_aggregate(self, aggregate_id: str) -> List[dict]:
        """Eventos do agregado ordenados por sequência."""
        raise NotImplementedError

"""
Testes de Domain Events: Unit of Work, Publishers e Handlers Celery.

Testa:
- Eventos persistidos no Event Store junto com a transação
- Publicação somente após commit; descarte no rollback
- Roteamento de eventos para handlers Celery (com .delay mockado)
- Limpeza periódica do Event Store
"""

from datetime import timedelta
import logging
from unittest.mock import patch

import pytest
from django.utils import timezone

from officehours.adapters.django_app.events import handlers, publishers
from officehours.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
)
from officehours.adapters.django_app.shared.unit_of_work import (
    DjangoUnitOfWork,
    InMemoryUnitOfWork,
)
from officehours.adapters.django_app.tickets.models import DomainEventModel
from officehours.core.shared.identifiers import new_id
from officehours.core.tickets.entities import Notifications, TicketEntity
from officehours.core.tickets.events import (
    TicketClaimedEvent,
    TicketCreatedEvent,
    TicketDeletedEvent,
)


def created_event(ticket_id=None, **kwargs):
    return TicketCreatedEvent(
        aggregate_id=ticket_id or new_id(),
        course_id='course-1',
        queue_id='queue-1',
        student_ids=['s1', 's2'],
        **kwargs,
    )


class FailingPublisher(InMemoryEventPublisher):
    def publish(self, event):
        raise ConnectionError('broker indisponível')


@pytest.fixture
def new_ticket(queue):
    return TicketEntity.create(
        course_id=queue.course_id,
        queue_id=queue.id,
        student_ids=['s1'],
        notifications=Notifications(),
    )


# =============================================================================
# DjangoUnitOfWork
# =============================================================================

@pytest.mark.django_db
class TestDjangoUnitOfWork:

    def test_commit_persiste_e_publica(self, ticket_repo, event_store, new_ticket):
        """Evento vai para o Event Store e é publicado após o commit."""
        publisher = InMemoryEventPublisher()
        uow = DjangoUnitOfWork(event_publisher=publisher, event_store=event_store)

        with uow:
            ticket_repo.add(new_ticket)
            uow.publish_event(created_event(new_ticket.id))
            assert publisher.published_events == []

        assert uow.is_committed
        assert len(publisher.published_events) == 1
        assert event_store.last_sequence(new_ticket.id) == 1
        assert ticket_repo.get_by_id(new_ticket.id) is not None

    def test_rollback_descarta_tudo(self, ticket_repo, event_store, new_ticket):
        publisher = InMemoryEventPublisher()
        uow = DjangoUnitOfWork(event_publisher=publisher, event_store=event_store)

        with pytest.raises(RuntimeError):
            with uow:
                ticket_repo.add(new_ticket)
                uow.publish_event(created_event(new_ticket.id))
                raise RuntimeError('falha no meio da operação')

        assert uow.is_rolled_back
        assert ticket_repo.get_by_id(new_ticket.id) is None
        assert publisher.published_events == []
        assert DomainEventModel.objects.filter(aggregate_id=new_ticket.id).count() == 0

    def test_sequencia_continua_entre_transacoes(self, event_store, new_ticket):
        uow = DjangoUnitOfWork(event_store=event_store)

        with uow:
            uow.publish_event(created_event(new_ticket.id))
            uow.publish_event(TicketClaimedEvent(aggregate_id=new_ticket.id, status='claimed'))

        # Mesma instância reutilizada
        with uow:
            uow.publish_event(TicketDeletedEvent(aggregate_id=new_ticket.id, status='deleted'))

        sequences = list(
            DomainEventModel.objects.filter(aggregate_id=new_ticket.id)
            .order_by('sequence')
            .values_list('sequence', 'event_type')
        )
        assert sequences == [
            (1, 'TicketCreatedEvent'),
            (2, 'TicketClaimedEvent'),
            (3, 'TicketDeletedEvent'),
        ]

    def test_falha_na_publicacao_nao_desfaz(self, ticket_repo, event_store, new_ticket):
        """Operação comitada permanece mesmo se o broker falhar."""
        uow = DjangoUnitOfWork(event_publisher=FailingPublisher(), event_store=event_store)

        with uow:
            ticket_repo.add(new_ticket)
            uow.publish_event(created_event(new_ticket.id))

        assert ticket_repo.get_by_id(new_ticket.id) is not None


class TestInMemoryUnitOfWork:

    def test_repassa_ao_publisher(self):
        publisher = InMemoryEventPublisher()
        uow = InMemoryUnitOfWork(event_publisher=publisher)

        with uow:
            uow.publish_event(created_event())

        assert uow.committed
        assert len(uow.published_events) == 1
        assert publisher.get_events_by_type('TicketCreatedEvent') == uow.published_events

    def test_rollback(self):
        uow = InMemoryUnitOfWork()

        with pytest.raises(ValueError):
            with uow:
                uow.publish_event(created_event())
                raise ValueError()

        assert uow.rolled_back
        assert uow.published_events == []


# =============================================================================
# Publishers
# =============================================================================

class TestPublishers:

    def test_logging_publisher(self):
        event = created_event()

        with patch.object(publishers.logger, 'log') as log:
            LoggingEventPublisher(log_level=logging.DEBUG).publish(event)

        level, message = log.call_args.args
        assert level == logging.DEBUG
        assert message.startswith(f'[EVENT] TicketCreatedEvent | aggregate={event.aggregate_id}')

    def test_celery_publisher(self):
        event = created_event()

        with patch.object(handlers.dispatch_domain_event, 'delay') as delay:
            CeleryEventPublisher(also_log=False).publish(event)

        delay.assert_called_once_with('TicketCreatedEvent', event.to_dict())

    def test_celery_publisher_broker_fora(self):
        with patch.object(handlers.dispatch_domain_event, 'delay', side_effect=OSError('down')):
            CeleryEventPublisher().publish(created_event())


# =============================================================================
# Handlers Celery
# =============================================================================

class TestHandlers:

    def test_dispatch_roteia_para_handler(self):
        data = created_event().to_dict()

        with patch.object(handlers.handle_ticket_created, 'delay') as delay:
            handlers.dispatch_domain_event('TicketCreatedEvent', data)

        delay.assert_called_once_with(data)

    def test_dispatch_evento_desconhecido(self):
        with patch.object(handlers.handle_ticket_created, 'delay') as created, \
                patch.object(handlers.handle_ticket_status_changed, 'delay') as changed:
            handlers.dispatch_domain_event('SomethingElseEvent', {})

        created.assert_not_called()
        changed.assert_not_called()

    def test_ticket_criado_registra_metrica(self):
        with patch.object(handlers.record_metric, 'delay') as delay:
            handlers.handle_ticket_created(created_event(session_id='sess-1').to_dict())

        delay.assert_called_once_with(
            metric_name='tickets_created',
            value=1,
            tags={'course_id': 'course-1', 'restricted': 'yes'},
        )

    def test_remocao_registra_dono(self):
        event = TicketDeletedEvent(
            aggregate_id=new_id(),
            actor_id='s1',
            course_id='course-1',
            previous_status='open',
            status='deleted',
            by_owner=True,
        )

        with patch.object(handlers.record_metric, 'delay') as delay:
            handlers.handle_ticket_status_changed(event.to_dict())

        delay.assert_called_once_with(
            metric_name='ticket_transitions',
            value=1,
            tags={'course_id': 'course-1', 'status': 'deleted', 'by_owner': 'yes'},
        )

    def test_todos_os_eventos_tem_handler(self):
        assert set(handlers.EVENT_HANDLERS) == {
            'TicketCreatedEvent',
            'TicketClaimedEvent',
            'TicketReleasedEvent',
            'TicketMarkedAsMissingEvent',
            'TicketMarkedAsDoneEvent',
            'TicketDeletedEvent',
        }


@pytest.mark.django_db
class TestCleanupOldEvents:

    def _event_at(self, occurred_at):
        return DomainEventModel.objects.create(
            event_id=new_id(),
            event_type='TicketCreatedEvent',
            aggregate_type='Ticket',
            aggregate_id=new_id(),
            sequence=1,
            occurred_at=occurred_at,
        )

    def test_remove_eventos_antigos(self):
        now = timezone.now()
        self._event_at(now - timedelta(days=40))
        recent = self._event_at(now - timedelta(days=5))

        removed = handlers.cleanup_old_events(days=30)

        assert removed == 1
        assert list(DomainEventModel.objects.values_list('event_id', flat=True)) == [recent.event_id]

    def test_retencao_do_settings(self, settings):
        settings.EVENT_RETENTION_DAYS = 3
        self._event_at(timezone.now() - timedelta(days=4))

        assert handlers.cleanup_old_events() == 1

"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados. Isso permite:

- Desacoplamento: o ciclo de vida do ticket não conhece consumidores
- Resiliência: retry automático em falhas
- Auditoria: contagem de transições por curso

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from celery import shared_task
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_ticket_created(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento TicketCreatedEvent.

    Ações:
    - Registrar tamanho do grupo (estudantes por ticket)
    - Registrar métrica de entrada na fila

    Args:
        event_data: Dados do evento serializado
    """
    ticket_id = event_data.get('aggregate_id')
    data = event_data.get('data') or {}
    queue_id = data.get('queue_id')
    student_ids = data.get('student_ids') or []

    logger.info(
        f"[HANDLER] TicketCreated: {ticket_id} | "
        f"Fila: {queue_id} | Estudantes: {len(student_ids)}"
    )

    record_metric.delay(
        metric_name='tickets_created',
        value=1,
        tags={
            'course_id': data.get('course_id', ''),
            'restricted': 'yes' if data.get('session_id') else 'no',
        },
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_ticket_status_changed(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para transições (claim, release, missing, done, delete).

    Args:
        event_data: Dados do evento serializado
    """
    ticket_id = event_data.get('aggregate_id')
    data = event_data.get('data') or {}
    previous_status = data.get('previous_status')
    status = data.get('status')

    logger.info(
        f"[HANDLER] {event_data.get('event_type')}: {ticket_id} | "
        f"{previous_status} -> {status} | Ator: {event_data.get('actor_id')}"
    )

    tags = {'course_id': data.get('course_id', ''), 'status': status or ''}
    if 'by_owner' in data:
        tags['by_owner'] = 'yes' if data['by_owner'] else 'no'

    record_metric.delay(metric_name='ticket_transitions', value=1, tags=tags)


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'TicketCreatedEvent': handle_ticket_created,
    'TicketClaimedEvent': handle_ticket_status_changed,
    'TicketReleasedEvent': handle_ticket_status_changed,
    'TicketMarkedAsMissingEvent': handle_ticket_status_changed,
    'TicketMarkedAsDoneEvent': handle_ticket_status_changed,
    'TicketDeletedEvent': handle_ticket_status_changed,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados.
    Este é o ponto de entrada para todos os eventos.

    Args:
        event_type: Tipo do evento (ex: 'TicketClaimedEvent')
        event_data: Dados do evento serializado
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Optional[Dict[str, str]] = None,
) -> None:
    """
    Registra métrica para monitoramento.

    Args:
        metric_name: Nome da métrica
        value: Valor
        tags: Tags para dimensões
    """
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def cleanup_old_events(self, days: Optional[int] = None) -> int:
    """
    Limpa eventos antigos do Event Store.

    Executada semanalmente pelo Celery Beat.

    Args:
        days: Número de dias para manter eventos
            (padrão: settings.EVENT_RETENTION_DAYS)

    Returns:
        Número de eventos removidos
    """
    from officehours.adapters.django_app.tickets.models import DomainEventModel

    if days is None:
        days = getattr(settings, 'EVENT_RETENTION_DAYS', 90)

    logger.info(f"[SCHEDULED] Limpando eventos com mais de {days} dias...")

    cutoff_date = timezone.now() - timedelta(days=days)
    deleted, _ = DomainEventModel.objects.filter(occurred_at__lt=cutoff_date).delete()

    logger.info(f"[SCHEDULED] {deleted} eventos removidos")

    return deleted

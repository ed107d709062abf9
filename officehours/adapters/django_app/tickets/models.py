"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em officehours/core/tickets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Relacionamentos:
- QueueModel: Fila de um curso
- SessionModel: Sessão com segredo (filas restritas)
- TicketModel: Tabela principal de tickets
- QueueTicketModel: Roster da fila (ordem de chegada, sem duplicatas)
- DomainEventModel: Event Store
"""

from django.db import models
from django.utils import timezone


class TicketStatusChoices(models.TextChoices):
    """Choices para status de ticket (espelha TicketStatus do Core)."""
    OPEN = 'open', 'Open'
    CLAIMED = 'claimed', 'Claimed'
    MARKED_AS_MISSING = 'markedAsMissing', 'Marked as missing'
    MARKED_AS_DONE = 'markedAsDone', 'Marked as done'
    DELETED = 'deleted', 'Deleted'


class SessionModel(models.Model):
    """
    Sessão de office hours.

    Fields:
        id: UUID gerado pela Entity
        course_id: Curso da sessão
        secret: Segredo compartilhado com os estudantes presentes
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    course_id = models.CharField(max_length=100, db_index=True)

    secret = models.CharField(max_length=100)

    class Meta:
        db_table = 'sessions'
        verbose_name = 'Sessão'
        verbose_name_plural = 'Sessões'

    def __str__(self):
        return f"Session {self.id[:8]} ({self.course_id})"


class QueueModel(models.Model):
    """
    Fila de atendimento.

    Fields:
        id: UUID gerado pela Entity
        course_id: Curso dono da fila
        name: Nome exibido
        restricted_sessions: Sessões cujo segredo libera a entrada
            (vazio = fila aberta)
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    course_id = models.CharField(max_length=100, db_index=True)

    name = models.CharField(max_length=200, blank=True, default='')

    restricted_sessions = models.ManyToManyField(
        SessionModel,
        blank=True,
        related_name='restricted_queues',
        help_text="Sessões que liberam a fila restrita",
    )

    class Meta:
        db_table = 'queues'
        verbose_name = 'Fila'
        verbose_name_plural = 'Filas'

    def __str__(self):
        return f"[{self.id[:8]}] {self.name}"


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Este model é um ADAPTER que persiste dados do TicketEntity.
    NÃO contém lógica de negócio - apenas estrutura de dados.

    Fields:
        id: UUID como primary key (gerado pela Entity)
        course_id, queue_id: Escopo do ticket (imutáveis)
        student_ids: Estudantes, na ordem informada (JSONField)
        question: Pergunta opcional
        notifications: Preferências validadas (JSONField)
        status: Estado atual (choices)
        *_at / *_by: Carimbos de cada transição
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do ticket",
    )

    course_id = models.CharField(max_length=100, db_index=True)

    queue = models.ForeignKey(
        QueueModel,
        on_delete=models.PROTECT,
        related_name='tickets',
    )

    student_ids = models.JSONField(default=list)

    question = models.TextField(null=True, blank=True)

    notifications = models.JSONField(default=dict)

    status = models.CharField(
        max_length=20,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.OPEN,
        db_index=True,
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    created_by = models.CharField(max_length=100, null=True, blank=True)

    claimed_at = models.DateTimeField(null=True, blank=True)
    claimed_by = models.CharField(max_length=100, null=True, blank=True)

    marked_as_missing_at = models.DateTimeField(null=True, blank=True)
    marked_as_missing_by = models.CharField(max_length=100, null=True, blank=True)

    marked_as_done_at = models.DateTimeField(null=True, blank=True)
    marked_as_done_by = models.CharField(max_length=100, null=True, blank=True)

    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.CharField(max_length=100, null=True, blank=True)

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['queue', 'status'], name='tickets_queue_status_idx'),
            models.Index(fields=['course_id', 'status'], name='tickets_course_status_idx'),
        ]

    def __str__(self):
        return f"[{self.id[:8]}] {self.status}"

    def __repr__(self):
        return f"<TicketModel id={self.id[:8]} status={self.status}>"


class QueueTicketModel(models.Model):
    """
    Roster da fila: um registro por ticket, em ordem de chegada.

    A restrição única (queue, ticket) torna o append idempotente.
    """

    id = models.BigAutoField(primary_key=True)

    queue = models.ForeignKey(
        QueueModel,
        on_delete=models.CASCADE,
        related_name='roster',
    )

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='roster_entries',
    )

    added_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'queue_tickets'
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['queue', 'ticket'], name='unique_queue_ticket'),
        ]

    def __str__(self):
        return f"{self.queue_id[:8]} <- {self.ticket_id[:8]}"


class DomainEventModel(models.Model):
    """
    Event Store genérico para Domain Events.

    Persiste todos os eventos de domínio para:
    - Auditoria (quem reivindicou, quem removeu, quando)
    - Integração com outros sistemas
    """

    event_id = models.CharField(
        max_length=36,
        primary_key=True,
        help_text="UUID único do evento",
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Tipo do evento (ex: TicketClaimedEvent)",
    )

    aggregate_type = models.CharField(max_length=100, db_index=True)

    aggregate_id = models.CharField(max_length=36, db_index=True)

    event_data = models.JSONField(
        default=dict,
        help_text="Dados serializados do evento",
    )

    version = models.IntegerField(default=1)

    sequence = models.BigIntegerField(
        default=0,
        help_text="Sequência do evento no agregado",
    )

    occurred_at = models.DateTimeField(help_text="Quando o evento ocorreu")

    recorded_at = models.DateTimeField(auto_now_add=True)

    user_id = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="Usuário que iniciou a ação",
    )

    class Meta:
        db_table = 'domain_events'
        verbose_name = 'Evento de Domínio'
        verbose_name_plural = 'Eventos de Domínio'
        ordering = ['recorded_at']
        indexes = [
            models.Index(fields=['aggregate_id', 'sequence'], name='events_aggregate_seq_idx'),
            models.Index(fields=['event_type', 'recorded_at'], name='events_type_recorded_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} - {self.aggregate_id[:8]} @ {self.occurred_at}"

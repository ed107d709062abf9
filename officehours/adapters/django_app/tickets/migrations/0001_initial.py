"""
Migration inicial para o domínio de Tickets.

Cria as tabelas:
- sessions: Sessões com segredo
- queues: Filas (+ tabela M2M de sessões restritas)
- tickets: Tabela principal de tickets
- queue_tickets: Roster das filas
- domain_events: Event Store
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: sessions
        # =================================================================
        migrations.CreateModel(
            name='SessionModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('course_id', models.CharField(db_index=True, max_length=100)),
                ('secret', models.CharField(max_length=100)),
            ],
            options={
                'verbose_name': 'Sessão',
                'verbose_name_plural': 'Sessões',
                'db_table': 'sessions',
            },
        ),

        # =================================================================
        # Tabela: queues
        # =================================================================
        migrations.CreateModel(
            name='QueueModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('course_id', models.CharField(db_index=True, max_length=100)),
                ('name', models.CharField(blank=True, default='', max_length=200)),
                ('restricted_sessions', models.ManyToManyField(
                    blank=True,
                    help_text='Sessões que liberam a fila restrita',
                    related_name='restricted_queues',
                    to='tickets.sessionmodel',
                )),
            ],
            options={
                'verbose_name': 'Fila',
                'verbose_name_plural': 'Filas',
                'db_table': 'queues',
            },
        ),

        # =================================================================
        # Tabela: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(
                    editable=False,
                    help_text='UUID único do ticket',
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                )),
                ('course_id', models.CharField(db_index=True, max_length=100)),
                ('student_ids', models.JSONField(default=list)),
                ('question', models.TextField(blank=True, null=True)),
                ('notifications', models.JSONField(default=dict)),
                ('status', models.CharField(
                    choices=[
                        ('open', 'Open'),
                        ('claimed', 'Claimed'),
                        ('markedAsMissing', 'Marked as missing'),
                        ('markedAsDone', 'Marked as done'),
                        ('deleted', 'Deleted'),
                    ],
                    db_index=True,
                    default='open',
                    max_length=20,
                )),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('created_by', models.CharField(blank=True, max_length=100, null=True)),
                ('claimed_at', models.DateTimeField(blank=True, null=True)),
                ('claimed_by', models.CharField(blank=True, max_length=100, null=True)),
                ('marked_as_missing_at', models.DateTimeField(blank=True, null=True)),
                ('marked_as_missing_by', models.CharField(blank=True, max_length=100, null=True)),
                ('marked_as_done_at', models.DateTimeField(blank=True, null=True)),
                ('marked_as_done_by', models.CharField(blank=True, max_length=100, null=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('deleted_by', models.CharField(blank=True, max_length=100, null=True)),
                ('queue', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets',
                    to='tickets.queuemodel',
                )),
            ],
            options={
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'db_table': 'tickets',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['queue', 'status'], name='tickets_queue_status_idx'),
                    models.Index(fields=['course_id', 'status'], name='tickets_course_status_idx'),
                ],
            },
        ),

        # =================================================================
        # Tabela: queue_tickets (roster)
        # =================================================================
        migrations.CreateModel(
            name='QueueTicketModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('added_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('queue', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='roster',
                    to='tickets.queuemodel',
                )),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='roster_entries',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'db_table': 'queue_tickets',
                'ordering': ['id'],
                'constraints': [
                    models.UniqueConstraint(fields=('queue', 'ticket'), name='unique_queue_ticket'),
                ],
            },
        ),

        # =================================================================
        # Tabela: domain_events (Event Store)
        # =================================================================
        migrations.CreateModel(
            name='DomainEventModel',
            fields=[
                ('event_id', models.CharField(
                    help_text='UUID único do evento',
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                )),
                ('event_type', models.CharField(
                    db_index=True,
                    help_text='Tipo do evento (ex: TicketClaimedEvent)',
                    max_length=100,
                )),
                ('aggregate_type', models.CharField(db_index=True, max_length=100)),
                ('aggregate_id', models.CharField(db_index=True, max_length=36)),
                ('event_data', models.JSONField(default=dict, help_text='Dados serializados do evento')),
                ('version', models.IntegerField(default=1)),
                ('sequence', models.BigIntegerField(default=0, help_text='Sequência do evento no agregado')),
                ('occurred_at', models.DateTimeField(help_text='Quando o evento ocorreu')),
                ('recorded_at', models.DateTimeField(auto_now_add=True)),
                ('user_id', models.CharField(
                    blank=True,
                    db_index=True,
                    help_text='Usuário que iniciou a ação',
                    max_length=100,
                    null=True,
                )),
            ],
            options={
                'verbose_name': 'Evento de Domínio',
                'verbose_name_plural': 'Eventos de Domínio',
                'db_table': 'domain_events',
                'ordering': ['recorded_at'],
                'indexes': [
                    models.Index(fields=['aggregate_id', 'sequence'], name='events_aggregate_seq_idx'),
                    models.Index(fields=['event_type', 'recorded_at'], name='events_type_recorded_idx'),
                ],
            },
        ),
    ]

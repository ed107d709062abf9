"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events do ciclo de vida dos tickets
- Tarefas agendadas (limpeza do Event Store)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A officehours.config.celery worker -l INFO -Q default,events

    # Iniciar beat (tarefas agendadas)
    celery -A officehours.config.celery beat -l INFO
"""

import os
from celery import Celery
from celery.schedules import crontab
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'officehours.config.settings')

app = Celery('officehours')

# Configurações com prefixo CELERY_ vindas do settings do Django
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    task_default_queue='default',
    task_default_retry_delay=60,
    task_max_retries=3,
    worker_send_task_events=True,
    task_send_sent_event=True,
)

# Definir filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
)

# Roteamento de tarefas para filas
app.conf.task_routes = {
    'officehours.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

# Auto-descoberta de tarefas nos apps Django
app.autodiscover_tasks([
    'officehours.adapters.django_app.events',
], related_name='handlers')

# Tarefas agendadas (beat)
app.conf.beat_schedule = {
    # Limpar eventos antigos semanalmente (domingo, 3h)
    'cleanup-old-events': {
        'task': 'officehours.adapters.django_app.events.handlers.cleanup_old_events',
        'schedule': crontab(hour=3, minute=0, day_of_week=0),
    },
}

"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events dos chamados fora do request/response
- Notificações por e-mail (abertura e encerramento)
- Relatório diário de chamados

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from celery.schedules import crontab
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('helpme')

# Broker, backend, serialização e retry vêm de CELERY_* no settings
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    worker_send_task_events=True,
    task_send_sent_event=True,
)

# Definir filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('reports', Exchange('reports'), routing_key='reports.#'),
)

app.conf.task_default_queue = 'default'

# Roteamento de tarefas para filas
app.conf.task_routes = {
    'src.adapters.django_app.events.handlers.generate_daily_report': {'queue': 'reports'},
    'src.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')

# Tarefas agendadas (beat)
app.conf.beat_schedule = {
    # Relatório diário às 8h
    'daily-report': {
        'task': 'src.adapters.django_app.events.handlers.generate_daily_report',
        'schedule': crontab(hour=8, minute=0),
    },
}

"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados via Celery quando Domain Events são
publicados (EVENT_PUBLISHER_MODE=celery) ou chamados diretamente
no processo web (modo sync, desenvolvimento e testes).

Handlers:
- handle_chamado_aberto: Email de confirmação ao solicitante
- handle_chamado_atribuido: Email ao técnico responsável
- handle_chamado_encerrado: Email de encerramento ao solicitante
- handle_chamado_reaberto: Email ao técnico que atendeu
- handle_chamado_cancelado: Registro em log

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # event_data é DomainEvent.to_dict(); campos em event_data["data"]
"""

import logging
from typing import Any, Dict, Optional

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from src.core.shared.tempo import agora

logger = logging.getLogger(__name__)


def _dados(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get("data", {}) or {}


def _enviar_email(destinatario: str, assunto: str, mensagem: str) -> None:
    if not destinatario:
        logger.warning(f"[HANDLER] Email sem destinatário: {assunto}")
        return
    send_mail(
        subject=assunto,
        message=mensagem,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[destinatario],
        fail_silently=False,
    )
    logger.info(f"[NOTIFICATION] EMAIL para {destinatario}: {assunto}")


def _email_do_usuario(usuario_id: Optional[str]) -> str:
    """Busca email pelo repositório (importação tardia para evitar circular import)."""
    if not usuario_id:
        return ""
    from src.config.container import get_container

    usuario = get_container().usuario_repository().get_by_id(usuario_id)
    return usuario.email if usuario else ""


# =============================================================================
# Event Handlers - Chamados
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_chamado_aberto(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para ChamadoAbertoEvent.

    Envia ao solicitante a confirmação com o número da OS.
    """
    dados = _dados(event_data)
    os_chamado = dados.get("os", "")

    logger.info(
        f"[HANDLER] ChamadoAberto: {event_data.get('aggregate_id')} | "
        f"OS: {os_chamado} | Usuário: {dados.get('usuario_id')}"
    )

    _enviar_email(
        dados.get("usuario_email", ""),
        f"Chamado {os_chamado} aberto",
        (
            f"Seu chamado {os_chamado} foi registrado e está na fila de atendimento.\n"
            f"Serviços: {', '.join(dados.get('servicos', []))}"
        ),
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_chamado_atribuido(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    tecnico_id = dados.get("tecnico_id")

    logger.info(
        f"[HANDLER] ChamadoAtribuido: {event_data.get('aggregate_id')} | "
        f"Técnico: {tecnico_id}"
    )

    # Técnico que assumiu sozinho não precisa ser avisado
    if dados.get("atribuido_por_id") == tecnico_id:
        return

    _enviar_email(
        _email_do_usuario(tecnico_id),
        f"Chamado {dados.get('os', '')} atribuído a você",
        f"O chamado {dados.get('os', '')} foi atribuído a você por um administrador.",
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_chamado_encerrado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para ChamadoEncerradoEvent.

    Avisa o solicitante, com a solução registrada e o prazo de reabertura.
    """
    dados = _dados(event_data)
    os_chamado = dados.get("os", "")

    logger.info(
        f"[HANDLER] ChamadoEncerrado: {event_data.get('aggregate_id')} | "
        f"OS: {os_chamado} | Encerrado por: {dados.get('encerrado_por_id')}"
    )

    _enviar_email(
        dados.get("usuario_email", ""),
        f"Chamado {os_chamado} encerrado",
        (
            f"Seu chamado {os_chamado} foi encerrado.\n"
            f"Solução: {dados.get('descricao_encerramento', '')}\n"
            f"Se o problema persistir, você pode reabri-lo em até 48 horas."
        ),
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_chamado_reaberto(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)

    logger.info(
        f"[HANDLER] ChamadoReaberto: {event_data.get('aggregate_id')} | "
        f"Reaberto por: {dados.get('reaberto_por_id')}"
    )

    if dados.get("tecnico_id"):
        _enviar_email(
            _email_do_usuario(dados["tecnico_id"]),
            f"Chamado {dados.get('os', '')} reaberto",
            f"O chamado {dados.get('os', '')} que você atendeu foi reaberto pelo solicitante.",
        )


@shared_task(bind=True, acks_late=True)
def handle_chamado_cancelado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] ChamadoCancelado: {event_data.get('aggregate_id')} | "
        f"OS: {dados.get('os')} | Cancelado por: {dados.get('cancelado_por_id')}"
    )


HANDLERS = {
    "ChamadoAbertoEvent": handle_chamado_aberto,
    "ChamadoAtribuidoEvent": handle_chamado_atribuido,
    "ChamadoEncerradoEvent": handle_chamado_encerrado,
    "ChamadoReabertoEvent": handle_chamado_reaberto,
    "ChamadoCanceladoEvent": handle_chamado_cancelado,
}


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados (assíncrono).
    """
    handler = HANDLERS.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


def executar_handler(event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Executa o handler no próprio processo (modo sync).

    Returns:
        True se havia handler para o evento
    """
    handler = HANDLERS.get(event_type)
    if handler is None:
        return False
    handler(event_data)
    return True


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def generate_daily_report(self) -> Dict[str, Any]:
    """
    Gera resumo diário da fila de chamados.

    Executada diariamente pelo Celery Beat.
    """
    logger.info("[SCHEDULED] Gerando relatório diário...")

    try:
        from src.config.container import get_container

        chamado_repo = get_container().chamado_repository()
        por_status = chamado_repo.contar_por_status()

        report = {
            "data": agora().isoformat(),
            "total_chamados": sum(por_status.values()),
            "por_status": por_status,
            "sem_tecnico": chamado_repo.contar_sem_tecnico(),
        }

        logger.info(f"[SCHEDULED] Relatório gerado: {report}")
        return report

    except Exception as e:
        logger.error(f"Erro ao gerar relatório: {e}", exc_info=True)
        return {}

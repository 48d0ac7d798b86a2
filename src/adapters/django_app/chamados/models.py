"""
Django Models para Chamados e Catálogo de Serviços.

Estes models são ADAPTERS - persistem as entidades definidas em
src/core/chamados/entities.py e src/core/catalogo/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Conversão para/de Entities fica nos Mappers

Relacionamentos:
- ServicoModel: Catálogo de serviços
- ChamadoModel: Chamado (solicitante e técnico protegidos contra remoção)
- OrdemDeServicoModel: Vínculo chamado x serviço, único por par

O histórico de transições fica no MongoDB (src/adapters/mongodb).
"""

from django.db import models
from django.utils import timezone

from src.adapters.django_app.usuarios.models import UsuarioModel


class ChamadoStatusChoices(models.TextChoices):
    """Espelha ChamadoStatus do Core."""
    ABERTO = 'ABERTO', 'Aberto'
    EM_ATENDIMENTO = 'EM_ATENDIMENTO', 'Em atendimento'
    ENCERRADO = 'ENCERRADO', 'Encerrado'
    REABERTO = 'REABERTO', 'Reaberto'
    CANCELADO = 'CANCELADO', 'Cancelado'


class ServicoModel(models.Model):

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do serviço"
    )

    nome = models.CharField(
        max_length=100,
        unique=True,
        help_text="Nome exibido na abertura do chamado"
    )

    descricao = models.CharField(max_length=500, null=True, blank=True)

    ativo = models.BooleanField(default=True, db_index=True)

    gerado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)
    deletado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'servicos'
        verbose_name = 'Serviço'
        verbose_name_plural = 'Serviços'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class ChamadoModel(models.Model):
    """
    Model Django para persistência de Chamados.

    Fields:
        id: UUID gerado pela Entity
        os: Número sequencial legível (INC0001)
        status: Estado atual (choices)
        usuario: Solicitante
        tecnico: Técnico responsável (opcional)
        encerrado_em: Início do prazo de reabertura
        deletado_em: Exclusão lógica
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do chamado"
    )

    os = models.CharField(
        max_length=20,
        unique=True,
        help_text="Número da ordem de serviço (INC0001)"
    )

    descricao = models.TextField(help_text="Problema relatado")

    descricao_encerramento = models.TextField(
        null=True,
        blank=True,
        help_text="Solução ou justificativa do cancelamento"
    )

    status = models.CharField(
        max_length=20,
        choices=ChamadoStatusChoices.choices,
        default=ChamadoStatusChoices.ABERTO,
        db_index=True,
        help_text="Estado atual do chamado"
    )

    usuario = models.ForeignKey(
        UsuarioModel,
        on_delete=models.PROTECT,
        related_name='chamados_abertos',
        help_text="Solicitante"
    )

    tecnico = models.ForeignKey(
        UsuarioModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='chamados_atribuidos',
        help_text="Técnico responsável"
    )

    gerado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)
    encerrado_em = models.DateTimeField(null=True, blank=True)
    deletado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'chamados'
        verbose_name = 'Chamado'
        verbose_name_plural = 'Chamados'
        ordering = ['-gerado_em']
        indexes = [
            # Índices compostos para as filas
            models.Index(fields=['status', 'gerado_em'], name='chamados_status_gerado_idx'),
            models.Index(fields=['tecnico', 'status'], name='chamados_tecnico_status_idx'),
            models.Index(fields=['usuario', 'gerado_em'], name='chamados_usuario_gerado_idx'),
        ]

    def __str__(self):
        return f"{self.os} ({self.status})"


class OrdemDeServicoModel(models.Model):
    """Vínculo entre chamado e serviço."""

    id = models.BigAutoField(primary_key=True)

    chamado = models.ForeignKey(
        ChamadoModel,
        on_delete=models.CASCADE,
        related_name='ordens',
    )

    servico = models.ForeignKey(
        ServicoModel,
        on_delete=models.PROTECT,
        related_name='ordens',
    )

    gerado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'ordens_de_servico'
        verbose_name = 'Ordem de Serviço'
        verbose_name_plural = 'Ordens de Serviço'
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['chamado', 'servico'], name='ordem_chamado_servico_unica'),
        ]

    def __str__(self):
        return f"{self.chamado_id[:8]} -> {self.servico_id[:8]}"

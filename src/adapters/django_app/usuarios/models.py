"""
Django Models do domínio de Identidade.

Models são ADAPTERS: apenas estrutura de dados. As regras ficam em
src/core/identidade/entities.py e a conversão nos Mappers.

Tabelas:
- usuarios: usuários finais, técnicos e administradores
- expedientes: janelas de trabalho dos técnicos
"""

from django.db import models
from django.utils import timezone


class RegraChoices(models.TextChoices):
    """Espelha Regra do Core."""
    USUARIO = 'USUARIO', 'Usuário'
    TECNICO = 'TECNICO', 'Técnico'
    ADMIN = 'ADMIN', 'Administrador'


class SetorChoices(models.TextChoices):
    """Espelha Setor do Core."""
    ADMINISTRACAO = 'ADMINISTRACAO', 'Administração'
    ALMOXARIFADO = 'ALMOXARIFADO', 'Almoxarifado'
    CALL_CENTER = 'CALL_CENTER', 'Call Center'
    COMERCIAL = 'COMERCIAL', 'Comercial'
    DEPARTAMENTO_PESSOAL = 'DEPARTAMENTO_PESSOAL', 'Departamento Pessoal'
    FINANCEIRO = 'FINANCEIRO', 'Financeiro'
    JURIDICO = 'JURIDICO', 'Jurídico'
    LOGISTICA = 'LOGISTICA', 'Logística'
    MARKETING = 'MARKETING', 'Marketing'
    QUALIDADE = 'QUALIDADE', 'Qualidade'
    RECURSOS_HUMANOS = 'RECURSOS_HUMANOS', 'Recursos Humanos'
    TECNOLOGIA_INFORMACAO = 'TECNOLOGIA_INFORMACAO', 'Tecnologia da Informação'


class UsuarioModel(models.Model):
    """
    Model Django para persistência de Usuários.

    Fields:
        id: UUID gerado pela Entity
        email: Login (único, minúsculas)
        password: Hash de django.contrib.auth.hashers
        regra: USUARIO | TECNICO | ADMIN
        refresh_token: Último refresh token emitido
        deletado_em: Exclusão lógica
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do usuário"
    )

    nome = models.CharField(max_length=100, help_text="Nome")
    sobrenome = models.CharField(max_length=100, blank=True, default='', help_text="Sobrenome")

    email = models.EmailField(
        max_length=254,
        unique=True,
        help_text="Email de login"
    )

    password = models.CharField(max_length=255, help_text="Hash da senha")

    regra = models.CharField(
        max_length=10,
        choices=RegraChoices.choices,
        default=RegraChoices.USUARIO,
        db_index=True,
        help_text="Papel de acesso"
    )

    setor = models.CharField(
        max_length=30,
        choices=SetorChoices.choices,
        null=True,
        blank=True,
        db_index=True,
        help_text="Setor do usuário"
    )

    telefone = models.CharField(max_length=20, null=True, blank=True)
    ramal = models.CharField(max_length=10, null=True, blank=True)
    avatar_url = models.CharField(max_length=500, null=True, blank=True)

    ativo = models.BooleanField(default=True, db_index=True)

    refresh_token = models.TextField(null=True, blank=True)

    gerado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)
    deletado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'usuarios'
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        ordering = ['nome']
        indexes = [
            models.Index(fields=['regra', 'ativo'], name='usuarios_regra_ativo_idx'),
        ]

    def __str__(self):
        return f"{self.nome} {self.sobrenome} <{self.email}>"


class ExpedienteModel(models.Model):
    """Janela de trabalho de um técnico (HH:MM no fuso local)."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do expediente"
    )

    usuario = models.ForeignKey(
        UsuarioModel,
        on_delete=models.CASCADE,
        related_name='expedientes',
        help_text="Técnico dono do expediente"
    )

    entrada = models.CharField(max_length=5, help_text="Início HH:MM")
    saida = models.CharField(max_length=5, help_text="Fim HH:MM")

    ativo = models.BooleanField(default=True, db_index=True)

    gerado_em = models.DateTimeField(default=timezone.now)
    deletado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'expedientes'
        verbose_name = 'Expediente'
        verbose_name_plural = 'Expedientes'
        indexes = [
            models.Index(fields=['usuario', 'ativo'], name='expedientes_usuario_ativo_idx'),
        ]

    def __str__(self):
        return f"{self.usuario_id[:8]} {self.entrada}-{self.saida}"

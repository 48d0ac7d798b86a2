"""
Migration inicial do domínio de Identidade.

Cria as tabelas:
- usuarios: Usuários, técnicos e administradores
- expedientes: Janelas de trabalho dos técnicos
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


REGRAS = [
    ('USUARIO', 'Usuário'),
    ('TECNICO', 'Técnico'),
    ('ADMIN', 'Administrador'),
]

SETORES = [
    ('ADMINISTRACAO', 'Administração'),
    ('ALMOXARIFADO', 'Almoxarifado'),
    ('CALL_CENTER', 'Call Center'),
    ('COMERCIAL', 'Comercial'),
    ('DEPARTAMENTO_PESSOAL', 'Departamento Pessoal'),
    ('FINANCEIRO', 'Financeiro'),
    ('JURIDICO', 'Jurídico'),
    ('LOGISTICA', 'Logística'),
    ('MARKETING', 'Marketing'),
    ('QUALIDADE', 'Qualidade'),
    ('RECURSOS_HUMANOS', 'Recursos Humanos'),
    ('TECNOLOGIA_INFORMACAO', 'Tecnologia da Informação'),
]


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: usuarios
        # =================================================================
        migrations.CreateModel(
            name='UsuarioModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do usuário'
                )),
                ('nome', models.CharField(max_length=100, help_text='Nome')),
                ('sobrenome', models.CharField(max_length=100, blank=True, default='', help_text='Sobrenome')),
                ('email', models.EmailField(max_length=254, unique=True, help_text='Email de login')),
                ('password', models.CharField(max_length=255, help_text='Hash da senha')),
                ('regra', models.CharField(
                    max_length=10,
                    choices=REGRAS,
                    default='USUARIO',
                    db_index=True,
                    help_text='Papel de acesso'
                )),
                ('setor', models.CharField(
                    max_length=30,
                    choices=SETORES,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='Setor do usuário'
                )),
                ('telefone', models.CharField(max_length=20, null=True, blank=True)),
                ('ramal', models.CharField(max_length=10, null=True, blank=True)),
                ('avatar_url', models.CharField(max_length=500, null=True, blank=True)),
                ('ativo', models.BooleanField(default=True, db_index=True)),
                ('refresh_token', models.TextField(null=True, blank=True)),
                ('gerado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('deletado_em', models.DateTimeField(null=True, blank=True)),
            ],
            options={
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'db_table': 'usuarios',
                'ordering': ['nome'],
            },
        ),
        migrations.AddIndex(
            model_name='usuariomodel',
            index=models.Index(fields=['regra', 'ativo'], name='usuarios_regra_ativo_idx'),
        ),

        # =================================================================
        # Tabela: expedientes
        # =================================================================
        migrations.CreateModel(
            name='ExpedienteModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do expediente'
                )),
                ('entrada', models.CharField(max_length=5, help_text='Início HH:MM')),
                ('saida', models.CharField(max_length=5, help_text='Fim HH:MM')),
                ('ativo', models.BooleanField(default=True, db_index=True)),
                ('gerado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('deletado_em', models.DateTimeField(null=True, blank=True)),
                ('usuario', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='expedientes',
                    to='usuarios.usuariomodel',
                    help_text='Técnico dono do expediente'
                )),
            ],
            options={
                'verbose_name': 'Expediente',
                'verbose_name_plural': 'Expedientes',
                'db_table': 'expedientes',
            },
        ),
        migrations.AddIndex(
            model_name='expedientemodel',
            index=models.Index(fields=['usuario', 'ativo'], name='expedientes_usuario_ativo_idx'),
        ),
    ]

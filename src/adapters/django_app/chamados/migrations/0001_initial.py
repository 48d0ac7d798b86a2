"""
Migration inicial do domínio de Chamados.

Cria as tabelas:
- servicos: Catálogo de serviços
- chamados: Chamados de suporte
- ordens_de_servico: Vínculo chamado x serviço
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


STATUS = [
    ('ABERTO', 'Aberto'),
    ('EM_ATENDIMENTO', 'Em atendimento'),
    ('ENCERRADO', 'Encerrado'),
    ('REABERTO', 'Reaberto'),
    ('CANCELADO', 'Cancelado'),
]


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
        ('usuarios', '0001_initial'),
    ]

    operations = [
        # =================================================================
        # Tabela: servicos
        # =================================================================
        migrations.CreateModel(
            name='ServicoModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do serviço'
                )),
                ('nome', models.CharField(
                    max_length=100,
                    unique=True,
                    help_text='Nome exibido na abertura do chamado'
                )),
                ('descricao', models.CharField(max_length=500, null=True, blank=True)),
                ('ativo', models.BooleanField(default=True, db_index=True)),
                ('gerado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('deletado_em', models.DateTimeField(null=True, blank=True)),
            ],
            options={
                'verbose_name': 'Serviço',
                'verbose_name_plural': 'Serviços',
                'db_table': 'servicos',
                'ordering': ['nome'],
            },
        ),

        # =================================================================
        # Tabela: chamados
        # =================================================================
        migrations.CreateModel(
            name='ChamadoModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do chamado'
                )),
                ('os', models.CharField(
                    max_length=20,
                    unique=True,
                    help_text='Número da ordem de serviço (INC0001)'
                )),
                ('descricao', models.TextField(help_text='Problema relatado')),
                ('descricao_encerramento', models.TextField(
                    null=True,
                    blank=True,
                    help_text='Solução ou justificativa do cancelamento'
                )),
                ('status', models.CharField(
                    max_length=20,
                    choices=STATUS,
                    default='ABERTO',
                    db_index=True,
                    help_text='Estado atual do chamado'
                )),
                ('gerado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('encerrado_em', models.DateTimeField(null=True, blank=True)),
                ('deletado_em', models.DateTimeField(null=True, blank=True)),
                ('usuario', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='chamados_abertos',
                    to='usuarios.usuariomodel',
                    help_text='Solicitante'
                )),
                ('tecnico', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    null=True,
                    blank=True,
                    related_name='chamados_atribuidos',
                    to='usuarios.usuariomodel',
                    help_text='Técnico responsável'
                )),
            ],
            options={
                'verbose_name': 'Chamado',
                'verbose_name_plural': 'Chamados',
                'db_table': 'chamados',
                'ordering': ['-gerado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='chamadomodel',
            index=models.Index(fields=['status', 'gerado_em'], name='chamados_status_gerado_idx'),
        ),
        migrations.AddIndex(
            model_name='chamadomodel',
            index=models.Index(fields=['tecnico', 'status'], name='chamados_tecnico_status_idx'),
        ),
        migrations.AddIndex(
            model_name='chamadomodel',
            index=models.Index(fields=['usuario', 'gerado_em'], name='chamados_usuario_gerado_idx'),
        ),

        # =================================================================
        # Tabela: ordens_de_servico
        # =================================================================
        migrations.CreateModel(
            name='OrdemDeServicoModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('gerado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('chamado', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='ordens',
                    to='chamados.chamadomodel'
                )),
                ('servico', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='ordens',
                    to='chamados.servicomodel'
                )),
            ],
            options={
                'verbose_name': 'Ordem de Serviço',
                'verbose_name_plural': 'Ordens de Serviço',
                'db_table': 'ordens_de_servico',
                'ordering': ['id'],
            },
        ),
        migrations.AddConstraint(
            model_name='ordemdeservicomodel',
            constraint=models.UniqueConstraint(
                fields=('chamado', 'servico'),
                name='ordem_chamado_servico_unica'
            ),
        ),
    ]

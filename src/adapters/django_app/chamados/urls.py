"""
URL patterns de Chamados.

Incluídos em src/config/urls.py:
- chamado_patterns  -> /chamado/          (chamado)
- fila_patterns     -> /filadechamados/   (fila)
- servico_patterns  -> /servico/          (servico)
"""

from django.urls import path

from . import api_views

chamado_patterns = [
    # Antes do <pk> para não conflitar
    path('abertura-chamado', api_views.AbrirChamadoView.as_view(), name='abrir'),
    path('<str:pk>', api_views.ChamadoDetailView.as_view(), name='detail'),
    path('<str:pk>/status', api_views.AlterarStatusChamadoView.as_view(), name='status'),
    path('<str:pk>/reabrir-chamado', api_views.ReabrirChamadoView.as_view(), name='reabrir'),
    path('<str:pk>/cancelar-chamado', api_views.CancelarChamadoView.as_view(), name='cancelar'),
    path('<str:pk>/excluir-chamado', api_views.ExcluirChamadoView.as_view(), name='excluir'),
    path('<str:pk>/historico', api_views.HistoricoChamadoView.as_view(), name='historico'),
]

fila_patterns = [
    path('meus-chamados', api_views.MeusChamadosView.as_view(), name='meus_chamados'),
    path('chamados-atribuidos', api_views.ChamadosAtribuidosView.as_view(), name='chamados_atribuidos'),
    path('todos-chamados', api_views.TodosChamadosView.as_view(), name='todos_chamados'),
    path('abertos', api_views.ChamadosAbertosView.as_view(), name='abertos'),
    path('estatisticas', api_views.EstatisticasView.as_view(), name='estatisticas'),
]

servico_patterns = [
    path('', api_views.ServicoListView.as_view(), name='list'),
    path('<str:pk>', api_views.ServicoDetailView.as_view(), name='detail'),
    path('<str:pk>/desativar', api_views.DesativarServicoView.as_view(), name='desativar'),
    path('<str:pk>/reativar', api_views.ReativarServicoView.as_view(), name='reativar'),
]

"""
URL patterns de Identidade.

Cada grupo é incluído em src/config/urls.py com seu próprio namespace:
- auth_patterns     -> /auth/      (autenticacao)
- usuario_patterns  -> /usuario/   (usuario)
- tecnico_patterns  -> /tecnico/   (tecnico)
- admin_patterns    -> /admin/     (admin_api)
"""

from django.urls import path

from . import api_views

auth_patterns = [
    path('login', api_views.LoginView.as_view(), name='login'),
    path('refresh-token', api_views.RefreshTokenView.as_view(), name='refresh_token'),
    path('logout', api_views.LogoutView.as_view(), name='logout'),
    path('me', api_views.MeView.as_view(), name='me'),
]

usuario_patterns = [
    path('', api_views.UsuarioListView.as_view(), name='list'),
    # Antes do <pk> para não conflitar
    path('senha', api_views.AlterarSenhaView.as_view(), name='senha'),
    path('email', api_views.BuscarUsuarioPorEmailView.as_view(), name='email'),
    path('<str:pk>', api_views.UsuarioDetailView.as_view(), name='detail'),
    path('<str:pk>/reativar', api_views.UsuarioReativarView.as_view(), name='reativar'),
]

tecnico_patterns = [
    path('', api_views.TecnicoListView.as_view(), name='list'),
    path('<str:pk>', api_views.TecnicoDetailView.as_view(), name='detail'),
    path('<str:pk>/horarios', api_views.TecnicoHorariosView.as_view(), name='horarios'),
    path('<str:pk>/restaurar', api_views.TecnicoRestaurarView.as_view(), name='restaurar'),
]

admin_patterns = [
    path('', api_views.AdminListView.as_view(), name='list'),
    path('<str:pk>', api_views.AdminDetailView.as_view(), name='detail'),
    path('<str:pk>/reativar', api_views.AdminReativarView.as_view(), name='reativar'),
]

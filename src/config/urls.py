"""
URL Configuration para o Help-Me.

Estrutura:
- /auth/ - Login, refresh, logout e perfil
- /usuario/, /tecnico/, /admin/ - Cadastros por regra
- /servico/ - Catálogo de serviços
- /chamado/ - Ciclo de vida do chamado
- /filadechamados/ - Filas e estatísticas
- /health/ - Health check
- /api-docs/ - Swagger UI e OpenAPI JSON
"""

from django.urls import include, path

from src.adapters.django_app.chamados.urls import chamado_patterns, fila_patterns, servico_patterns
from src.adapters.django_app.shared.health import health_check
from src.adapters.django_app.usuarios.urls import (
    admin_patterns,
    auth_patterns,
    tecnico_patterns,
    usuario_patterns,
)

from .swagger import openapi_json, swagger_ui

urlpatterns = [
    path('auth/', include((auth_patterns, 'autenticacao'))),
    path('usuario/', include((usuario_patterns, 'usuario'))),
    path('tecnico/', include((tecnico_patterns, 'tecnico'))),
    path('admin/', include((admin_patterns, 'admin_api'))),
    path('servico/', include((servico_patterns, 'servico'))),
    path('chamado/', include((chamado_patterns, 'chamado'))),
    path('filadechamados/', include((fila_patterns, 'fila'))),

    # Health check
    path('health/', health_check, name='health'),

    # Documentação
    path('api-docs/', swagger_ui, name='swagger_ui'),
    path('api-docs/openapi.json', openapi_json, name='openapi_json'),
]

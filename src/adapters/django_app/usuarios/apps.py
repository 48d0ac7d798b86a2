"""
Configuração do Django App de Usuários.

Além de registrar o app, valida na inicialização os segredos JWT.
"""

from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

SEGREDO_MIN_LENGTH = 32


def validar_segredos_jwt() -> None:
    """
    Raises:
        ImproperlyConfigured: Segredo ausente, curto ou repetido
    """
    segredo = getattr(settings, "JWT_SECRET", "") or ""
    segredo_refresh = getattr(settings, "JWT_REFRESH_SECRET", "") or ""

    for nome, valor in (("JWT_SECRET", segredo), ("JWT_REFRESH_SECRET", segredo_refresh)):
        if len(valor) < SEGREDO_MIN_LENGTH:
            raise ImproperlyConfigured(
                f"{nome} deve ter pelo menos {SEGREDO_MIN_LENGTH} caracteres"
            )

    if segredo == segredo_refresh:
        raise ImproperlyConfigured("JWT_SECRET e JWT_REFRESH_SECRET devem ser diferentes")


class UsuariosConfig(AppConfig):
    """Configuração do app Usuários."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.usuarios'
    label = 'usuarios'
    verbose_name = 'Usuários e Expedientes'

    def ready(self):
        # Em DEBUG os segredos de exemplo do .env são aceitos
        if not settings.DEBUG:
            validar_segredos_jwt()

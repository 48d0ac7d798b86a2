"""
WSGI config para o Help-Me.

Expõe `application` para o servidor WSGI (gunicorn, uwsgi).
"""

import logging
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

application = get_wsgi_application()

from django.conf import settings  # noqa: E402

from .ambiente import mascarar_database_url  # noqa: E402

logger = logging.getLogger(__name__)

if settings.DATABASE_URL:
    logger.info(f"Banco de dados: {mascarar_database_url(settings.DATABASE_URL)}")
else:
    logger.info("Banco de dados: SQLite local")

"""
Configurações globais do Pytest para o Help-Me.

Este arquivo é carregado automaticamente pelo pytest e:
- Configura o Django (SQLite em memória, cache local, hasher rápido)
- Registra markers e a opção --run-integration
"""

import pytest
from pathlib import Path

JWT_SECRET_TESTE = "segredo-de-teste-access-0123456789abcdef"
JWT_REFRESH_SECRET_TESTE = "segredo-de-teste-refresh-0123456789abcdef"


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


def pytest_configure(config):
    """Configura Django antes dos testes."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            ALLOWED_HOSTS=['*'],
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'src.adapters.django_app.usuarios.apps.UsuariosConfig',
                'src.adapters.django_app.chamados.apps.ChamadosConfig',
            ],
            MIDDLEWARE=[
                'src.adapters.django_app.shared.middleware.RequestLoggingMiddleware',
                'django.middleware.security.SecurityMiddleware',
                'django.middleware.common.CommonMiddleware',
                'src.adapters.django_app.shared.rate_limit.RateLimitMiddleware',
            ],
            ROOT_URLCONF='src.config.urls',
            APPEND_SLASH=False,
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            CACHES={
                'default': {
                    'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
                    'LOCATION': 'helpme-testes',
                }
            },
            CACHE_DEFAULT_TTL=3600,
            PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'],
            RATE_LIMITS={
                'geral': {'janela': 15 * 60, 'limite': 10000},
                'login': {'janela': 15 * 60, 'limite': 5},
                'escrita': {'janela': 60, 'limite': 10000},
            },
            RATE_LIMIT_ISENTOS=('/health/', '/api-docs/'),
            RATE_LIMIT_PROXIES_CONFIAVEIS=[],
            JWT_SECRET=JWT_SECRET_TESTE,
            JWT_REFRESH_SECRET=JWT_REFRESH_SECRET_TESTE,
            JWT_EXPIRATION=8 * 3600,
            JWT_REFRESH_EXPIRATION=7 * 86400,
            JWT_ALGORITHM='HS256',
            MONGO_URI='mongodb://localhost:27017',
            MONGO_DB_NAME='helpme_testes',
            EVENT_PUBLISHER_MODE='sync',
            EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend',
            DEFAULT_FROM_EMAIL='Help-Me <nao-responda@helpme.local>',
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
        )
        django.setup()


def pytest_collection_modifyitems(config, items):
    """Pula testes de integração, a menos que --run-integration seja informado."""
    if config.getoption("--run-integration", default=False):
        return

    skip_integration = pytest.mark.skip(reason="Integration tests require MongoDB")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )

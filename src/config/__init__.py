"""
Configuração do projeto Help-Me.

Módulos:
- settings: Configurações Django
- ambiente: Parsing e mascaramento de variáveis de ambiente
- urls: Rotas principais
- swagger: Documentação OpenAPI
- wsgi: WSGI application
- celery: Configuração Celery para tarefas assíncronas
- container: Dependency Injection Container
"""

# Importar app Celery para que seja carregado com Django
from .celery import app as celery_app

__all__ = ('celery_app',)

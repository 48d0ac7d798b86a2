#!/usr/bin/env python
"""
Diagnóstico das variáveis de ambiente.

Mostra as variáveis usadas pelo Help-Me com senhas, segredos e
credenciais de connection strings mascarados.

Uso:
    python scripts/check_env.py
"""

import os
import sys

# Raiz do projeto no path (imports "src.")
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from src.config.ambiente import mascarar_ambiente, parse_database_url  # noqa: E402

VARIAVEIS = [
    'DEBUG',
    'DATABASE_URL',
    'DB_MAX_CONNECTIONS',
    'MONGO_URI',
    'MONGO_DB_NAME',
    'REDIS_URL',
    'REDIS_HOST',
    'REDIS_PORT',
    'REDIS_PASSWORD',
    'JWT_SECRET',
    'JWT_REFRESH_SECRET',
    'JWT_EXPIRATION',
    'JWT_REFRESH_EXPIRATION',
    'CELERY_BROKER_URL',
    'EVENT_PUBLISHER_MODE',
    'EMAIL_BACKEND',
    'EMAIL_HOST_PASSWORD',
]

OBRIGATORIAS = ('DATABASE_URL', 'MONGO_URI', 'JWT_SECRET', 'JWT_REFRESH_SECRET')


def main():
    load_dotenv()

    definidas = {nome: os.environ[nome] for nome in VARIAVEIS if os.environ.get(nome)}
    mascaradas = mascarar_ambiente(definidas)

    print("\n" + "=" * 60)
    print("🔍 Help-Me - Variáveis de ambiente")
    print("=" * 60)
    for nome in VARIAVEIS:
        print(f"  {nome}: {mascaradas.get(nome, '(não definida)')}")
    print("=" * 60)

    problemas = [f"{nome} não definida" for nome in OBRIGATORIAS if nome not in definidas]
    if 'DATABASE_URL' in definidas and parse_database_url(definidas['DATABASE_URL']) is None:
        problemas.append("DATABASE_URL em formato inválido (SQLite será usado)")

    if problemas:
        print("\n⚠️  Problemas encontrados:")
        for problema in problemas:
            print(f"   - {problema}")
        sys.exit(1)

    print("\n✅ Ambiente OK!")


if __name__ == '__main__':
    main()

#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Verifica a conexão com o banco
3. Executa migrations
4. Cria dados de exemplo (opcional): admin, técnico, usuário e serviços

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
    python scripts/quick_setup.py --sqlite --with-sample-data
"""

import os
import sys
import argparse

# Raiz do projeto no path (imports "src.")
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SENHA_PADRAO = 'helpme12345'

USUARIOS_EXEMPLO = [
    {
        'nome': 'Ana', 'sobrenome': 'Administradora',
        'email': 'admin@helpme.local', 'regra': 'ADMIN',
    },
    {
        'nome': 'Tiago', 'sobrenome': 'Técnico',
        'email': 'tecnico@helpme.local', 'regra': 'TECNICO',
        'entrada': '08:00', 'saida': '17:00',
    },
    {
        'nome': 'Bruna', 'sobrenome': 'Usuária',
        'email': 'usuario@helpme.local', 'regra': 'USUARIO',
        'setor': 'FINANCEIRO', 'ramal': '2010',
    },
]

SERVICOS_EXEMPLO = [
    ('Impressoras', 'Instalação e manutenção de impressoras'),
    ('Rede', 'Conectividade, Wi-Fi e VPN'),
    ('E-mail', 'Contas, caixas compartilhadas e listas'),
    ('Hardware', 'Troca e reparo de equipamentos'),
    ('Sistemas', 'Acesso e erros nos sistemas internos'),
]


def setup_django(forcar_sqlite: bool = False):
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    if forcar_sqlite:
        # URL não-postgres cai no fallback SQLite do settings
        os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data():
    """Cria usuários e serviços de exemplo; ignora os que já existem."""
    from src.config.container import get_container
    from src.core.catalogo.dtos import CriarServicoInputDTO
    from src.core.identidade.dtos import CriarUsuarioInputDTO
    from src.core.shared.exceptions import ConflitoError

    container = get_container()

    print("👤 Criando usuários de exemplo...")
    for dados in USUARIOS_EXEMPLO:
        try:
            output = container.criar_usuario_service().execute(
                CriarUsuarioInputDTO(password=SENHA_PADRAO, **dados)
            )
            print(f"   ✓ {output.email} ({dados['regra']})")
        except ConflitoError:
            print(f"   - {dados['email']} já existe")

    print("🧰 Criando serviços de exemplo...")
    for nome, descricao in SERVICOS_EXEMPLO:
        try:
            container.criar_servico_service().execute(
                CriarServicoInputDTO(nome=nome, descricao=descricao)
            )
            print(f"   ✓ {nome}")
        except ConflitoError:
            print(f"   - {nome} já existe")

    print(f"✅ Dados de exemplo prontos! Senha padrão: {SENHA_PADRAO}")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except Exception as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    from src.config.ambiente import mascarar_database_url

    banco = (
        mascarar_database_url(settings.DATABASE_URL)
        if settings.DATABASE_URL
        else settings.DATABASES['default']['NAME']
    )

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database: {banco}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. python manage.py runserver")
    print("   2. Acesse: http://localhost:8000/api-docs/")
    print("   3. POST http://localhost:8000/auth/login")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar dados de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )
    parser.add_argument(
        '--sqlite',
        action='store_true',
        help='Ignorar DATABASE_URL e usar SQLite local'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Help-Me - Quick Setup")
    print("=" * 60 + "\n")

    setup_django(forcar_sqlite=args.sqlite)

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, rode com --sqlite")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()

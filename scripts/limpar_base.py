#!/usr/bin/env python
"""
Limpa todos os dados (relacional + histórico no MongoDB).

Somente para desenvolvimento. Pede confirmação, a menos que --sim
seja informado.

Uso:
    python scripts/limpar_base.py
    python scripts/limpar_base.py --sim
"""

import os
import sys
import argparse

# Raiz do projeto no path (imports "src.")
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def main():
    parser = argparse.ArgumentParser(description='Remove todos os dados da base')
    parser.add_argument('--sim', action='store_true', help='Não pedir confirmação')
    args = parser.parse_args()

    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')
    import django
    django.setup()

    from src.adapters.django_app.shared.manutencao import limpar_base

    if not args.sim:
        resposta = input("⚠️  Isso remove TODOS os dados. Continuar? [s/N] ")
        if resposta.strip().lower() not in ('s', 'sim'):
            print("Cancelado.")
            return

    print("\n🧹 Limpando base...")
    resultado = limpar_base()

    falhas = 0
    for etapa, info in resultado.items():
        if info['ok']:
            print(f"   ✓ {etapa}: {info['removidos']} removido(s)")
        else:
            falhas += 1
            print(f"   ✗ {etapa}: {info['erro']}")

    if falhas:
        print(f"\n⚠️  Limpeza concluída com {falhas} falha(s)")
        sys.exit(1)
    print("\n✅ Base limpa!")


if __name__ == '__main__':
    main()

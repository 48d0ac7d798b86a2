"""
Limpeza da base (ambientes de desenvolvimento e testes manuais).

Remove os dados entidade por entidade, das dependentes para as
referenciadas. Falha em uma etapa é logada e a limpeza segue para
a próxima; o resultado informa o que foi removido em cada etapa.

Uso:
    python scripts/limpar_base.py
"""

from typing import Callable, Dict, List, Tuple
import logging

from src.adapters.mongodb.historico import COLECAO_HISTORICO
from src.config.container import get_container

logger = logging.getLogger(__name__)


def _limpar_historico() -> int:
    colecao = get_container().mongo_database()[COLECAO_HISTORICO]
    return colecao.delete_many({}).deleted_count


def _limpar_model(caminho: str) -> Callable[[], int]:
    modulo, nome = caminho.rsplit(".", 1)

    def limpar() -> int:
        model = getattr(__import__(modulo, fromlist=[nome]), nome)
        removidos, _ = model.objects.all().delete()
        return removidos

    return limpar


ETAPAS: List[Tuple[str, Callable[[], int]]] = [
    ("historico", _limpar_historico),
    ("ordens_de_servico", _limpar_model("src.adapters.django_app.chamados.models.OrdemDeServicoModel")),
    ("chamados", _limpar_model("src.adapters.django_app.chamados.models.ChamadoModel")),
    ("servicos", _limpar_model("src.adapters.django_app.chamados.models.ServicoModel")),
    ("expedientes", _limpar_model("src.adapters.django_app.usuarios.models.ExpedienteModel")),
    ("usuarios", _limpar_model("src.adapters.django_app.usuarios.models.UsuarioModel")),
]


def limpar_base(etapas: List[Tuple[str, Callable[[], int]]] = None) -> Dict[str, Dict]:
    """
    Executa todas as etapas de limpeza.

    Returns:
        {"chamados": {"ok": True, "removidos": 12}, "usuarios": {"ok": False, "erro": "..."}}
    """
    resultado: Dict[str, Dict] = {}

    for nome, limpar in etapas or ETAPAS:
        try:
            removidos = limpar()
        except Exception as e:
            logger.error(f"Falha ao limpar {nome}: {e}", exc_info=True)
            resultado[nome] = {"ok": False, "erro": str(e)}
            continue

        logger.info(f"Limpeza de {nome}: {removidos} registro(s) removido(s)")
        resultado[nome] = {"ok": True, "removidos": removidos}

    return resultado

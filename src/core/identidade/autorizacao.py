"""
Regras de autorização por papel.

A view resolve o UsuarioAutenticado; estas funções decidem se ele
pode seguir. A mensagem de erro é sempre genérica.
"""

from typing import Iterable

from src.core.shared.exceptions import AcessoNegadoError

from .entities import Regra, UsuarioAutenticado


def exigir_regra(ator: UsuarioAutenticado, regras: Iterable[Regra]) -> None:
    """
    Raises:
        AcessoNegadoError: Se a regra do ator não estiver entre as permitidas
    """
    if ator is None or ator.regra not in tuple(regras):
        raise AcessoNegadoError()


def exigir_proprio_ou_admin(
    ator: UsuarioAutenticado,
    dono_id: str,
    mensagem: str = "Acesso negado.",
) -> None:
    """Permite ADMIN ou o próprio dono do recurso."""
    if ator.regra == Regra.ADMIN:
        return
    if ator.id != dono_id:
        raise AcessoNegadoError(mensagem)

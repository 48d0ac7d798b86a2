"""
Paginação compartilhada pelas listagens.

Todas as listagens da API recebem `page`/`limit` e devolvem o bloco
`pagination` no mesmo formato, por isso a regra fica no Core.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

from .exceptions import ValidationError

T = TypeVar("T")

LIMITE_MAXIMO = 100


@dataclass(frozen=True)
class Paginacao:
    """Parâmetros de paginação já validados."""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def de_parametros(
        cls,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        limite_padrao: int = 10,
    ) -> "Paginacao":
        """
        Converte query params em Paginacao.

        Valores ausentes usam o padrão; limit acima de 100 é truncado.

        Raises:
            ValidationError: Se page/limit não forem inteiros positivos
        """
        try:
            pagina = int(page) if page not in (None, "") else 1
        except (TypeError, ValueError):
            raise ValidationError("Parâmetro page inválido", field="page")

        try:
            limite = int(limit) if limit not in (None, "") else limite_padrao
        except (TypeError, ValueError):
            raise ValidationError("Parâmetro limit inválido", field="limit")

        if pagina < 1:
            raise ValidationError("Parâmetro page deve ser maior que zero", field="page")
        if limite < 1:
            raise ValidationError("Parâmetro limit deve ser maior que zero", field="limit")

        return cls(page=pagina, limit=min(limite, LIMITE_MAXIMO))


@dataclass
class Pagina(Generic[T]):
    """Resultado paginado."""

    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def meta(self) -> Dict[str, Any]:
        """Bloco `pagination` da resposta JSON."""
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }

    def map(self, funcao) -> "Pagina":
        return Pagina(
            items=[funcao(item) for item in self.items],
            total=self.total,
            page=self.page,
            limit=self.limit,
        )


def paginar_lista(items: List[T], paginacao: Paginacao) -> Pagina[T]:
    """Pagina uma lista já filtrada (usado pelos repositórios em memória)."""
    inicio = paginacao.offset
    return Pagina(
        items=items[inicio:inicio + paginacao.limit],
        total=len(items),
        page=paginacao.page,
        limit=paginacao.limit,
    )

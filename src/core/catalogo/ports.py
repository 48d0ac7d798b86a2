"""
Ports do Catálogo de Serviços.

- ServicoRepository: contrato de persistência
- InMemoryServicoRepository: implementação para testes
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from src.core.shared.paginacao import Pagina, Paginacao, paginar_lista

from .entities import ServicoEntity


@runtime_checkable
class ServicoRepository(Protocol):
    """
    Interface para persistência de serviços.

    Methods:
        save: Persiste (create ou update)
        get_by_id: Busca por ID (inclui excluídos)
        get_by_nome: Busca por nome exato (inclui excluídos)
        listar_por_nomes: Serviços disponíveis com os nomes informados
        listar: Paginado, com busca e filtro de inativos
    """

    def save(self, servico: ServicoEntity) -> None:
        ...

    def get_by_id(self, servico_id: str) -> Optional[ServicoEntity]:
        ...

    def get_by_nome(self, nome: str) -> Optional[ServicoEntity]:
        ...

    def listar_por_nomes(self, nomes: List[str]) -> List[ServicoEntity]:
        ...

    def listar(
        self,
        paginacao: Paginacao,
        busca: Optional[str] = None,
        incluir_inativos: bool = False,
    ) -> Pagina[ServicoEntity]:
        ...


class InMemoryServicoRepository:
    """Implementação em memória do ServicoRepository. Não usar em produção!"""

    def __init__(self):
        self._servicos: Dict[str, ServicoEntity] = {}

    def save(self, servico: ServicoEntity) -> None:
        self._servicos[servico.id] = servico

    def get_by_id(self, servico_id: str) -> Optional[ServicoEntity]:
        return self._servicos.get(servico_id)

    def get_by_nome(self, nome: str) -> Optional[ServicoEntity]:
        for servico in self._servicos.values():
            if servico.nome == nome:
                return servico
        return None

    def listar_por_nomes(self, nomes: List[str]) -> List[ServicoEntity]:
        return [
            s for s in self._servicos.values()
            if s.nome in nomes and s.disponivel
        ]

    def listar(
        self,
        paginacao: Paginacao,
        busca: Optional[str] = None,
        incluir_inativos: bool = False,
    ) -> Pagina[ServicoEntity]:
        servicos = [s for s in self._servicos.values() if s.deletado_em is None]
        if not incluir_inativos:
            servicos = [s for s in servicos if s.ativo]
        if busca:
            termo = busca.lower()
            servicos = [
                s for s in servicos
                if termo in s.nome.lower() or termo in (s.descricao or "").lower()
            ]
        servicos.sort(key=lambda s: s.nome)
        return paginar_lista(servicos, paginacao)

    def clear(self) -> None:
        self._servicos.clear()

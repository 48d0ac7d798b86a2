"""
Ports (Interfaces) do Domínio de Chamados.

Contratos implementados pelos adapters:
- ChamadoRepository: Chamados e Ordens de Serviço (Django ORM)
- HistoricoChamadoRepository: Histórico append-only (MongoDB)

Também traz implementações em memória usadas nos testes do Core.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from src.core.shared.paginacao import Pagina, Paginacao, paginar_lista

from .dtos import FiltroChamadosDTO
from .entities import ChamadoEntity, ChamadoStatus, HistoricoChamado


@runtime_checkable
class ChamadoRepository(Protocol):
    """
    Interface para persistência de chamados.

    Methods:
        save: Persiste chamado e suas ordens de serviço
        get_by_id: Busca por ID (inclui excluídos)
        ultima_os: Maior OS emitida (para numeração sequencial)
        listar: Consulta paginada; nunca retorna excluídos
        contar_por_status: {status: quantidade}, sem excluídos
        contar_sem_tecnico: Chamados na fila sem técnico
    """

    def save(self, chamado: ChamadoEntity) -> None:
        ...

    def get_by_id(self, chamado_id: str) -> Optional[ChamadoEntity]:
        ...

    def ultima_os(self) -> Optional[str]:
        ...

    def listar(
        self,
        filtro: FiltroChamadosDTO,
        paginacao: Paginacao,
    ) -> Pagina[ChamadoEntity]:
        ...

    def contar_por_status(self) -> Dict[str, int]:
        ...

    def contar_sem_tecnico(self) -> int:
        ...


@runtime_checkable
class HistoricoChamadoRepository(Protocol):
    """
    Histórico de transições.

    Append-only: não existe operação de atualização ou remoção.
    listar_por_chamado retorna em ordem crescente de data_hora.
    """

    def registrar(self, entrada: HistoricoChamado) -> None:
        ...

    def listar_por_chamado(self, chamado_id: str) -> List[HistoricoChamado]:
        ...


class InMemoryChamadoRepository:
    """
    Implementação em memória do ChamadoRepository.

    O filtro por setor precisa do repositório de usuários, pois o
    setor pertence ao solicitante.

    Não usar em produção!
    """

    def __init__(self, usuario_repo=None):
        self._chamados: Dict[str, ChamadoEntity] = {}
        self._usuario_repo = usuario_repo

    def save(self, chamado: ChamadoEntity) -> None:
        self._chamados[chamado.id] = chamado

    def get_by_id(self, chamado_id: str) -> Optional[ChamadoEntity]:
        return self._chamados.get(chamado_id)

    def ultima_os(self) -> Optional[str]:
        if not self._chamados:
            return None
        return max((c.os for c in self._chamados.values()), key=lambda os: (len(os), os))

    def listar(
        self,
        filtro: FiltroChamadosDTO,
        paginacao: Paginacao,
    ) -> Pagina[ChamadoEntity]:
        chamados = [c for c in self._chamados.values() if self._atende(c, filtro)]
        chamados.sort(key=lambda c: c.gerado_em, reverse=filtro.mais_recentes_primeiro)
        if filtro.reabertos_primeiro:
            # sort estável: mantém a ordem por data dentro de cada grupo
            chamados.sort(key=lambda c: c.status != ChamadoStatus.REABERTO)
        return paginar_lista(chamados, paginacao)

    def contar_por_status(self) -> Dict[str, int]:
        contagem = {status.value: 0 for status in ChamadoStatus}
        for chamado in self._chamados.values():
            if not chamado.esta_excluido:
                contagem[chamado.status.value] += 1
        return contagem

    def contar_sem_tecnico(self) -> int:
        return sum(
            1 for c in self._chamados.values()
            if not c.esta_excluido
            and c.tecnico_id is None
            and c.status in ChamadoStatus.na_fila()
        )

    def _atende(self, chamado: ChamadoEntity, filtro: FiltroChamadosDTO) -> bool:
        if chamado.esta_excluido:
            return False
        if filtro.usuario_id and chamado.usuario_id != filtro.usuario_id:
            return False
        if filtro.tecnico_id and chamado.tecnico_id != filtro.tecnico_id:
            return False
        if filtro.status and chamado.status not in filtro.status:
            return False
        if filtro.sem_tecnico is not None and (chamado.tecnico_id is None) != filtro.sem_tecnico:
            return False
        if filtro.data_inicio and chamado.gerado_em.date() < filtro.data_inicio:
            return False
        if filtro.data_fim and chamado.gerado_em.date() > filtro.data_fim:
            return False
        if filtro.busca:
            termo = filtro.busca.lower()
            if termo not in chamado.os.lower() and termo not in chamado.descricao.lower():
                return False
        if filtro.setor:
            return self._setor_do_solicitante(chamado) == filtro.setor
        return True

    def _setor_do_solicitante(self, chamado: ChamadoEntity) -> Optional[str]:
        if self._usuario_repo is None:
            return None
        usuario = self._usuario_repo.get_by_id(chamado.usuario_id)
        if usuario is None or usuario.setor is None:
            return None
        return usuario.setor.value

    def clear(self) -> None:
        self._chamados.clear()


class InMemoryHistoricoChamadoRepository:
    def __init__(self):
        self._entradas: List[HistoricoChamado] = []

    def registrar(self, entrada: HistoricoChamado) -> None:
        self._entradas.append(entrada)

    def listar_por_chamado(self, chamado_id: str) -> List[HistoricoChamado]:
        entradas = [e for e in self._entradas if e.chamado_id == chamado_id]
        return sorted(entradas, key=lambda e: e.data_hora)

    def clear(self) -> None:
        self._entradas.clear()

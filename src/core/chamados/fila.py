"""
Fila de Chamados.

Cada consulta devolve o subconjunto de chamados que a regra do
chamador pode ver:

- meus_chamados        USUARIO          chamados que abriu (status opcional)
- chamados_atribuidos  TECNICO          EM_ATENDIMENTO/REABERTO atribuídos a ele
- todos_chamados       ADMIN            filtrados por status (obrigatório)
- chamados_abertos     ADMIN, TECNICO   ABERTO/REABERTO
- estatisticas         ADMIN            contadores por status

Regras fora do conjunto permitido recebem AcessoNegadoError.
"""

from datetime import date, datetime
from typing import Optional, Tuple

from src.core.shared.exceptions import ValidationError
from src.core.shared.paginacao import Pagina, Paginacao
from src.core.identidade.autorizacao import exigir_regra
from src.core.identidade.entities import Regra, Setor, UsuarioAutenticado

from .dtos import ChamadoOutputDTO, EstatisticasOutputDTO, FiltroChamadosDTO
from .entities import ChamadoStatus
from .ports import ChamadoRepository

STATUS_VALIDOS = ", ".join(s.value for s in ChamadoStatus)


def _parse_status(valor: str) -> ChamadoStatus:
    try:
        return ChamadoStatus.from_string(valor)
    except ValueError:
        raise ValidationError(
            f"Status inválido: {valor}. Use um dos seguintes: {STATUS_VALIDOS}",
            field="status",
        )


def _status_se_valido(valor: Optional[str]) -> tuple:
    """Filtro opcional: status desconhecido é ignorado (lista todos)."""
    if not valor:
        return ()
    try:
        return (ChamadoStatus.from_string(valor),)
    except ValueError:
        return ()


def _ordenacao(valor: Optional[str], reabertos: str) -> Tuple[bool, bool]:
    """
    Traduz o parâmetro de ordenação em (mais_recentes_primeiro, reabertos_primeiro).

    `antigos` ordena por data crescente; o valor `reabertos` coloca os
    REABERTO no topo, mais recentes primeiro. Qualquer outro valor usa
    o padrão: mais recentes primeiro.
    """
    valor = (valor or "").strip().lower()
    if valor == "antigos":
        return False, False
    return True, valor == reabertos


def _parse_setor(valor: Optional[str]) -> Optional[str]:
    if not valor:
        return None
    try:
        return Setor.from_string(valor).value
    except ValueError as e:
        raise ValidationError(str(e), field="setor")


def _parse_data(valor, campo: str) -> Optional[date]:
    if valor in (None, ""):
        return None
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    try:
        return date.fromisoformat(str(valor)[:10])
    except ValueError:
        raise ValidationError(f"Data inválida em {campo}, use AAAA-MM-DD", field=campo)


class FilaDeChamadosService:
    """
    Consultas das filas de chamados (somente leitura, sem UoW).

    Example:
        fila = FilaDeChamadosService(chamado_repo)
        pagina = fila.todos_chamados(admin, Paginacao(), status="ABERTO")
        pagina.meta()  # {"page": 1, "limit": 10, ...}
    """

    def __init__(self, chamado_repo: ChamadoRepository):
        self.chamado_repo = chamado_repo

    def meus_chamados(
        self,
        ator: UsuarioAutenticado,
        paginacao: Paginacao,
        status: Optional[str] = None,
    ) -> Pagina[ChamadoOutputDTO]:
        exigir_regra(ator, [Regra.USUARIO])

        filtro = FiltroChamadosDTO(
            usuario_id=ator.id,
            status=_status_se_valido(status),
        )
        return self._listar(filtro, paginacao)

    def chamados_atribuidos(
        self,
        ator: UsuarioAutenticado,
        paginacao: Paginacao,
        prioridade: Optional[str] = None,
    ) -> Pagina[ChamadoOutputDTO]:
        """`prioridade`: recentes (padrão), antigos ou reabertos."""
        exigir_regra(ator, [Regra.TECNICO])

        recentes_primeiro, reabertos_primeiro = _ordenacao(prioridade, "reabertos")
        filtro = FiltroChamadosDTO(
            tecnico_id=ator.id,
            status=(ChamadoStatus.EM_ATENDIMENTO, ChamadoStatus.REABERTO),
            mais_recentes_primeiro=recentes_primeiro,
            reabertos_primeiro=reabertos_primeiro,
        )
        return self._listar(filtro, paginacao)

    def todos_chamados(
        self,
        ator: UsuarioAutenticado,
        paginacao: Paginacao,
        status: Optional[str] = None,
        tecnico_id: Optional[str] = None,
        usuario_id: Optional[str] = None,
        setor: Optional[str] = None,
        data_inicio=None,
        data_fim=None,
        busca: Optional[str] = None,
    ) -> Pagina[ChamadoOutputDTO]:
        """
        Raises:
            AcessoNegadoError: Se ator não é ADMIN
            ValidationError: Se status ausente ou inválido
        """
        exigir_regra(ator, [Regra.ADMIN])

        if not status or not status.strip():
            raise ValidationError(
                f"O parâmetro status é obrigatório. Use um dos seguintes: {STATUS_VALIDOS}",
                field="status",
            )

        inicio = _parse_data(data_inicio, "dataInicio")
        fim = _parse_data(data_fim, "dataFim")
        if inicio and fim and inicio > fim:
            raise ValidationError(
                "dataInicio deve ser anterior ou igual a dataFim",
                field="dataInicio",
            )

        filtro = FiltroChamadosDTO(
            status=(_parse_status(status),),
            tecnico_id=tecnico_id or None,
            usuario_id=usuario_id or None,
            setor=_parse_setor(setor),
            data_inicio=inicio,
            data_fim=fim,
            busca=(busca or "").strip() or None,
        )
        return self._listar(filtro, paginacao)

    def chamados_abertos(
        self,
        ator: UsuarioAutenticado,
        paginacao: Paginacao,
        setor: Optional[str] = None,
        ordenacao: Optional[str] = None,
    ) -> Pagina[ChamadoOutputDTO]:
        """Fila de espera. `ordenacao`: recentes (padrão), antigos ou prioridade."""
        exigir_regra(ator, [Regra.ADMIN, Regra.TECNICO])

        recentes_primeiro, reabertos_primeiro = _ordenacao(ordenacao, "prioridade")
        filtro = FiltroChamadosDTO(
            status=ChamadoStatus.na_fila(),
            setor=_parse_setor(setor),
            mais_recentes_primeiro=recentes_primeiro,
            reabertos_primeiro=reabertos_primeiro,
        )
        return self._listar(filtro, paginacao)

    def estatisticas(self, ator: UsuarioAutenticado) -> EstatisticasOutputDTO:
        exigir_regra(ator, [Regra.ADMIN])

        por_status = self.chamado_repo.contar_por_status()
        return EstatisticasOutputDTO(
            total=sum(por_status.values()),
            por_status=por_status,
            pendentes=(
                por_status.get(ChamadoStatus.ABERTO.value, 0)
                + por_status.get(ChamadoStatus.REABERTO.value, 0)
            ),
            sem_tecnico=self.chamado_repo.contar_sem_tecnico(),
        )

    def _listar(self, filtro: FiltroChamadosDTO, paginacao: Paginacao) -> Pagina[ChamadoOutputDTO]:
        pagina = self.chamado_repo.listar(filtro, paginacao)
        return pagina.map(ChamadoOutputDTO.from_entity)

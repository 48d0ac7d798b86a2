"""
Use Cases (Application Services) do Domínio de Chamados.

Use Cases implementados:
- AbrirChamadoService: Usuário abre chamado (OS sequencial + ordens de serviço)
- AtribuirChamadoService: Técnico assume (ou admin atribui) o chamado
- EncerrarChamadoService: Encerra chamado em atendimento
- CancelarChamadoService: Cancela chamado (solicitante ou admin)
- AlterarStatusChamadoService: Endpoint único de status, delega aos acima
- ReabrirChamadoService: Reabre até 48h após o encerramento
- ExcluirChamadoService: Exclusão lógica (admin)
- ObterChamadoService / ListarHistoricoChamadoService: Leitura

Toda transição grava exatamente uma entrada de histórico,
dentro do mesmo bloco transacional da alteração do chamado.
"""

import logging
from typing import Callable, List, Optional

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    AcessoNegadoError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.shared.tempo import agora
from src.core.identidade.autorizacao import exigir_proprio_ou_admin, exigir_regra
from src.core.identidade.entities import Regra, UsuarioAutenticado
from src.core.identidade.ports import ExpedienteRepository, UsuarioRepository
from src.core.catalogo.ports import ServicoRepository

from .entities import (
    ChamadoEntity,
    ChamadoStatus,
    HistoricoChamado,
    TipoHistorico,
    proxima_os,
)
from .dtos import AbrirChamadoInputDTO, AlterarStatusInputDTO, ChamadoOutputDTO
from .events import (
    ChamadoAbertoEvent,
    ChamadoAtribuidoEvent,
    ChamadoCanceladoEvent,
    ChamadoEncerradoEvent,
    ChamadoReabertoEvent,
)
from .ports import ChamadoRepository, HistoricoChamadoRepository

logger = logging.getLogger(__name__)

DESCRICAO_ASSUMIDO = "Chamado assumido pelo técnico"
DESCRICAO_ENCERRADO = "Chamado encerrado"
DESCRICAO_CANCELADO = "Chamado cancelado"
DESCRICAO_REABERTO = "Chamado reaberto pelo usuário dentro do prazo"

STATUS_ALTERAVEIS = (
    ChamadoStatus.EM_ATENDIMENTO,
    ChamadoStatus.ENCERRADO,
    ChamadoStatus.CANCELADO,
)


def _buscar_chamado(chamado_repo: ChamadoRepository, chamado_id: str) -> ChamadoEntity:
    chamado = chamado_repo.get_by_id(chamado_id)
    if not chamado or chamado.esta_excluido:
        raise EntityNotFoundError(
            f"Chamado {chamado_id} não encontrado",
            entity_type="Chamado",
            entity_id=chamado_id,
        )
    return chamado


def _exigir_acesso_ao_chamado(ator: UsuarioAutenticado, chamado: ChamadoEntity) -> None:
    """Solicitante, técnico atribuído ou admin."""
    if ator.is_admin or chamado.envolve(ator.id):
        return
    raise AcessoNegadoError()


def normalizar_servicos(servico) -> List[str]:
    """
    Aceita nome único ou lista de nomes; remove vazios e duplicados
    preservando a ordem informada.
    """
    if servico is None:
        return []
    if isinstance(servico, str):
        servico = [servico]
    nomes: List[str] = []
    for nome in servico:
        if not isinstance(nome, str):
            continue
        nome = nome.strip()
        if nome and nome not in nomes:
            nomes.append(nome)
    return nomes


# =============================================================================
# Abertura
# =============================================================================

class AbrirChamadoService:
    """
    Use Case: Abrir chamado.

    Fluxo:
    1. Validar serviços (existentes e ativos)
    2. Calcular próxima OS (última + 1)
    3. Criar entidade e persistir (com ordens de serviço)
    4. Gravar histórico ABERTURA (de=None, para=ABERTO)
    5. Disparar ChamadoAbertoEvent (publicado após commit)

    Example:
        service = AbrirChamadoService(chamado_repo, servico_repo, historico_repo, uow)
        output = service.execute(
            AbrirChamadoInputDTO(descricao="Impressora não liga", servicos=("Impressoras",)),
            ator,
        )
        print(output.os)  # INC0001
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        servico_repo: ServicoRepository,
        historico_repo: HistoricoChamadoRepository,
        uow: UnitOfWork,
    ):
        self.chamado_repo = chamado_repo
        self.servico_repo = servico_repo
        self.historico_repo = historico_repo
        self.uow = uow

    def execute(
        self,
        input_dto: AbrirChamadoInputDTO,
        ator: UsuarioAutenticado,
    ) -> ChamadoOutputDTO:
        """
        Raises:
            AcessoNegadoError: Se ator não é USUARIO
            ValidationError: Se descrição ou serviços ausentes
            EntityNotFoundError: Se algum serviço não existe ou está inativo
        """
        exigir_regra(ator, [Regra.USUARIO])

        nomes = normalizar_servicos(list(input_dto.servicos))
        if not nomes:
            raise ValidationError(
                "É obrigatório informar pelo menos um serviço válido (servico) para abrir o chamado",
                field="servico",
            )

        with self.uow:
            encontrados = {s.nome for s in self.servico_repo.listar_por_nomes(nomes)}
            faltantes = [nome for nome in nomes if nome not in encontrados]
            if faltantes:
                raise EntityNotFoundError(
                    "Os seguintes serviços não foram encontrados ou estão inativos: "
                    + ", ".join(faltantes),
                    entity_type="Servico",
                )

            chamado = ChamadoEntity.criar(
                os=proxima_os(self.chamado_repo.ultima_os()),
                descricao=input_dto.descricao,
                usuario_id=ator.id,
                servicos=nomes,
            )
            self.chamado_repo.save(chamado)

            self.historico_repo.registrar(
                HistoricoChamado.registrar(
                    chamado,
                    TipoHistorico.ABERTURA,
                    de=None,
                    descricao=chamado.descricao,
                    autor=ator,
                )
            )

            self.uow.publish_event(
                ChamadoAbertoEvent(
                    aggregate_id=chamado.id,
                    os=chamado.os,
                    usuario_id=ator.id,
                    usuario_email=ator.email,
                    servicos=list(chamado.servicos),
                )
            )

        logger.info(f"Chamado aberto: {chamado.os} por {ator.id}")
        return ChamadoOutputDTO.from_entity(chamado)


# =============================================================================
# Atendimento
# =============================================================================

class AtribuirChamadoService:
    """
    Use Case: Chamado passa a EM_ATENDIMENTO com um técnico.

    - TECNICO assume para si, somente dentro do expediente ativo
    - ADMIN informa tecnico_id de um técnico ativo

    Args (construtor):
        relogio: Callable que devolve o horário local atual; o
            container injeta django.utils.timezone.localtime
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        usuario_repo: UsuarioRepository,
        expediente_repo: ExpedienteRepository,
        historico_repo: HistoricoChamadoRepository,
        uow: UnitOfWork,
        relogio: Callable = agora,
    ):
        self.chamado_repo = chamado_repo
        self.usuario_repo = usuario_repo
        self.expediente_repo = expediente_repo
        self.historico_repo = historico_repo
        self.uow = uow
        self.relogio = relogio

    def execute(
        self,
        chamado_id: str,
        ator: UsuarioAutenticado,
        tecnico_id: Optional[str] = None,
        descricao: Optional[str] = None,
    ) -> ChamadoOutputDTO:
        exigir_regra(ator, [Regra.ADMIN, Regra.TECNICO])

        with self.uow:
            chamado = _buscar_chamado(self.chamado_repo, chamado_id)

            if ator.regra == Regra.TECNICO:
                if chamado.status == ChamadoStatus.ENCERRADO:
                    raise AcessoNegadoError("Técnicos não podem alterar chamados encerrados.")
                self._verificar_expediente(ator.id)
                tecnico_id = ator.id
            else:
                tecnico_id = self._validar_tecnico(tecnico_id)

            anterior = chamado.status
            chamado.atribuir_a(tecnico_id)
            self.chamado_repo.save(chamado)

            self.historico_repo.registrar(
                HistoricoChamado.registrar(
                    chamado,
                    TipoHistorico.STATUS,
                    de=anterior,
                    descricao=descricao or DESCRICAO_ASSUMIDO,
                    autor=ator,
                )
            )

            self.uow.publish_event(
                ChamadoAtribuidoEvent(
                    aggregate_id=chamado.id,
                    os=chamado.os,
                    tecnico_id=tecnico_id,
                    atribuido_por_id=ator.id,
                )
            )

        logger.info(f"Chamado {chamado.os} atribuído ao técnico {tecnico_id}")
        return ChamadoOutputDTO.from_entity(chamado)

    def _verificar_expediente(self, tecnico_id: str) -> None:
        expediente = self.expediente_repo.get_ativo_por_usuario(tecnico_id)
        if expediente is None:
            raise BusinessRuleViolationError(
                "Sem horário de expediente cadastrado",
                rule="sem_expediente",
            )
        if not expediente.esta_no_horario(self.relogio()):
            raise BusinessRuleViolationError(
                "Fora do horário de expediente: o chamado só pode ser "
                "assumido dentro do seu horário de trabalho",
                rule="fora_do_expediente",
            )

    def _validar_tecnico(self, tecnico_id: Optional[str]) -> str:
        if not tecnico_id:
            raise ValidationError(
                "Informe o técnico (tecnicoId) que assumirá o chamado",
                field="tecnicoId",
            )
        tecnico = self.usuario_repo.get_by_id(tecnico_id)
        if not tecnico or tecnico.regra != Regra.TECNICO or not tecnico.pode_autenticar:
            raise EntityNotFoundError(
                f"Técnico {tecnico_id} não encontrado",
                entity_type="Tecnico",
                entity_id=tecnico_id,
            )
        return tecnico.id


class EncerrarChamadoService:
    """
    Use Case: Encerrar chamado em atendimento.

    TECNICO só encerra chamados atribuídos a ele.
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        usuario_repo: UsuarioRepository,
        historico_repo: HistoricoChamadoRepository,
        uow: UnitOfWork,
    ):
        self.chamado_repo = chamado_repo
        self.usuario_repo = usuario_repo
        self.historico_repo = historico_repo
        self.uow = uow

    def execute(
        self,
        chamado_id: str,
        descricao_encerramento: Optional[str],
        ator: UsuarioAutenticado,
        descricao: Optional[str] = None,
    ) -> ChamadoOutputDTO:
        exigir_regra(ator, [Regra.ADMIN, Regra.TECNICO])

        with self.uow:
            chamado = _buscar_chamado(self.chamado_repo, chamado_id)

            if ator.regra == Regra.TECNICO:
                if chamado.status == ChamadoStatus.ENCERRADO:
                    raise AcessoNegadoError("Técnicos não podem alterar chamados encerrados.")
                if chamado.tecnico_id != ator.id:
                    raise AcessoNegadoError("Você só pode encerrar chamados atribuídos a você.")

            anterior = chamado.status
            chamado.encerrar(descricao_encerramento)
            self.chamado_repo.save(chamado)

            self.historico_repo.registrar(
                HistoricoChamado.registrar(
                    chamado,
                    TipoHistorico.STATUS,
                    de=anterior,
                    descricao=descricao or DESCRICAO_ENCERRADO,
                    autor=ator,
                )
            )

            solicitante = self.usuario_repo.get_by_id(chamado.usuario_id)
            self.uow.publish_event(
                ChamadoEncerradoEvent(
                    aggregate_id=chamado.id,
                    os=chamado.os,
                    encerrado_por_id=ator.id,
                    usuario_email=solicitante.email if solicitante else "",
                    descricao_encerramento=chamado.descricao_encerramento,
                )
            )

        logger.info(f"Chamado {chamado.os} encerrado por {ator.id}")
        return ChamadoOutputDTO.from_entity(chamado)


class CancelarChamadoService:
    """
    Use Case: Cancelar chamado (estado terminal).

    Permitido ao solicitante (USUARIO dono) e ao ADMIN.
    A justificativa fica em descricao_encerramento.
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        historico_repo: HistoricoChamadoRepository,
        uow: UnitOfWork,
    ):
        self.chamado_repo = chamado_repo
        self.historico_repo = historico_repo
        self.uow = uow

    def execute(
        self,
        chamado_id: str,
        justificativa: Optional[str],
        ator: UsuarioAutenticado,
        descricao: Optional[str] = None,
    ) -> ChamadoOutputDTO:
        exigir_regra(ator, [Regra.ADMIN, Regra.USUARIO])

        with self.uow:
            chamado = _buscar_chamado(self.chamado_repo, chamado_id)

            exigir_proprio_ou_admin(
                ator, chamado.usuario_id, "Você só pode cancelar chamados criados por você."
            )

            anterior = chamado.status
            chamado.cancelar(justificativa)
            self.chamado_repo.save(chamado)

            self.historico_repo.registrar(
                HistoricoChamado.registrar(
                    chamado,
                    TipoHistorico.CANCELAMENTO,
                    de=anterior,
                    descricao=descricao or DESCRICAO_CANCELADO,
                    autor=ator,
                )
            )

            self.uow.publish_event(
                ChamadoCanceladoEvent(
                    aggregate_id=chamado.id,
                    os=chamado.os,
                    cancelado_por_id=ator.id,
                    justificativa=chamado.descricao_encerramento,
                )
            )

        logger.info(f"Chamado {chamado.os} cancelado por {ator.id}")
        return ChamadoOutputDTO.from_entity(chamado)


class AlterarStatusChamadoService:
    """
    Use Case: PATCH /chamado/<id>/status.

    Valida o status pedido e delega:
    - EM_ATENDIMENTO -> AtribuirChamadoService
    - ENCERRADO      -> EncerrarChamadoService
    - CANCELADO      -> CancelarChamadoService (somente ADMIN nesta rota)
    """

    def __init__(
        self,
        atribuir: AtribuirChamadoService,
        encerrar: EncerrarChamadoService,
        cancelar: CancelarChamadoService,
    ):
        self.atribuir = atribuir
        self.encerrar = encerrar
        self.cancelar = cancelar

    def execute(
        self,
        input_dto: AlterarStatusInputDTO,
        ator: UsuarioAutenticado,
    ) -> ChamadoOutputDTO:
        exigir_regra(ator, [Regra.ADMIN, Regra.TECNICO])
        status = self._parse_status(input_dto.status)

        if status == ChamadoStatus.EM_ATENDIMENTO:
            return self.atribuir.execute(
                input_dto.chamado_id,
                ator,
                tecnico_id=input_dto.tecnico_id,
                descricao=input_dto.atualizacao_descricao,
            )

        if status == ChamadoStatus.ENCERRADO:
            return self.encerrar.execute(
                input_dto.chamado_id,
                input_dto.descricao_encerramento,
                ator,
                descricao=input_dto.atualizacao_descricao,
            )

        if ator.regra == Regra.TECNICO:
            raise AcessoNegadoError("Técnicos não podem cancelar chamados.")
        return self.cancelar.execute(
            input_dto.chamado_id,
            input_dto.descricao_encerramento,
            ator,
            descricao=input_dto.atualizacao_descricao,
        )

    @staticmethod
    def _parse_status(valor: Optional[str]) -> ChamadoStatus:
        permitidos = ", ".join(s.value for s in STATUS_ALTERAVEIS)
        if not valor:
            raise ValidationError(
                f"O campo status é obrigatório. Use um dos seguintes: {permitidos}",
                field="status",
            )
        try:
            status = ChamadoStatus.from_string(valor)
        except ValueError:
            status = None
        if status not in STATUS_ALTERAVEIS:
            raise ValidationError(
                f"Status inválido. Use um dos seguintes: {permitidos}",
                field="status",
            )
        return status


# =============================================================================
# Reabertura / Exclusão
# =============================================================================

class ReabrirChamadoService:
    """
    Use Case: Reabrir chamado encerrado.

    Regras:
    - Solicitante ou ADMIN
    - Até 48 horas após encerrado_em
    - Mantém o técnico; limpa dados de encerramento
    """

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        historico_repo: HistoricoChamadoRepository,
        uow: UnitOfWork,
    ):
        self.chamado_repo = chamado_repo
        self.historico_repo = historico_repo
        self.uow = uow

    def execute(
        self,
        chamado_id: str,
        ator: UsuarioAutenticado,
        descricao: Optional[str] = None,
    ) -> ChamadoOutputDTO:
        exigir_regra(ator, [Regra.ADMIN, Regra.USUARIO])

        with self.uow:
            chamado = _buscar_chamado(self.chamado_repo, chamado_id)

            exigir_proprio_ou_admin(
                ator, chamado.usuario_id, "Você só pode reabrir chamados criados por você."
            )

            anterior = chamado.status
            chamado.reabrir(agora())
            self.chamado_repo.save(chamado)

            self.historico_repo.registrar(
                HistoricoChamado.registrar(
                    chamado,
                    TipoHistorico.REABERTURA,
                    de=anterior,
                    descricao=descricao or DESCRICAO_REABERTO,
                    autor=ator,
                )
            )

            self.uow.publish_event(
                ChamadoReabertoEvent(
                    aggregate_id=chamado.id,
                    os=chamado.os,
                    reaberto_por_id=ator.id,
                    tecnico_id=chamado.tecnico_id,
                )
            )

        logger.info(f"Chamado {chamado.os} reaberto por {ator.id}")
        return ChamadoOutputDTO.from_entity(chamado)


class ExcluirChamadoService:
    def __init__(self, chamado_repo: ChamadoRepository, uow: UnitOfWork):
        self.chamado_repo = chamado_repo
        self.uow = uow

    def execute(self, chamado_id: str, ator: UsuarioAutenticado) -> None:
        exigir_regra(ator, [Regra.ADMIN])

        with self.uow:
            chamado = _buscar_chamado(self.chamado_repo, chamado_id)
            chamado.excluir()
            self.chamado_repo.save(chamado)

        logger.info(f"Chamado {chamado.os} excluído por {ator.id}")


# =============================================================================
# Leitura
# =============================================================================

class ObterChamadoService:
    def __init__(self, chamado_repo: ChamadoRepository):
        self.chamado_repo = chamado_repo

    def execute(self, chamado_id: str, ator: UsuarioAutenticado) -> ChamadoOutputDTO:
        chamado = _buscar_chamado(self.chamado_repo, chamado_id)
        _exigir_acesso_ao_chamado(ator, chamado)
        return ChamadoOutputDTO.from_entity(chamado)


class ListarHistoricoChamadoService:
    """Histórico em ordem crescente de data_hora."""

    def __init__(
        self,
        chamado_repo: ChamadoRepository,
        historico_repo: HistoricoChamadoRepository,
    ):
        self.chamado_repo = chamado_repo
        self.historico_repo = historico_repo

    def execute(self, chamado_id: str, ator: UsuarioAutenticado) -> List[HistoricoChamado]:
        chamado = _buscar_chamado(self.chamado_repo, chamado_id)
        _exigir_acesso_ao_chamado(ator, chamado)
        return self.historico_repo.listar_por_chamado(chamado.id)

"""
Testes Unitários para Use Cases do Domínio de Chamados.

Estratégia de Teste:
- Repositórios em memória (fakes) para isolamento
- FakeUnitOfWork para verificar commit/rollback e eventos
- Relógio injetado para a janela de expediente

Coverage:
- AbrirChamadoService
- AtribuirChamadoService / EncerrarChamadoService / CancelarChamadoService
- AlterarStatusChamadoService
- ReabrirChamadoService / ExcluirChamadoService
- ObterChamadoService / ListarHistoricoChamadoService
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from src.core.chamados.dtos import AbrirChamadoInputDTO, AlterarStatusInputDTO
from src.core.chamados.entities import ChamadoStatus, TipoHistorico
from src.core.chamados.events import (
    ChamadoAbertoEvent,
    ChamadoAtribuidoEvent,
    ChamadoEncerradoEvent,
    ChamadoReabertoEvent,
)
from src.core.chamados.use_cases import (
    AbrirChamadoService,
    AlterarStatusChamadoService,
    AtribuirChamadoService,
    CancelarChamadoService,
    EncerrarChamadoService,
    ExcluirChamadoService,
    ListarHistoricoChamadoService,
    ObterChamadoService,
    ReabrirChamadoService,
    normalizar_servicos,
)
from src.core.identidade.entities import Regra, UsuarioAutenticado
from src.core.shared.exceptions import (
    AcessoNegadoError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def abrir(chamado_repo, servico_repo, historico_repo, uow):
    return AbrirChamadoService(chamado_repo, servico_repo, historico_repo, uow)


@pytest.fixture
def atribuir(chamado_repo, usuario_repo, expediente_repo, historico_repo, uow, dez_da_manha):
    return AtribuirChamadoService(
        chamado_repo, usuario_repo, expediente_repo, historico_repo, uow, relogio=dez_da_manha
    )


@pytest.fixture
def encerrar(chamado_repo, usuario_repo, historico_repo, uow):
    return EncerrarChamadoService(chamado_repo, usuario_repo, historico_repo, uow)


@pytest.fixture
def cancelar(chamado_repo, historico_repo, uow):
    return CancelarChamadoService(chamado_repo, historico_repo, uow)


@pytest.fixture
def alterar_status(atribuir, encerrar, cancelar):
    return AlterarStatusChamadoService(atribuir, encerrar, cancelar)


@pytest.fixture
def reabrir(chamado_repo, historico_repo, uow):
    return ReabrirChamadoService(chamado_repo, historico_repo, uow)


@pytest.fixture
def chamado_aberto(abrir, ator_usuario):
    return abrir.execute(
        AbrirChamadoInputDTO(
            descricao="Impressora do financeiro não imprime",
            servicos=("Impressoras",),
        ),
        ator_usuario,
    )


@pytest.fixture
def chamado_em_atendimento(chamado_aberto, atribuir, ator_tecnico):
    return atribuir.execute(chamado_aberto.id, ator_tecnico)


@pytest.fixture
def chamado_encerrado(chamado_em_atendimento, encerrar, ator_tecnico):
    return encerrar.execute(chamado_em_atendimento.id, "Toner substituído", ator_tecnico)


# =============================================================================
# Abertura
# =============================================================================

class TestAbrirChamadoService:

    def test_abrir_chamado_sucesso(self, chamado_aberto, ator_usuario, historico_repo, uow):
        assert chamado_aberto.os == "INC0001"
        assert chamado_aberto.status == "ABERTO"
        assert chamado_aberto.usuario_id == ator_usuario.id
        assert chamado_aberto.servicos == ["Impressoras"]

        historico = historico_repo.listar_por_chamado(chamado_aberto.id)
        assert len(historico) == 1
        assert historico[0].tipo == TipoHistorico.ABERTURA
        assert historico[0].de is None
        assert historico[0].para == "ABERTO"

        assert uow.commits == 1
        assert isinstance(uow.published[0], ChamadoAbertoEvent)

    def test_os_sequencial(self, abrir, chamado_aberto, ator_usuario):
        segundo = abrir.execute(
            AbrirChamadoInputDTO(descricao="Sem acesso à rede Wi-Fi", servicos=("Rede",)),
            ator_usuario,
        )

        assert segundo.os == "INC0002"

    def test_varios_servicos_sem_duplicados(self, abrir, ator_usuario):
        output = abrir.execute(
            AbrirChamadoInputDTO(
                descricao="Sem rede e sem e-mail desde cedo",
                servicos=("Rede", "E-mail", "Rede", " "),
            ),
            ator_usuario,
        )

        assert output.servicos == ["Rede", "E-mail"]

    def test_servico_inexistente_erro(self, abrir, ator_usuario, chamado_repo, uow):
        with pytest.raises(EntityNotFoundError) as exc_info:
            abrir.execute(
                AbrirChamadoInputDTO(
                    descricao="Problema com o telefone fixo",
                    servicos=("Rede", "Telefonia"),
                ),
                ator_usuario,
            )

        assert "Telefonia" in str(exc_info.value)
        assert chamado_repo.ultima_os() is None
        assert uow.rollbacks == 1
        assert uow.published == []

    def test_servico_desativado_erro(self, abrir, ator_usuario, servico_repo):
        servico = servico_repo.get_by_nome("Rede")
        servico.desativar()

        with pytest.raises(EntityNotFoundError):
            abrir.execute(
                AbrirChamadoInputDTO(descricao="Sem acesso à rede", servicos=("Rede",)),
                ator_usuario,
            )

    def test_sem_servicos_erro(self, abrir, ator_usuario):
        with pytest.raises(ValidationError) as exc_info:
            abrir.execute(
                AbrirChamadoInputDTO(descricao="Sem acesso à rede", servicos=()),
                ator_usuario,
            )

        assert exc_info.value.field == "servico"

    def test_descricao_curta_erro(self, abrir, ator_usuario):
        with pytest.raises(ValidationError):
            abrir.execute(
                AbrirChamadoInputDTO(descricao="rede", servicos=("Rede",)),
                ator_usuario,
            )

    @pytest.mark.parametrize("ator", ["ator_tecnico", "ator_admin"])
    def test_somente_usuario_abre(self, abrir, ator, request):
        with pytest.raises(AcessoNegadoError):
            abrir.execute(
                AbrirChamadoInputDTO(descricao="Sem acesso à rede", servicos=("Rede",)),
                request.getfixturevalue(ator),
            )


def test_normalizar_servicos():
    assert normalizar_servicos(None) == []
    assert normalizar_servicos("Rede") == ["Rede"]
    assert normalizar_servicos([" Rede ", "Rede", "", 3, "E-mail"]) == ["Rede", "E-mail"]


# =============================================================================
# Atendimento
# =============================================================================

class TestAtribuirChamadoService:

    def test_tecnico_assume_no_expediente(
        self, chamado_em_atendimento, ator_tecnico, historico_repo, uow
    ):
        assert chamado_em_atendimento.status == "EM_ATENDIMENTO"
        assert chamado_em_atendimento.tecnico_id == ator_tecnico.id

        ultima = historico_repo.listar_por_chamado(chamado_em_atendimento.id)[-1]
        assert ultima.tipo == TipoHistorico.STATUS
        assert ultima.de == "ABERTO"
        assert ultima.para == "EM_ATENDIMENTO"
        assert ultima.autor_id == ator_tecnico.id

        assert isinstance(uow.published[-1], ChamadoAtribuidoEvent)

    def test_tecnico_fora_do_expediente_erro(
        self, chamado_aberto, chamado_repo, usuario_repo, expediente_repo,
        historico_repo, uow, ator_tecnico,
    ):
        noite = lambda: datetime(2026, 3, 2, 22, 30, tzinfo=ZoneInfo("America/Sao_Paulo"))
        service = AtribuirChamadoService(
            chamado_repo, usuario_repo, expediente_repo, historico_repo, uow, relogio=noite
        )

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(chamado_aberto.id, ator_tecnico)

        assert exc_info.value.rule == "fora_do_expediente"
        assert chamado_repo.get_by_id(chamado_aberto.id).status == ChamadoStatus.ABERTO
        assert len(historico_repo.listar_por_chamado(chamado_aberto.id)) == 1

    def test_tecnico_sem_expediente_erro(
        self, atribuir, chamado_aberto, expediente_repo, ator_tecnico
    ):
        expediente_repo.delete_por_usuario(ator_tecnico.id)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            atribuir.execute(chamado_aberto.id, ator_tecnico)

        assert exc_info.value.rule == "sem_expediente"

    def test_tecnico_nao_altera_encerrado(self, atribuir, chamado_encerrado, ator_tecnico):
        with pytest.raises(AcessoNegadoError):
            atribuir.execute(chamado_encerrado.id, ator_tecnico)

    def test_admin_atribui_tecnico(self, atribuir, chamado_aberto, ator_admin, tecnico):
        output = atribuir.execute(chamado_aberto.id, ator_admin, tecnico_id=tecnico.id)

        assert output.tecnico_id == tecnico.id

    def test_admin_sem_tecnico_id_erro(self, atribuir, chamado_aberto, ator_admin):
        with pytest.raises(ValidationError) as exc_info:
            atribuir.execute(chamado_aberto.id, ator_admin)

        assert exc_info.value.field == "tecnicoId"

    def test_admin_tecnico_id_de_usuario_erro(self, atribuir, chamado_aberto, ator_admin, usuario):
        with pytest.raises(EntityNotFoundError):
            atribuir.execute(chamado_aberto.id, ator_admin, tecnico_id=usuario.id)

    def test_chamado_inexistente_erro(self, atribuir, ator_tecnico):
        with pytest.raises(EntityNotFoundError):
            atribuir.execute("nao-existe", ator_tecnico)

    def test_descricao_personalizada_no_historico(
        self, atribuir, chamado_aberto, ator_tecnico, historico_repo
    ):
        atribuir.execute(chamado_aberto.id, ator_tecnico, descricao="Indo até a mesa")

        assert historico_repo.listar_por_chamado(chamado_aberto.id)[-1].descricao == "Indo até a mesa"


class TestEncerrarChamadoService:

    def test_encerrar_sucesso(self, chamado_encerrado, historico_repo, uow, usuario):
        assert chamado_encerrado.status == "ENCERRADO"
        assert chamado_encerrado.descricao_encerramento == "Toner substituído"
        assert chamado_encerrado.pode_reabrir is True

        ultima = historico_repo.listar_por_chamado(chamado_encerrado.id)[-1]
        assert (ultima.de, ultima.para) == ("EM_ATENDIMENTO", "ENCERRADO")

        evento = uow.published[-1]
        assert isinstance(evento, ChamadoEncerradoEvent)
        assert evento.usuario_email == usuario.email

    def test_outro_tecnico_nao_encerra(self, encerrar, chamado_em_atendimento):
        intruso = UsuarioAutenticado(id="tecnico-intruso", regra=Regra.TECNICO)

        with pytest.raises(AcessoNegadoError):
            encerrar.execute(chamado_em_atendimento.id, "Resolvido", intruso)

    def test_sem_descricao_erro(self, encerrar, chamado_em_atendimento, ator_tecnico):
        with pytest.raises(ValidationError):
            encerrar.execute(chamado_em_atendimento.id, "", ator_tecnico)

    def test_encerrar_aberto_erro(self, encerrar, chamado_aberto, ator_admin):
        with pytest.raises(BusinessRuleViolationError):
            encerrar.execute(chamado_aberto.id, "Resolvido", ator_admin)

    def test_usuario_nao_encerra(self, encerrar, chamado_em_atendimento, ator_usuario):
        with pytest.raises(AcessoNegadoError):
            encerrar.execute(chamado_em_atendimento.id, "Resolvido", ator_usuario)


class TestCancelarChamadoService:

    def test_solicitante_cancela(self, cancelar, chamado_aberto, ator_usuario, historico_repo):
        output = cancelar.execute(chamado_aberto.id, "Aberto por engano", ator_usuario)

        assert output.status == "CANCELADO"
        assert output.descricao_encerramento == "Aberto por engano"
        ultima = historico_repo.listar_por_chamado(chamado_aberto.id)[-1]
        assert ultima.tipo == TipoHistorico.CANCELAMENTO

    def test_outro_usuario_nao_cancela(self, cancelar, chamado_aberto, ator_outro_usuario):
        with pytest.raises(AcessoNegadoError):
            cancelar.execute(chamado_aberto.id, "Aberto por engano", ator_outro_usuario)

    def test_admin_cancela_em_atendimento(self, cancelar, chamado_em_atendimento, ator_admin):
        output = cancelar.execute(chamado_em_atendimento.id, "Duplicado", ator_admin)

        assert output.status == "CANCELADO"

    def test_encerrado_nao_cancela(self, cancelar, chamado_encerrado, ator_admin):
        with pytest.raises(BusinessRuleViolationError):
            cancelar.execute(chamado_encerrado.id, "Duplicado", ator_admin)

    def test_tecnico_nao_cancela(self, cancelar, chamado_em_atendimento, ator_tecnico):
        with pytest.raises(AcessoNegadoError):
            cancelar.execute(chamado_em_atendimento.id, "Duplicado", ator_tecnico)


class TestAlterarStatusChamadoService:

    def test_em_atendimento_delega_para_atribuir(self, alterar_status, chamado_aberto, ator_tecnico):
        output = alterar_status.execute(
            AlterarStatusInputDTO(chamado_id=chamado_aberto.id, status="EM_ATENDIMENTO"),
            ator_tecnico,
        )

        assert output.status == "EM_ATENDIMENTO"

    def test_status_aceita_minusculas_e_espaco(self, alterar_status, chamado_aberto, ator_tecnico):
        output = alterar_status.execute(
            AlterarStatusInputDTO(chamado_id=chamado_aberto.id, status="em atendimento"),
            ator_tecnico,
        )

        assert output.status == "EM_ATENDIMENTO"

    def test_encerrado_delega_para_encerrar(
        self, alterar_status, chamado_em_atendimento, ator_tecnico, historico_repo
    ):
        output = alterar_status.execute(
            AlterarStatusInputDTO(
                chamado_id=chamado_em_atendimento.id,
                status="ENCERRADO",
                descricao_encerramento="Driver reinstalado",
                atualizacao_descricao="Finalizado após teste de impressão",
            ),
            ator_tecnico,
        )

        assert output.status == "ENCERRADO"
        ultima = historico_repo.listar_por_chamado(chamado_em_atendimento.id)[-1]
        assert ultima.descricao == "Finalizado após teste de impressão"

    def test_admin_cancela(self, alterar_status, chamado_aberto, ator_admin):
        output = alterar_status.execute(
            AlterarStatusInputDTO(
                chamado_id=chamado_aberto.id,
                status="CANCELADO",
                descricao_encerramento="Duplicado",
            ),
            ator_admin,
        )

        assert output.status == "CANCELADO"

    def test_tecnico_nao_cancela(self, alterar_status, chamado_em_atendimento, ator_tecnico):
        with pytest.raises(AcessoNegadoError):
            alterar_status.execute(
                AlterarStatusInputDTO(
                    chamado_id=chamado_em_atendimento.id,
                    status="CANCELADO",
                    descricao_encerramento="Duplicado",
                ),
                ator_tecnico,
            )

    @pytest.mark.parametrize("status", [None, "", "ABERTO", "REABERTO", "PENDENTE"])
    def test_status_invalido_erro(self, alterar_status, chamado_aberto, ator_admin, status):
        with pytest.raises(ValidationError) as exc_info:
            alterar_status.execute(
                AlterarStatusInputDTO(chamado_id=chamado_aberto.id, status=status),
                ator_admin,
            )

        assert exc_info.value.field == "status"

    def test_usuario_nao_altera_status(self, alterar_status, chamado_aberto, ator_usuario):
        with pytest.raises(AcessoNegadoError):
            alterar_status.execute(
                AlterarStatusInputDTO(chamado_id=chamado_aberto.id, status="EM_ATENDIMENTO"),
                ator_usuario,
            )


# =============================================================================
# Reabertura / Exclusão
# =============================================================================

class TestReabrirChamadoService:

    def test_solicitante_reabre(self, reabrir, chamado_encerrado, ator_usuario, historico_repo, uow):
        output = reabrir.execute(chamado_encerrado.id, ator_usuario)

        assert output.status == "REABERTO"
        assert output.tecnico_id == chamado_encerrado.tecnico_id
        assert output.encerrado_em is None

        ultima = historico_repo.listar_por_chamado(chamado_encerrado.id)[-1]
        assert ultima.tipo == TipoHistorico.REABERTURA
        assert (ultima.de, ultima.para) == ("ENCERRADO", "REABERTO")
        assert isinstance(uow.published[-1], ChamadoReabertoEvent)

    def test_prazo_expirado_erro(self, reabrir, chamado_encerrado, chamado_repo, ator_usuario):
        chamado = chamado_repo.get_by_id(chamado_encerrado.id)
        chamado.encerrado_em = chamado.encerrado_em - timedelta(hours=49)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            reabrir.execute(chamado.id, ator_usuario)

        assert exc_info.value.rule == "prazo_reabertura_expirado"

    def test_outro_usuario_nao_reabre(self, reabrir, chamado_encerrado, ator_outro_usuario):
        with pytest.raises(AcessoNegadoError):
            reabrir.execute(chamado_encerrado.id, ator_outro_usuario)

    def test_tecnico_nao_reabre(self, reabrir, chamado_encerrado, ator_tecnico):
        with pytest.raises(AcessoNegadoError):
            reabrir.execute(chamado_encerrado.id, ator_tecnico)

    def test_admin_reabre(self, reabrir, chamado_encerrado, ator_admin):
        assert reabrir.execute(chamado_encerrado.id, ator_admin).status == "REABERTO"


class TestExcluirChamadoService:

    def test_admin_exclui(self, chamado_aberto, chamado_repo, uow, ator_admin):
        ExcluirChamadoService(chamado_repo, uow).execute(chamado_aberto.id, ator_admin)

        assert chamado_repo.get_by_id(chamado_aberto.id).esta_excluido

        with pytest.raises(EntityNotFoundError):
            ObterChamadoService(chamado_repo).execute(chamado_aberto.id, ator_admin)

    def test_usuario_nao_exclui(self, chamado_aberto, chamado_repo, uow, ator_usuario):
        with pytest.raises(AcessoNegadoError):
            ExcluirChamadoService(chamado_repo, uow).execute(chamado_aberto.id, ator_usuario)


# =============================================================================
# Leitura
# =============================================================================

class TestLeituraChamado:

    def test_solicitante_ve_o_chamado(self, chamado_aberto, chamado_repo, ator_usuario):
        output = ObterChamadoService(chamado_repo).execute(chamado_aberto.id, ator_usuario)

        assert output.to_dict()["OS"] == "INC0001"

    def test_outro_usuario_nao_ve(self, chamado_aberto, chamado_repo, ator_outro_usuario):
        with pytest.raises(AcessoNegadoError):
            ObterChamadoService(chamado_repo).execute(chamado_aberto.id, ator_outro_usuario)

    def test_historico_em_ordem_crescente(
        self, chamado_encerrado, reabrir, chamado_repo, historico_repo, ator_usuario
    ):
        reabrir.execute(chamado_encerrado.id, ator_usuario)

        entradas = ListarHistoricoChamadoService(chamado_repo, historico_repo).execute(
            chamado_encerrado.id, ator_usuario
        )

        assert [e.para for e in entradas] == ["ABERTO", "EM_ATENDIMENTO", "ENCERRADO", "REABERTO"]
        datas = [e.data_hora for e in entradas]
        assert datas == sorted(datas)

    def test_historico_de_chamado_inexistente(self, chamado_repo, historico_repo, ator_admin):
        with pytest.raises(EntityNotFoundError):
            ListarHistoricoChamadoService(chamado_repo, historico_repo).execute("x", ator_admin)

"""
Testes do Catálogo de Serviços e da paginação compartilhada.

Coverage:
- ServicoEntity: validações e ciclo ativo/desativado/excluído
- Use cases de serviço com InMemoryServicoRepository
- Paginacao.de_parametros / Pagina.meta
"""

import pytest

from src.core.catalogo.dtos import AtualizarServicoInputDTO, CriarServicoInputDTO
from src.core.catalogo.entities import ServicoEntity
from src.core.catalogo.use_cases import (
    AtualizarServicoService,
    CriarServicoService,
    DesativarServicoService,
    ExcluirServicoService,
    ListarServicosService,
    ObterServicoService,
    ReativarServicoService,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConflitoError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.shared.paginacao import Pagina, Paginacao


def _servico_por_nome(repo, nome):
    return repo.get_by_nome(nome)


class TestServicoEntity:

    def test_criar_servico(self):
        servico = ServicoEntity.criar(nome="  Suporte de Rede ", descricao=" Cabos e Wi-Fi ")

        assert servico.nome == "Suporte de Rede"
        assert servico.descricao == "Cabos e Wi-Fi"
        assert servico.disponivel

    @pytest.mark.parametrize("nome", ["", "   ", "AB", "x" * 101])
    def test_nome_invalido(self, nome):
        with pytest.raises(ValidationError) as exc_info:
            ServicoEntity.criar(nome=nome)

        assert exc_info.value.field == "nome"

    def test_descricao_longa(self):
        with pytest.raises(ValidationError) as exc_info:
            ServicoEntity.criar(nome="Rede", descricao="x" * 501)

        assert exc_info.value.field == "descricao"

    def test_desativar_e_reativar(self):
        servico = ServicoEntity.criar(nome="Rede")

        servico.desativar()
        assert not servico.disponivel

        servico.reativar()
        assert servico.disponivel

    def test_desativar_duas_vezes(self):
        servico = ServicoEntity.criar(nome="Rede")
        servico.desativar()

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            servico.desativar()

        assert exc_info.value.rule == "servico_ja_desativado"

    def test_reativar_ativo(self):
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            ServicoEntity.criar(nome="Rede").reativar()

        assert exc_info.value.rule == "servico_ja_ativo"

    def test_excluido_nao_reativa(self):
        servico = ServicoEntity.criar(nome="Rede")
        servico.excluir()

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            servico.reativar()

        assert exc_info.value.rule == "servico_excluido"


class TestServicoUseCases:

    def test_criar(self, servico_repo, uow):
        output = CriarServicoService(servico_repo, uow).execute(
            CriarServicoInputDTO(nome="Telefonia", descricao="Ramais e aparelhos")
        )

        assert output.to_dict()["nome"] == "Telefonia"
        assert servico_repo.get_by_id(output.id) is not None
        assert uow.commits == 1

    def test_criar_nome_duplicado(self, servico_repo, uow):
        with pytest.raises(ConflitoError) as exc_info:
            CriarServicoService(servico_repo, uow).execute(CriarServicoInputDTO(nome=" Rede "))

        assert exc_info.value.field == "nome"
        assert uow.rollbacks == 1

    def test_atualizar(self, servico_repo, uow):
        rede = _servico_por_nome(servico_repo, "Rede")

        output = AtualizarServicoService(servico_repo, uow).execute(
            AtualizarServicoInputDTO(servico_id=rede.id, descricao="Cabeamento estruturado")
        )

        assert output.nome == "Rede"
        assert output.descricao == "Cabeamento estruturado"

    def test_atualizar_mantendo_o_proprio_nome(self, servico_repo, uow):
        rede = _servico_por_nome(servico_repo, "Rede")

        output = AtualizarServicoService(servico_repo, uow).execute(
            AtualizarServicoInputDTO(servico_id=rede.id, nome="Rede")
        )

        assert output.id == rede.id

    def test_atualizar_para_nome_existente(self, servico_repo, uow):
        rede = _servico_por_nome(servico_repo, "Rede")

        with pytest.raises(ConflitoError):
            AtualizarServicoService(servico_repo, uow).execute(
                AtualizarServicoInputDTO(servico_id=rede.id, nome="Impressoras")
            )

    def test_obter_inexistente(self, servico_repo):
        with pytest.raises(EntityNotFoundError):
            ObterServicoService(servico_repo).execute("nao-existe")

    def test_excluido_nao_e_encontrado(self, servico_repo, uow):
        rede = _servico_por_nome(servico_repo, "Rede")

        ExcluirServicoService(servico_repo, uow).execute(rede.id)

        with pytest.raises(EntityNotFoundError):
            ObterServicoService(servico_repo).execute(rede.id)
        with pytest.raises(EntityNotFoundError):
            AtualizarServicoService(servico_repo, uow).execute(
                AtualizarServicoInputDTO(servico_id=rede.id, descricao="nova")
            )

    def test_desativar_e_reativar(self, servico_repo, uow):
        rede = _servico_por_nome(servico_repo, "Rede")

        desativado = DesativarServicoService(servico_repo, uow).execute(rede.id)
        reativado = ReativarServicoService(servico_repo, uow).execute(rede.id)

        assert desativado.ativo is False
        assert reativado.ativo is True

    def test_listar_oculta_inativos_por_padrao(self, servico_repo, uow):
        rede = _servico_por_nome(servico_repo, "Rede")
        DesativarServicoService(servico_repo, uow).execute(rede.id)
        listar = ListarServicosService(servico_repo)

        ativos = listar.execute(Paginacao())
        todos = listar.execute(Paginacao(), incluir_inativos=True)

        assert [s.nome for s in ativos.items] == ["E-mail", "Impressoras"]
        assert todos.total == 3

    def test_listar_com_busca(self, servico_repo):
        pagina = ListarServicosService(servico_repo).execute(Paginacao(), busca="impress")

        assert [s.nome for s in pagina.items] == ["Impressoras"]

    def test_servico_desativado_fora_da_abertura(self, servico_repo, uow):
        rede = _servico_por_nome(servico_repo, "Rede")
        DesativarServicoService(servico_repo, uow).execute(rede.id)

        disponiveis = servico_repo.listar_por_nomes(["Rede", "Impressoras"])

        assert [s.nome for s in disponiveis] == ["Impressoras"]


class TestPaginacao:

    def test_padroes(self):
        paginacao = Paginacao.de_parametros()

        assert (paginacao.page, paginacao.limit) == (1, 10)

    def test_limite_padrao_customizado(self):
        assert Paginacao.de_parametros(limite_padrao=20).limit == 20

    def test_limit_truncado_em_cem(self):
        assert Paginacao.de_parametros(page="2", limit="500").limit == 100

    @pytest.mark.parametrize("page,limit,campo", [
        ("0", "10", "page"),
        ("abc", "10", "page"),
        ("1", "0", "limit"),
        ("1", "-5", "limit"),
    ])
    def test_parametros_invalidos(self, page, limit, campo):
        with pytest.raises(ValidationError) as exc_info:
            Paginacao.de_parametros(page, limit)

        assert exc_info.value.field == campo

    def test_offset(self):
        assert Paginacao(page=3, limit=20).offset == 40

    def test_meta_pagina_vazia(self):
        pagina = Pagina(items=[], total=0, page=1, limit=10)

        assert pagina.meta() == {
            "page": 1,
            "limit": 10,
            "total": 0,
            "totalPages": 0,
            "hasNext": False,
            "hasPrev": False,
        }

"""
Use Cases do Catálogo de Serviços.

- CriarServicoService / AtualizarServicoService
- ObterServicoService / ListarServicosService
- DesativarServicoService / ReativarServicoService / ExcluirServicoService
"""

import logging
from typing import Optional

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import ConflitoError, EntityNotFoundError
from src.core.shared.paginacao import Pagina, Paginacao

from .entities import ServicoEntity
from .dtos import AtualizarServicoInputDTO, CriarServicoInputDTO, ServicoOutputDTO
from .ports import ServicoRepository

logger = logging.getLogger(__name__)


def _buscar_servico(servico_repo: ServicoRepository, servico_id: str) -> ServicoEntity:
    servico = servico_repo.get_by_id(servico_id)
    if not servico or servico.deletado_em is not None:
        raise EntityNotFoundError(
            f"Serviço {servico_id} não encontrado",
            entity_type="Servico",
            entity_id=servico_id,
        )
    return servico


def _garantir_nome_unico(
    servico_repo: ServicoRepository,
    nome: str,
    excluir_id: Optional[str] = None,
) -> None:
    existente = servico_repo.get_by_nome(nome.strip())
    if existente and existente.id != excluir_id:
        raise ConflitoError(f"Já existe um serviço com o nome {nome.strip()}", field="nome")


class CriarServicoService:
    """Use Case: Cadastrar serviço (nome único)."""

    def __init__(self, servico_repo: ServicoRepository, uow: UnitOfWork):
        self.servico_repo = servico_repo
        self.uow = uow

    def execute(self, input_dto: CriarServicoInputDTO) -> ServicoOutputDTO:
        with self.uow:
            servico = ServicoEntity.criar(nome=input_dto.nome, descricao=input_dto.descricao)
            _garantir_nome_unico(self.servico_repo, servico.nome)
            self.servico_repo.save(servico)

        logger.info(f"Serviço criado: {servico.id} ({servico.nome})")
        return ServicoOutputDTO.from_entity(servico)


class AtualizarServicoService:
    def __init__(self, servico_repo: ServicoRepository, uow: UnitOfWork):
        self.servico_repo = servico_repo
        self.uow = uow

    def execute(self, input_dto: AtualizarServicoInputDTO) -> ServicoOutputDTO:
        with self.uow:
            servico = _buscar_servico(self.servico_repo, input_dto.servico_id)
            if input_dto.nome is not None:
                _garantir_nome_unico(self.servico_repo, input_dto.nome, excluir_id=servico.id)
            servico.atualizar(nome=input_dto.nome, descricao=input_dto.descricao)
            self.servico_repo.save(servico)

        return ServicoOutputDTO.from_entity(servico)


class ObterServicoService:
    def __init__(self, servico_repo: ServicoRepository):
        self.servico_repo = servico_repo

    def execute(self, servico_id: str) -> ServicoOutputDTO:
        return ServicoOutputDTO.from_entity(_buscar_servico(self.servico_repo, servico_id))


class ListarServicosService:
    """Use Case: Listar serviços (leitura, sem UoW)."""

    def __init__(self, servico_repo: ServicoRepository):
        self.servico_repo = servico_repo

    def execute(
        self,
        paginacao: Paginacao,
        busca: Optional[str] = None,
        incluir_inativos: bool = False,
    ) -> Pagina[ServicoOutputDTO]:
        pagina = self.servico_repo.listar(
            paginacao,
            busca=busca,
            incluir_inativos=incluir_inativos,
        )
        return pagina.map(ServicoOutputDTO.from_entity)


class _AlterarSituacaoServico:
    """Base dos use cases que só chamam um método da entidade."""

    acao = ""

    def __init__(self, servico_repo: ServicoRepository, uow: UnitOfWork):
        self.servico_repo = servico_repo
        self.uow = uow

    def execute(self, servico_id: str) -> ServicoOutputDTO:
        with self.uow:
            servico = _buscar_servico(self.servico_repo, servico_id)
            getattr(servico, self.acao)()
            self.servico_repo.save(servico)

        logger.info(f"Serviço {servico_id}: {self.acao}")
        return ServicoOutputDTO.from_entity(servico)


class DesativarServicoService(_AlterarSituacaoServico):
    acao = "desativar"


class ReativarServicoService(_AlterarSituacaoServico):
    acao = "reativar"


class ExcluirServicoService(_AlterarSituacaoServico):
    acao = "excluir"

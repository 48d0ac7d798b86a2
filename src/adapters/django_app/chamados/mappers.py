"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- ChamadoModel (+ ordens prefetched) -> ChamadoEntity
- ChamadoEntity -> campos do ChamadoModel
- ServicoModel <-> ServicoEntity

Mappers são stateless e não contêm lógica de negócio.
"""

from typing import List

from src.core.catalogo.entities import ServicoEntity
from src.core.chamados.entities import ChamadoEntity, ChamadoStatus

from .models import ChamadoModel, ServicoModel


class ChamadoMapper:
    """
    Mapper para conversão entre ChamadoEntity e ChamadoModel.

    Os serviços da entidade vêm das ordens de serviço; o repositório
    carrega com prefetch_related('ordens__servico') para evitar N+1.
    """

    @staticmethod
    def to_model_data(entity: ChamadoEntity) -> dict:
        """Campos para update_or_create (sem o id)."""
        return {
            'os': entity.os,
            'descricao': entity.descricao,
            'descricao_encerramento': entity.descricao_encerramento,
            'status': entity.status.value,
            'usuario_id': entity.usuario_id,
            'tecnico_id': entity.tecnico_id,
            'gerado_em': entity.gerado_em,
            'atualizado_em': entity.atualizado_em,
            'encerrado_em': entity.encerrado_em,
            'deletado_em': entity.deletado_em,
        }

    @staticmethod
    def to_entity(model: ChamadoModel) -> ChamadoEntity:
        """
        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na abertura
        """
        return ChamadoEntity(
            id=model.id,
            os=model.os,
            descricao=model.descricao,
            descricao_encerramento=model.descricao_encerramento,
            status=ChamadoStatus(model.status),
            usuario_id=model.usuario_id,
            tecnico_id=model.tecnico_id,
            servicos=[ordem.servico.nome for ordem in model.ordens.all()],
            gerado_em=model.gerado_em,
            atualizado_em=model.atualizado_em,
            encerrado_em=model.encerrado_em,
            deletado_em=model.deletado_em,
        )

    @staticmethod
    def to_entity_list(models: List[ChamadoModel]) -> List[ChamadoEntity]:
        return [ChamadoMapper.to_entity(model) for model in models]


class ServicoMapper:

    @staticmethod
    def to_model_data(entity: ServicoEntity) -> dict:
        return {
            'nome': entity.nome,
            'descricao': entity.descricao,
            'ativo': entity.ativo,
            'gerado_em': entity.gerado_em,
            'atualizado_em': entity.atualizado_em,
            'deletado_em': entity.deletado_em,
        }

    @staticmethod
    def to_entity(model: ServicoModel) -> ServicoEntity:
        return ServicoEntity(
            id=model.id,
            nome=model.nome,
            descricao=model.descricao,
            ativo=model.ativo,
            gerado_em=model.gerado_em,
            atualizado_em=model.atualizado_em,
            deletado_em=model.deletado_em,
        )

    @staticmethod
    def to_entity_list(models: List[ServicoModel]) -> List[ServicoEntity]:
        return [ServicoMapper.to_entity(model) for model in models]

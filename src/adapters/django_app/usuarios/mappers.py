"""
Mappers entre Entities de Identidade (Core) e Models (Django).

Mappers são stateless e não contêm lógica de negócio.
"""

from typing import List

from src.core.identidade.entities import (
    ExpedienteEntity,
    Regra,
    Setor,
    UsuarioEntity,
)

from .models import ExpedienteModel, UsuarioModel


class UsuarioMapper:

    @staticmethod
    def to_model_data(entity: UsuarioEntity) -> dict:
        """Campos para update_or_create (sem o id)."""
        return {
            'nome': entity.nome,
            'sobrenome': entity.sobrenome,
            'email': entity.email,
            'password': entity.password_hash,
            'regra': entity.regra.value,
            'setor': entity.setor.value if entity.setor else None,
            'telefone': entity.telefone,
            'ramal': entity.ramal,
            'avatar_url': entity.avatar_url,
            'ativo': entity.ativo,
            'refresh_token': entity.refresh_token,
            'gerado_em': entity.gerado_em,
            'atualizado_em': entity.atualizado_em,
            'deletado_em': entity.deletado_em,
        }

    @staticmethod
    def to_entity(model: UsuarioModel) -> UsuarioEntity:
        """
        Converte Model em Entity.

        Note:
            Não passa pelo factory .criar(); os dados já foram validados
        """
        return UsuarioEntity(
            id=model.id,
            nome=model.nome,
            sobrenome=model.sobrenome,
            email=model.email,
            password_hash=model.password,
            regra=Regra(model.regra),
            setor=Setor(model.setor) if model.setor else None,
            telefone=model.telefone,
            ramal=model.ramal,
            avatar_url=model.avatar_url,
            ativo=model.ativo,
            refresh_token=model.refresh_token,
            gerado_em=model.gerado_em,
            atualizado_em=model.atualizado_em,
            deletado_em=model.deletado_em,
        )

    @staticmethod
    def to_entity_list(models: List[UsuarioModel]) -> List[UsuarioEntity]:
        return [UsuarioMapper.to_entity(model) for model in models]


class ExpedienteMapper:

    @staticmethod
    def to_model_data(entity: ExpedienteEntity) -> dict:
        return {
            'usuario_id': entity.usuario_id,
            'entrada': entity.entrada,
            'saida': entity.saida,
            'ativo': entity.ativo,
            'gerado_em': entity.gerado_em,
            'deletado_em': entity.deletado_em,
        }

    @staticmethod
    def to_entity(model: ExpedienteModel) -> ExpedienteEntity:
        return ExpedienteEntity(
            id=model.id,
            usuario_id=model.usuario_id,
            entrada=model.entrada,
            saida=model.saida,
            ativo=model.ativo,
            gerado_em=model.gerado_em,
            deletado_em=model.deletado_em,
        )

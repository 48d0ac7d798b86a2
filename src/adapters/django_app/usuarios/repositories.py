"""
Repositórios Django do domínio de Identidade.

Implementam UsuarioRepository e ExpedienteRepository definidos em
src/core/identidade/ports.py usando o Django ORM.
"""

from typing import Optional
import logging

from django.db.models import ProtectedError, Q

from src.core.identidade.entities import ExpedienteEntity, Regra, UsuarioEntity
from src.core.shared.exceptions import BusinessRuleViolationError
from src.core.shared.paginacao import Pagina, Paginacao

from .mappers import ExpedienteMapper, UsuarioMapper
from .models import ExpedienteModel, UsuarioModel

logger = logging.getLogger(__name__)


class DjangoUsuarioRepository:
    """
    Implementação Django do UsuarioRepository.

    Example:
        repo = DjangoUsuarioRepository()
        repo.save(usuario)
        repo.get_by_email("ana@empresa.com")
    """

    def __init__(self):
        self._mapper = UsuarioMapper()

    def save(self, usuario: UsuarioEntity) -> None:
        """Upsert pelo id."""
        UsuarioModel.objects.update_or_create(
            id=usuario.id,
            defaults=self._mapper.to_model_data(usuario),
        )
        logger.debug(f"Usuário salvo: {usuario.id}")

    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        try:
            return self._mapper.to_entity(UsuarioModel.objects.get(id=usuario_id))
        except UsuarioModel.DoesNotExist:
            return None

    def get_by_email(self, email: str) -> Optional[UsuarioEntity]:
        model = UsuarioModel.objects.filter(email=(email or "").strip().lower()).first()
        return self._mapper.to_entity(model) if model else None

    def existe_email(self, email: str, excluir_id: Optional[str] = None) -> bool:
        queryset = UsuarioModel.objects.filter(email=(email or "").strip().lower())
        if excluir_id:
            queryset = queryset.exclude(id=excluir_id)
        return queryset.exists()

    def delete(self, usuario_id: str) -> None:
        """
        Remoção física.

        Raises:
            BusinessRuleViolationError: Se houver chamados vinculados
        """
        try:
            UsuarioModel.objects.filter(id=usuario_id).delete()
        except ProtectedError:
            raise BusinessRuleViolationError(
                "Usuário possui chamados vinculados e não pode ser removido permanentemente",
                rule="usuario_com_chamados",
            )
        logger.info(f"Usuário removido permanentemente: {usuario_id}")

    def listar(
        self,
        paginacao: Paginacao,
        regra: Optional[Regra] = None,
        busca: Optional[str] = None,
        incluir_inativos: bool = False,
    ) -> Pagina[UsuarioEntity]:
        queryset = UsuarioModel.objects.all()

        if regra is not None:
            queryset = queryset.filter(regra=regra.value)
        if not incluir_inativos:
            queryset = queryset.filter(ativo=True, deletado_em__isnull=True)
        if busca:
            queryset = queryset.filter(
                Q(nome__icontains=busca)
                | Q(sobrenome__icontains=busca)
                | Q(email__icontains=busca)
            )

        queryset = queryset.order_by('nome', 'sobrenome')
        total = queryset.count()
        models = queryset[paginacao.offset:paginacao.offset + paginacao.limit]

        return Pagina(
            items=self._mapper.to_entity_list(models),
            total=total,
            page=paginacao.page,
            limit=paginacao.limit,
        )


class DjangoExpedienteRepository:
    """Implementação Django do ExpedienteRepository."""

    def __init__(self):
        self._mapper = ExpedienteMapper()

    def save(self, expediente: ExpedienteEntity) -> None:
        ExpedienteModel.objects.update_or_create(
            id=expediente.id,
            defaults=self._mapper.to_model_data(expediente),
        )

    def get_ativo_por_usuario(self, usuario_id: str) -> Optional[ExpedienteEntity]:
        model = (
            ExpedienteModel.objects
            .filter(usuario_id=usuario_id, ativo=True, deletado_em__isnull=True)
            .order_by('-gerado_em')
            .first()
        )
        return self._mapper.to_entity(model) if model else None

    def delete_por_usuario(self, usuario_id: str) -> None:
        ExpedienteModel.objects.filter(usuario_id=usuario_id).delete()

"""
Repositórios Django para Chamados e Serviços.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Mapear entities para models e vice-versa
- Traduzir FiltroChamadosDTO em querysets
- Otimizar queries (select_related, prefetch_related)

Chamados excluídos logicamente nunca aparecem em listagens e
contadores, mas continuam ocupando sua OS.
"""

from typing import Dict, List, Optional
import logging

from django.db.models import Case, Count, IntegerField, Q, QuerySet, Value, When
from django.db.models.functions import Length

from src.core.catalogo.entities import ServicoEntity
from src.core.chamados.dtos import FiltroChamadosDTO
from src.core.chamados.entities import ChamadoEntity, ChamadoStatus
from src.core.shared.paginacao import Pagina, Paginacao

from .mappers import ChamadoMapper, ServicoMapper
from .models import ChamadoModel, OrdemDeServicoModel, ServicoModel

logger = logging.getLogger(__name__)


class DjangoChamadoRepository:
    """
    Implementação Django do ChamadoRepository.

    Example:
        repo = DjangoChamadoRepository()
        repo.save(chamado)
        pagina = repo.listar(FiltroChamadosDTO(status=(ChamadoStatus.ABERTO,)), Paginacao())
    """

    def __init__(self):
        self._mapper = ChamadoMapper()

    def _base_queryset(self) -> QuerySet:
        return ChamadoModel.objects.prefetch_related('ordens__servico')

    def save(self, chamado: ChamadoEntity) -> None:
        """
        Persiste chamado (create ou update) e cria as ordens de
        serviço que ainda não existem.
        """
        ChamadoModel.objects.update_or_create(
            id=chamado.id,
            defaults=self._mapper.to_model_data(chamado),
        )

        existentes = set(
            OrdemDeServicoModel.objects
            .filter(chamado_id=chamado.id)
            .values_list('servico__nome', flat=True)
        )
        faltantes = [nome for nome in chamado.servicos if nome not in existentes]
        if faltantes:
            OrdemDeServicoModel.objects.bulk_create([
                OrdemDeServicoModel(chamado_id=chamado.id, servico=servico)
                for servico in ServicoModel.objects.filter(nome__in=faltantes)
            ])

        logger.debug(f"Chamado salvo: {chamado.os}")

    def get_by_id(self, chamado_id: str) -> Optional[ChamadoEntity]:
        try:
            return self._mapper.to_entity(self._base_queryset().get(id=chamado_id))
        except ChamadoModel.DoesNotExist:
            logger.debug(f"Chamado não encontrado: {chamado_id}")
            return None

    def ultima_os(self) -> Optional[str]:
        """Maior OS já emitida, inclusive de chamados excluídos."""
        return (
            ChamadoModel.objects
            .annotate(tamanho=Length('os'))
            .order_by('-tamanho', '-os')
            .values_list('os', flat=True)
            .first()
        )

    def listar(self, filtro: FiltroChamadosDTO, paginacao: Paginacao) -> Pagina[ChamadoEntity]:
        queryset = self._filtrar(filtro)

        data = '-gerado_em' if filtro.mais_recentes_primeiro else 'gerado_em'
        if filtro.reabertos_primeiro:
            queryset = queryset.annotate(
                prioridade=Case(
                    When(status=ChamadoStatus.REABERTO.value, then=Value(0)),
                    default=Value(1),
                    output_field=IntegerField(),
                )
            ).order_by('prioridade', data)
        else:
            queryset = queryset.order_by(data)

        total = queryset.count()
        models = queryset[paginacao.offset:paginacao.offset + paginacao.limit]

        return Pagina(
            items=self._mapper.to_entity_list(models),
            total=total,
            page=paginacao.page,
            limit=paginacao.limit,
        )

    def contar_por_status(self) -> Dict[str, int]:
        contagem = {status.value: 0 for status in ChamadoStatus}
        linhas = (
            ChamadoModel.objects
            .filter(deletado_em__isnull=True)
            .values('status')
            .annotate(total=Count('id'))
        )
        for linha in linhas:
            contagem[linha['status']] = linha['total']
        return contagem

    def contar_sem_tecnico(self) -> int:
        return ChamadoModel.objects.filter(
            deletado_em__isnull=True,
            tecnico__isnull=True,
            status__in=[s.value for s in ChamadoStatus.na_fila()],
        ).count()

    def _filtrar(self, filtro: FiltroChamadosDTO) -> QuerySet:
        queryset = self._base_queryset().filter(deletado_em__isnull=True)

        if filtro.usuario_id:
            queryset = queryset.filter(usuario_id=filtro.usuario_id)
        if filtro.tecnico_id:
            queryset = queryset.filter(tecnico_id=filtro.tecnico_id)
        if filtro.status:
            queryset = queryset.filter(status__in=[s.value for s in filtro.status])
        if filtro.sem_tecnico is not None:
            queryset = queryset.filter(tecnico__isnull=filtro.sem_tecnico)
        if filtro.setor:
            queryset = queryset.filter(usuario__setor=filtro.setor)
        if filtro.data_inicio:
            queryset = queryset.filter(gerado_em__date__gte=filtro.data_inicio)
        if filtro.data_fim:
            queryset = queryset.filter(gerado_em__date__lte=filtro.data_fim)
        if filtro.busca:
            queryset = queryset.filter(
                Q(os__icontains=filtro.busca) | Q(descricao__icontains=filtro.busca)
            )

        return queryset


class DjangoServicoRepository:
    """Implementação Django do ServicoRepository."""

    def __init__(self):
        self._mapper = ServicoMapper()

    def save(self, servico: ServicoEntity) -> None:
        ServicoModel.objects.update_or_create(
            id=servico.id,
            defaults=self._mapper.to_model_data(servico),
        )

    def get_by_id(self, servico_id: str) -> Optional[ServicoEntity]:
        try:
            return self._mapper.to_entity(ServicoModel.objects.get(id=servico_id))
        except ServicoModel.DoesNotExist:
            return None

    def get_by_nome(self, nome: str) -> Optional[ServicoEntity]:
        model = ServicoModel.objects.filter(nome=nome).first()
        return self._mapper.to_entity(model) if model else None

    def listar_por_nomes(self, nomes: List[str]) -> List[ServicoEntity]:
        models = ServicoModel.objects.filter(
            nome__in=nomes,
            ativo=True,
            deletado_em__isnull=True,
        )
        return self._mapper.to_entity_list(models)

    def listar(
        self,
        paginacao: Paginacao,
        busca: Optional[str] = None,
        incluir_inativos: bool = False,
    ) -> Pagina[ServicoEntity]:
        queryset = ServicoModel.objects.filter(deletado_em__isnull=True)
        if not incluir_inativos:
            queryset = queryset.filter(ativo=True)
        if busca:
            queryset = queryset.filter(Q(nome__icontains=busca) | Q(descricao__icontains=busca))

        queryset = queryset.order_by('nome')
        total = queryset.count()
        models = queryset[paginacao.offset:paginacao.offset + paginacao.limit]

        return Pagina(
            items=self._mapper.to_entity_list(models),
            total=total,
            page=paginacao.page,
            limit=paginacao.limit,
        )

"""
API Views JSON de Chamados, Filas e Catálogo de Serviços.

Endpoints de chamado:
- POST   /chamado/abertura-chamado - Abrir chamado (USUARIO)
- GET    /chamado/<id> - Detalhes (solicitante, técnico ou ADMIN)
- PATCH  /chamado/<id>/status - Assumir/encerrar/cancelar (ADMIN, TECNICO)
- PATCH  /chamado/<id>/reabrir-chamado - Reabrir em até 48h
- PATCH  /chamado/<id>/cancelar-chamado - Cancelar (solicitante ou ADMIN)
- DELETE /chamado/<id>/excluir-chamado - Exclusão lógica (ADMIN)
- GET    /chamado/<id>/historico - Histórico crescente

Filas (/filadechamados):
- GET meus-chamados, chamados-atribuidos, todos-chamados, abertos, estatisticas

Catálogo (/servico):
- GET/POST /servico/ - Listar (qualquer regra) / criar (ADMIN)
- GET/PUT/DELETE /servico/<id> - Detalhe/atualizar/excluir
- PATCH /servico/<id>/desativar | /reativar
"""

import logging

from django.http import HttpRequest, JsonResponse

from src.core.catalogo.dtos import AtualizarServicoInputDTO, CriarServicoInputDTO
from src.core.chamados.dtos import AbrirChamadoInputDTO, AlterarStatusInputDTO
from src.core.identidade.entities import Regra

from ..shared.auth import requer_autenticacao, requer_regras
from ..shared.http import BaseAPIView, json_response, pagina_response, query_bool

logger = logging.getLogger(__name__)


def _texto(data: dict, campo: str):
    valor = data.get(campo)
    return str(valor) if valor is not None else None


# =============================================================================
# Ciclo de vida do chamado
# =============================================================================

class AbrirChamadoView(BaseAPIView):
    """
    POST /chamado/abertura-chamado

    Body JSON:
    {
        "descricao": "string (10-5000 caracteres)",
        "servico": "Nome" ou ["Nome", "Outro"]
    }
    """

    @requer_regras(Regra.USUARIO)
    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            servico = data.get('servico')
            if isinstance(servico, (list, tuple)):
                servicos = tuple(str(s) for s in servico if s is not None)
            elif servico is not None:
                servicos = (str(servico),)
            else:
                servicos = ()

            service = self.get_container().abrir_chamado_service()
            output = service.execute(
                AbrirChamadoInputDTO(
                    descricao=str(data.get('descricao') or ''),
                    servicos=servicos,
                ),
                request.usuario,
            )

            logger.info(f"API: Chamado aberto: {output.os}")
            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class ChamadoDetailView(BaseAPIView):

    @requer_autenticacao
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_container().obter_chamado_service().execute(pk, request.usuario)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class AlterarStatusChamadoView(BaseAPIView):
    """
    PATCH /chamado/<id>/status

    Body JSON:
    {
        "status": "EM_ATENDIMENTO | ENCERRADO | CANCELADO",
        "descricaoEncerramento": "obrigatória para ENCERRADO/CANCELADO",
        "atualizacaoDescricao": "texto do histórico (opcional)",
        "tecnicoId": "técnico a atribuir (ADMIN)"
    }
    """

    @requer_regras(Regra.ADMIN, Regra.TECNICO)
    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            service = self.get_container().alterar_status_chamado_service()

            output = service.execute(
                AlterarStatusInputDTO(
                    chamado_id=pk,
                    status=_texto(data, 'status'),
                    descricao_encerramento=_texto(data, 'descricaoEncerramento'),
                    atualizacao_descricao=_texto(data, 'atualizacaoDescricao'),
                    tecnico_id=_texto(data, 'tecnicoId'),
                ),
                request.usuario,
            )

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class ReabrirChamadoView(BaseAPIView):

    @requer_regras(Regra.ADMIN, Regra.USUARIO)
    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            output = self.get_container().reabrir_chamado_service().execute(
                pk,
                request.usuario,
                descricao=_texto(data, 'atualizacaoDescricao'),
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class CancelarChamadoView(BaseAPIView):
    """PATCH /chamado/<id>/cancelar-chamado com {"descricaoEncerramento": "..."}."""

    @requer_regras(Regra.ADMIN, Regra.USUARIO)
    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            output = self.get_container().cancelar_chamado_service().execute(
                pk,
                _texto(data, 'descricaoEncerramento'),
                request.usuario,
                descricao=_texto(data, 'atualizacaoDescricao'),
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class ExcluirChamadoView(BaseAPIView):

    @requer_regras(Regra.ADMIN)
    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            self.get_container().excluir_chamado_service().execute(pk, request.usuario)
            return json_response(
                success=True,
                data={'message': 'Chamado excluído com sucesso'},
            )

        except Exception as e:
            return self.handle_exception(e)


class HistoricoChamadoView(BaseAPIView):

    @requer_autenticacao
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            service = self.get_container().listar_historico_chamado_service()
            entradas = service.execute(pk, request.usuario)
            return json_response(success=True, data=[e.to_dict() for e in entradas])

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Filas
# =============================================================================

class MeusChamadosView(BaseAPIView):
    """GET /filadechamados/meus-chamados?status=ABERTO&page=1&limit=10"""

    @requer_regras(Regra.USUARIO)
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            fila = self.get_container().fila_de_chamados_service()
            pagina = fila.meus_chamados(
                request.usuario,
                self.get_paginacao(request),
                status=request.GET.get('status'),
            )
            return pagina_response(pagina)

        except Exception as e:
            return self.handle_exception(e)


class ChamadosAtribuidosView(BaseAPIView):
    """GET /filadechamados/chamados-atribuidos?prioridade=reabertos"""

    @requer_regras(Regra.TECNICO)
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            fila = self.get_container().fila_de_chamados_service()
            pagina = fila.chamados_atribuidos(
                request.usuario,
                self.get_paginacao(request),
                prioridade=request.GET.get('prioridade'),
            )
            return pagina_response(pagina)

        except Exception as e:
            return self.handle_exception(e)


class TodosChamadosView(BaseAPIView):
    """
    GET /filadechamados/todos-chamados

    Query params:
    - status (obrigatório)
    - tecnicoId, usuarioId, setor
    - dataInicio, dataFim (AAAA-MM-DD)
    - busca: OS ou descrição
    """

    @requer_regras(Regra.ADMIN)
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            fila = self.get_container().fila_de_chamados_service()
            pagina = fila.todos_chamados(
                request.usuario,
                self.get_paginacao(request),
                status=request.GET.get('status'),
                tecnico_id=request.GET.get('tecnicoId'),
                usuario_id=request.GET.get('usuarioId'),
                setor=request.GET.get('setor'),
                data_inicio=request.GET.get('dataInicio'),
                data_fim=request.GET.get('dataFim'),
                busca=request.GET.get('busca'),
            )
            return pagina_response(pagina)

        except Exception as e:
            return self.handle_exception(e)


class ChamadosAbertosView(BaseAPIView):
    """GET /filadechamados/abertos?setor=FINANCEIRO&ordenacao=prioridade"""

    @requer_regras(Regra.ADMIN, Regra.TECNICO)
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            fila = self.get_container().fila_de_chamados_service()
            pagina = fila.chamados_abertos(
                request.usuario,
                self.get_paginacao(request),
                setor=request.GET.get('setor'),
                ordenacao=request.GET.get('ordenacao'),
            )
            return pagina_response(pagina)

        except Exception as e:
            return self.handle_exception(e)


class EstatisticasView(BaseAPIView):

    @requer_regras(Regra.ADMIN)
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            fila = self.get_container().fila_de_chamados_service()
            return json_response(success=True, data=fila.estatisticas(request.usuario).to_dict())

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Catálogo de Serviços
# =============================================================================

class ServicoListView(BaseAPIView):
    """
    GET  /servico/ - Qualquer usuário autenticado
    POST /servico/ - ADMIN

    Body JSON (POST):
    {
        "nome": "string (obrigatório)",
        "descricao": "string (opcional)"
    }
    """

    limite_padrao = 20

    @requer_autenticacao
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            service = self.get_container().listar_servicos_service()
            pagina = service.execute(
                paginacao=self.get_paginacao(request),
                busca=(request.GET.get('busca') or '').strip() or None,
                incluir_inativos=query_bool(request, 'incluirInativos'),
            )
            return pagina_response(pagina)

        except Exception as e:
            return self.handle_exception(e)

    @requer_regras(Regra.ADMIN)
    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            output = self.get_container().criar_servico_service().execute(
                CriarServicoInputDTO(
                    nome=str(data.get('nome') or ''),
                    descricao=_texto(data, 'descricao'),
                )
            )

            logger.info(f"API: Serviço criado: {output.id}")
            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class ServicoDetailView(BaseAPIView):

    @requer_autenticacao
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_container().obter_servico_service().execute(pk)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    @requer_regras(Regra.ADMIN)
    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            output = self.get_container().atualizar_servico_service().execute(
                AtualizarServicoInputDTO(
                    servico_id=pk,
                    nome=_texto(data, 'nome'),
                    descricao=_texto(data, 'descricao'),
                )
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    @requer_regras(Regra.ADMIN)
    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            self.get_container().excluir_servico_service().execute(pk)
            return json_response(
                success=True,
                data={'message': 'Serviço removido com sucesso'},
            )

        except Exception as e:
            return self.handle_exception(e)


class DesativarServicoView(BaseAPIView):

    @requer_regras(Regra.ADMIN)
    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_container().desativar_servico_service().execute(pk)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class ReativarServicoView(BaseAPIView):

    @requer_regras(Regra.ADMIN)
    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_container().reativar_servico_service().execute(pk)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

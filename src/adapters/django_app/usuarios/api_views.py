"""
API Views JSON de Identidade: autenticação e cadastros.

Endpoints:
- POST /auth/login - Login (limite de tentativas por IP)
- POST /auth/refresh-token - Renova o par de tokens
- POST /auth/logout - Revoga o access token
- GET /auth/me - Perfil do chamador

- GET/POST /usuario/ - Listar/criar usuários (ADMIN)
- GET/PUT/DELETE /usuario/<id>/ - Detalhe/atualizar/excluir (ADMIN)
- PATCH /usuario/senha - Troca da própria senha (qualquer regra)
- POST /usuario/email - Busca por email (ADMIN)
- PATCH /usuario/<id>/reativar - Desfaz a exclusão lógica (ADMIN)

- GET/POST /tecnico/ - Listar/criar técnicos (ADMIN)
- GET/PUT/DELETE /tecnico/<id>/ - Detalhe/atualizar/excluir (ADMIN)
- PUT /tecnico/<id>/horarios - Expediente (ADMIN ou o próprio técnico)
- PATCH /tecnico/<id>/restaurar - Desfaz a exclusão lógica (ADMIN)

- GET/POST /admin/ - Listar/criar administradores (ADMIN)
- DELETE /admin/<id>/ - Excluir administrador (ADMIN)
- PATCH /admin/<id>/reativar - Desfaz a exclusão lógica (ADMIN)

Exclusão é lógica; `?permanente=true` remove o registro.
"""

import logging

from django.http import HttpRequest, JsonResponse

from src.core.identidade.dtos import (
    AlterarSenhaInputDTO,
    AtualizarUsuarioInputDTO,
    CriarUsuarioInputDTO,
    DefinirExpedienteInputDTO,
    LoginInputDTO,
)
from src.core.identidade.entities import Regra

from ..shared.auth import requer_autenticacao, requer_regras
from ..shared.http import BaseAPIView, json_response, pagina_response, query_bool
from ..shared.rate_limit import limitar_login

logger = logging.getLogger(__name__)


# =============================================================================
# Autenticação
# =============================================================================

class LoginView(BaseAPIView):
    """
    POST /auth/login

    Body JSON:
    {
        "email": "string (obrigatório)",
        "password": "string (obrigatório)"
    }
    """

    @limitar_login
    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            service = self.get_container().autenticar_usuario_service()

            tokens = service.execute(
                LoginInputDTO(
                    email=str(data.get('email') or ''),
                    password=str(data.get('password') or ''),
                )
            )

            return json_response(success=True, data=tokens.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class RefreshTokenView(BaseAPIView):
    """POST /auth/refresh-token com {"refreshToken": "..."}."""

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            service = self.get_container().renovar_token_service()
            tokens = service.execute(data.get('refreshToken') or '')
            return json_response(success=True, data=tokens.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class LogoutView(BaseAPIView):

    @requer_autenticacao
    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            self.get_container().encerrar_sessao_service().execute(request.usuario)
            return json_response(
                success=True,
                data={'message': 'Logout realizado com sucesso.'},
            )

        except Exception as e:
            return self.handle_exception(e)


class MeView(BaseAPIView):

    @requer_autenticacao
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            perfil = self.get_container().obter_perfil_service().execute(request.usuario.id)
            return json_response(success=True, data=perfil.to_dict())

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Cadastros por regra
# =============================================================================

def _texto(data: dict, campo: str):
    valor = data.get(campo)
    return str(valor) if valor is not None else None


class CadastroListView(BaseAPIView):
    """
    Base de listagem/criação para uma regra.

    Subclasses definem `regra`; a criação força essa regra,
    independente do corpo enviado.
    """

    regra = Regra.USUARIO

    @requer_regras(Regra.ADMIN)
    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params:
        - busca: Nome ou email
        - incluirInativos: true para listar desativados
        - page / limit
        """
        try:
            service = self.get_container().listar_usuarios_service()
            pagina = service.execute(
                regra=self.regra,
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
            service = self.get_container().criar_usuario_service()

            output = service.execute(
                CriarUsuarioInputDTO(
                    nome=str(data.get('nome') or ''),
                    sobrenome=str(data.get('sobrenome') or ''),
                    email=str(data.get('email') or ''),
                    password=str(data.get('password') or ''),
                    regra=self.regra.value,
                    setor=_texto(data, 'setor'),
                    telefone=_texto(data, 'telefone'),
                    ramal=_texto(data, 'ramal'),
                    entrada=_texto(data, 'entrada'),
                    saida=_texto(data, 'saida'),
                )
            )

            logger.info(f"API: {self.regra.value} criado: {output.id}")
            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class CadastroDetailView(BaseAPIView):
    """Base de detalhe/atualização/exclusão para uma regra."""

    regra = Regra.USUARIO

    @requer_regras(Regra.ADMIN)
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_container().obter_usuario_service().execute(pk, regra=self.regra)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    @requer_regras(Regra.ADMIN)
    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON (todos opcionais):
        {"nome", "sobrenome", "email", "setor", "telefone", "ramal", "avatarUrl", "password"}
        """
        try:
            data = self.parse_body(request)
            service = self.get_container().atualizar_usuario_service()

            output = service.execute(
                AtualizarUsuarioInputDTO(
                    usuario_id=pk,
                    nome=_texto(data, 'nome'),
                    sobrenome=_texto(data, 'sobrenome'),
                    email=_texto(data, 'email'),
                    setor=_texto(data, 'setor'),
                    telefone=_texto(data, 'telefone'),
                    ramal=_texto(data, 'ramal'),
                    avatar_url=_texto(data, 'avatarUrl'),
                    password=_texto(data, 'password'),
                ),
                regra=self.regra,
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    @requer_regras(Regra.ADMIN)
    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            permanente = query_bool(request, 'permanente')
            self.get_container().remover_usuario_service().execute(
                pk,
                request.usuario,
                regra=self.regra,
                permanente=permanente,
            )

            mensagem = (
                f"{self.regra.value.capitalize()} removido permanentemente"
                if permanente
                else f"{self.regra.value.capitalize()} desativado com sucesso"
            )
            return json_response(success=True, data={'message': mensagem, 'id': pk})

        except Exception as e:
            return self.handle_exception(e)


class UsuarioListView(CadastroListView):
    regra = Regra.USUARIO


class UsuarioDetailView(CadastroDetailView):
    regra = Regra.USUARIO


class TecnicoListView(CadastroListView):
    regra = Regra.TECNICO


class TecnicoDetailView(CadastroDetailView):
    regra = Regra.TECNICO


class AdminListView(CadastroListView):
    regra = Regra.ADMIN


class AdminDetailView(CadastroDetailView):
    regra = Regra.ADMIN
    http_method_names = ['delete', 'options']


class CadastroReativarView(BaseAPIView):
    """PATCH /<regra>/<id>/reativar (técnicos: /tecnico/<id>/restaurar)."""

    regra = Regra.USUARIO

    @requer_regras(Regra.ADMIN)
    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_container().reativar_usuario_service().execute(pk, regra=self.regra)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class UsuarioReativarView(CadastroReativarView):
    regra = Regra.USUARIO


class TecnicoRestaurarView(CadastroReativarView):
    regra = Regra.TECNICO


class AdminReativarView(CadastroReativarView):
    regra = Regra.ADMIN


class BuscarUsuarioPorEmailView(BaseAPIView):
    """POST /usuario/email com {"email": "..."}; busca em todas as regras."""

    @requer_regras(Regra.ADMIN)
    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            output = self.get_container().buscar_usuario_por_email_service().execute(
                data.get('email')
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class AlterarSenhaView(BaseAPIView):
    """
    PATCH /usuario/senha

    Body JSON:
    {
        "senhaAtual": "string (obrigatório)",
        "novaSenha": "string (mínimo 8 caracteres)"
    }
    """

    @requer_autenticacao
    def patch(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            self.get_container().alterar_senha_service().execute(
                AlterarSenhaInputDTO(
                    usuario_id=request.usuario.id,
                    senha_atual=str(data.get('senhaAtual') or ''),
                    nova_senha=str(data.get('novaSenha') or ''),
                )
            )
            return json_response(success=True, data={'message': 'Senha alterada com sucesso'})

        except Exception as e:
            return self.handle_exception(e)


class TecnicoHorariosView(BaseAPIView):
    """PUT /tecnico/<id>/horarios com {"entrada": "HH:MM", "saida": "HH:MM"}."""

    @requer_regras(Regra.ADMIN, Regra.TECNICO)
    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            output = self.get_container().definir_expediente_service().execute(
                DefinirExpedienteInputDTO(
                    tecnico_id=pk,
                    entrada=str(data.get('entrada') or ''),
                    saida=str(data.get('saida') or ''),
                ),
                request.usuario,
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

"""
Use Cases (Application Services) do Domínio de Identidade.

Use Cases implementados:
- AutenticarUsuarioService: Login por email/senha
- RenovarTokenService: Troca refresh token por novo par (rotação)
- EncerrarSessaoService: Logout (revoga access token e refresh token)
- ResolverUsuarioAutenticadoService: Token -> UsuarioAutenticado
- ObterPerfilService / ObterUsuarioService / ListarUsuariosService
- BuscarUsuarioPorEmailService
- CriarUsuarioService / AtualizarUsuarioService / RemoverUsuarioService
- ReativarUsuarioService
- AlterarSenhaService
- DefinirExpedienteService

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Sem lógica de infraestrutura
"""

import logging
from typing import Optional

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    AutenticacaoError,
    AcessoNegadoError,
    BusinessRuleViolationError,
    ConflitoError,
    CredenciaisInvalidasError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.shared.paginacao import Pagina, Paginacao
from src.core.shared.tempo import agora

from .entities import (
    ExpedienteEntity,
    Regra,
    Setor,
    UsuarioAutenticado,
    UsuarioEntity,
)
from .dtos import (
    AlterarSenhaInputDTO,
    AtualizarUsuarioInputDTO,
    CriarUsuarioInputDTO,
    DefinirExpedienteInputDTO,
    ExpedienteOutputDTO,
    LoginInputDTO,
    TokensOutputDTO,
    UsuarioOutputDTO,
)
from .ports import (
    ExpedienteRepository,
    PasswordHasher,
    TokenBlacklist,
    TokenService,
    UsuarioRepository,
)

logger = logging.getLogger(__name__)


def _parse_setor(valor: Optional[str]) -> Optional[Setor]:
    if valor in (None, ""):
        return None
    try:
        return Setor.from_string(valor)
    except ValueError as e:
        raise ValidationError(str(e), field="setor")


def _buscar_usuario(
    usuario_repo: UsuarioRepository,
    usuario_id: str,
    regra: Optional[Regra] = None,
) -> UsuarioEntity:
    """Busca usuário, opcionalmente exigindo uma regra (ex: rota /tecnico)."""
    usuario = usuario_repo.get_by_id(usuario_id)
    if not usuario or (regra is not None and usuario.regra != regra):
        tipo = regra.value.capitalize() if regra else "Usuario"
        raise EntityNotFoundError(
            f"{tipo} {usuario_id} não encontrado",
            entity_type=tipo,
            entity_id=usuario_id,
        )
    return usuario


# =============================================================================
# Autenticação
# =============================================================================

class AutenticarUsuarioService:
    """
    Use Case: Login.

    Fluxo:
    1. Buscar usuário pelo email
    2. Verificar senha e situação (ativo, não excluído)
    3. Emitir access + refresh token
    4. Guardar refresh token para rotação

    Qualquer falha resulta na mesma CredenciaisInvalidasError,
    sem indicar se o email existe.
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.uow = uow

    def execute(self, input_dto: LoginInputDTO) -> TokensOutputDTO:
        if not input_dto.email or not input_dto.password:
            raise ValidationError("Email e senha (password) são obrigatórios", field="email")

        with self.uow:
            usuario = self.usuario_repo.get_by_email(input_dto.email)

            if (
                usuario is None
                or not usuario.pode_autenticar
                or not self.password_hasher.verificar(input_dto.password, usuario.password_hash)
            ):
                raise CredenciaisInvalidasError()

            access_token = self.token_service.gerar_access_token(usuario)
            refresh_token = self.token_service.gerar_refresh_token(usuario)

            usuario.registrar_refresh_token(refresh_token)
            self.usuario_repo.save(usuario)

        logger.info(f"Login realizado: {usuario.id} ({usuario.regra.value})")

        return TokensOutputDTO(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.token_service.access_token_ttl,
            usuario=UsuarioOutputDTO.from_entity(usuario),
        )


class RenovarTokenService:
    """
    Use Case: Renovar tokens.

    O refresh token precisa ser exatamente o último emitido para o
    usuário; um token antigo (já rotacionado) é recusado.
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        token_service: TokenService,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.token_service = token_service
        self.uow = uow

    def execute(self, refresh_token: str) -> TokensOutputDTO:
        if not refresh_token:
            raise ValidationError("refreshToken é obrigatório", field="refreshToken")

        claims = self.token_service.decodificar_refresh_token(refresh_token)

        with self.uow:
            usuario = self.usuario_repo.get_by_id(claims.get("id", ""))
            if (
                usuario is None
                or not usuario.pode_autenticar
                or usuario.refresh_token != refresh_token
            ):
                raise AutenticacaoError("Token inválido.")

            access_token = self.token_service.gerar_access_token(usuario)
            novo_refresh = self.token_service.gerar_refresh_token(usuario)
            usuario.registrar_refresh_token(novo_refresh)
            self.usuario_repo.save(usuario)

        return TokensOutputDTO(
            access_token=access_token,
            refresh_token=novo_refresh,
            expires_in=self.token_service.access_token_ttl,
            usuario=UsuarioOutputDTO.from_entity(usuario),
        )


class EncerrarSessaoService:
    """
    Use Case: Logout.

    Revoga o access token (jti) pelo tempo de vida restante e
    descarta o refresh token armazenado.
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        token_blacklist: TokenBlacklist,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.token_blacklist = token_blacklist
        self.uow = uow

    def execute(self, ator: UsuarioAutenticado) -> None:
        if ator.jti:
            restante = 0
            if ator.expira_em:
                restante = int(ator.expira_em - agora().timestamp())
            if restante > 0:
                self.token_blacklist.revogar(ator.jti, restante)

        with self.uow:
            usuario = self.usuario_repo.get_by_id(ator.id)
            if usuario is not None:
                usuario.registrar_refresh_token(None)
                self.usuario_repo.save(usuario)

        logger.info(f"Logout realizado: {ator.id}")


class ResolverUsuarioAutenticadoService:
    """
    Use Case: Resolver o chamador a partir do access token.

    Usado pelos decorators de autenticação das views.

    Raises:
        AutenticacaoError: Token expirado, inválido, revogado ou
            usuário inexistente/inativo
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        token_service: TokenService,
        token_blacklist: TokenBlacklist,
    ):
        self.usuario_repo = usuario_repo
        self.token_service = token_service
        self.token_blacklist = token_blacklist

    def execute(self, token: str) -> UsuarioAutenticado:
        claims = self.token_service.decodificar_access_token(token)

        jti = claims.get("jti")
        if jti and self.token_blacklist.esta_revogado(jti):
            raise AutenticacaoError("Token inválido.")

        usuario = self.usuario_repo.get_by_id(claims.get("id", ""))
        if usuario is None or not usuario.pode_autenticar:
            raise AutenticacaoError("Token inválido.")

        return UsuarioAutenticado(
            id=usuario.id,
            regra=usuario.regra,
            email=usuario.email,
            nome=usuario.nome_completo,
            jti=jti,
            expira_em=claims.get("exp"),
        )


# =============================================================================
# Consulta
# =============================================================================

class ObterPerfilService:
    """Use Case: Dados do próprio usuário (/auth/me)."""

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        expediente_repo: ExpedienteRepository,
    ):
        self.usuario_repo = usuario_repo
        self.expediente_repo = expediente_repo

    def execute(self, usuario_id: str) -> UsuarioOutputDTO:
        usuario = _buscar_usuario(self.usuario_repo, usuario_id)
        expediente = None
        if usuario.regra == Regra.TECNICO:
            expediente = self.expediente_repo.get_ativo_por_usuario(usuario.id)
        return UsuarioOutputDTO.from_entity(usuario, expediente)


class ObterUsuarioService(ObterPerfilService):
    """Use Case: Detalhe de um usuário de uma regra específica."""

    def execute(self, usuario_id: str, regra: Optional[Regra] = None) -> UsuarioOutputDTO:
        usuario = _buscar_usuario(self.usuario_repo, usuario_id, regra)
        expediente = None
        if usuario.regra == Regra.TECNICO:
            expediente = self.expediente_repo.get_ativo_por_usuario(usuario.id)
        return UsuarioOutputDTO.from_entity(usuario, expediente)


class BuscarUsuarioPorEmailService(ObterPerfilService):
    """Use Case: Localizar cadastro pelo email (inclui desativados)."""

    def execute(self, email: str) -> UsuarioOutputDTO:
        if not email or not isinstance(email, str):
            raise ValidationError("Email é obrigatório", field="email")

        usuario = self.usuario_repo.get_by_email(email)
        if not usuario:
            raise EntityNotFoundError(
                "Usuário não encontrado",
                entity_type="Usuario",
                entity_id=email,
            )
        return super().execute(usuario.id)


class ListarUsuariosService:
    """
    Use Case: Listar usuários de uma regra com busca e paginação.

    Não usa UoW pois é operação de leitura.
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        expediente_repo: ExpedienteRepository,
    ):
        self.usuario_repo = usuario_repo
        self.expediente_repo = expediente_repo

    def execute(
        self,
        regra: Regra,
        paginacao: Paginacao,
        busca: Optional[str] = None,
        incluir_inativos: bool = False,
    ) -> Pagina[UsuarioOutputDTO]:
        pagina = self.usuario_repo.listar(
            paginacao,
            regra=regra,
            busca=busca,
            incluir_inativos=incluir_inativos,
        )

        def para_dto(usuario: UsuarioEntity) -> UsuarioOutputDTO:
            expediente = None
            if usuario.regra == Regra.TECNICO:
                expediente = self.expediente_repo.get_ativo_por_usuario(usuario.id)
            return UsuarioOutputDTO.from_entity(usuario, expediente)

        return pagina.map(para_dto)


# =============================================================================
# Cadastro
# =============================================================================

class CriarUsuarioService:
    """
    Use Case: Cadastrar usuário, técnico ou administrador.

    Fluxo:
    1. Validar senha em texto puro e regra
    2. Garantir email único
    3. Criar entidade com hash da senha
    4. Técnicos ganham expediente (padrão 08:00-17:00)
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        expediente_repo: ExpedienteRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.expediente_repo = expediente_repo
        self.password_hasher = password_hasher
        self.uow = uow

    def execute(self, input_dto: CriarUsuarioInputDTO) -> UsuarioOutputDTO:
        try:
            regra = Regra.from_string(input_dto.regra)
        except ValueError as e:
            raise ValidationError(str(e), field="regra")

        UsuarioEntity.validar_senha(input_dto.password)
        setor = _parse_setor(input_dto.setor)

        expediente = None
        with self.uow:
            if self.usuario_repo.existe_email(input_dto.email or ""):
                raise ConflitoError("Email já cadastrado", field="email")

            usuario = UsuarioEntity.criar(
                nome=input_dto.nome,
                sobrenome=input_dto.sobrenome,
                email=input_dto.email,
                password_hash=self.password_hasher.gerar_hash(input_dto.password),
                regra=regra,
                setor=setor,
                telefone=input_dto.telefone,
                ramal=input_dto.ramal,
            )
            self.usuario_repo.save(usuario)

            if regra == Regra.TECNICO:
                expediente = ExpedienteEntity.criar(
                    usuario_id=usuario.id,
                    entrada=input_dto.entrada,
                    saida=input_dto.saida,
                )
                self.expediente_repo.save(expediente)

        logger.info(f"Usuário criado: {usuario.id} ({regra.value})")

        return UsuarioOutputDTO.from_entity(usuario, expediente)


class AtualizarUsuarioService:
    """Use Case: Atualização parcial de dados cadastrais."""

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow

    def execute(
        self,
        input_dto: AtualizarUsuarioInputDTO,
        regra: Optional[Regra] = None,
    ) -> UsuarioOutputDTO:
        with self.uow:
            usuario = _buscar_usuario(self.usuario_repo, input_dto.usuario_id, regra)

            if input_dto.email and self.usuario_repo.existe_email(
                input_dto.email, excluir_id=usuario.id
            ):
                raise ConflitoError("Email já cadastrado", field="email")

            usuario.atualizar_dados(
                nome=input_dto.nome,
                sobrenome=input_dto.sobrenome,
                email=input_dto.email,
                setor=_parse_setor(input_dto.setor),
                telefone=input_dto.telefone,
                ramal=input_dto.ramal,
                avatar_url=input_dto.avatar_url,
            )

            if input_dto.password:
                UsuarioEntity.validar_senha(input_dto.password)
                usuario.alterar_senha(self.password_hasher.gerar_hash(input_dto.password))

            self.usuario_repo.save(usuario)

        return UsuarioOutputDTO.from_entity(usuario)


class RemoverUsuarioService:
    """
    Use Case: Excluir usuário.

    Padrão é exclusão lógica (desativa). `permanente=True` remove o
    registro; só é aceita quando o usuário não tem chamados vinculados,
    o que o repositório sinaliza com BusinessRuleViolationError.
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        expediente_repo: ExpedienteRepository,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.expediente_repo = expediente_repo
        self.uow = uow

    def execute(
        self,
        usuario_id: str,
        ator: UsuarioAutenticado,
        regra: Optional[Regra] = None,
        permanente: bool = False,
    ) -> None:
        if usuario_id == ator.id:
            raise BusinessRuleViolationError(
                "Não é possível excluir o próprio usuário",
                rule="autoexclusao_proibida",
            )

        with self.uow:
            usuario = _buscar_usuario(self.usuario_repo, usuario_id, regra)

            if permanente:
                self.expediente_repo.delete_por_usuario(usuario.id)
                self.usuario_repo.delete(usuario.id)
            else:
                usuario.desativar()
                self.usuario_repo.save(usuario)
                expediente = self.expediente_repo.get_ativo_por_usuario(usuario.id)
                if expediente:
                    expediente.desativar()
                    self.expediente_repo.save(expediente)

        logger.info(
            f"Usuário {usuario_id} excluído por {ator.id} "
            f"({'permanente' if permanente else 'lógica'})"
        )


class ReativarUsuarioService:
    """
    Use Case: Desfazer a exclusão lógica de um cadastro.

    O expediente desativado junto com o técnico não volta; ele recebe
    um novo no horário padrão, ajustável pelo DefinirExpedienteService.
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        expediente_repo: ExpedienteRepository,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.expediente_repo = expediente_repo
        self.uow = uow

    def execute(self, usuario_id: str, regra: Optional[Regra] = None) -> UsuarioOutputDTO:
        expediente = None
        with self.uow:
            usuario = _buscar_usuario(self.usuario_repo, usuario_id, regra)
            usuario.reativar()
            self.usuario_repo.save(usuario)

            if usuario.regra == Regra.TECNICO:
                expediente = self.expediente_repo.get_ativo_por_usuario(usuario.id)
                if expediente is None:
                    expediente = ExpedienteEntity.criar(usuario.id)
                    self.expediente_repo.save(expediente)

        logger.info(f"Usuário {usuario_id} reativado ({usuario.regra.value})")
        return UsuarioOutputDTO.from_entity(usuario, expediente)


class AlterarSenhaService:
    """Use Case: O próprio usuário troca a senha (exige a senha atual)."""

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow

    def execute(self, input_dto: AlterarSenhaInputDTO) -> None:
        UsuarioEntity.validar_senha(input_dto.nova_senha)

        with self.uow:
            usuario = _buscar_usuario(self.usuario_repo, input_dto.usuario_id)
            if not self.password_hasher.verificar(input_dto.senha_atual or "", usuario.password_hash):
                raise CredenciaisInvalidasError("Senha atual incorreta.")
            usuario.alterar_senha(self.password_hasher.gerar_hash(input_dto.nova_senha))
            self.usuario_repo.save(usuario)


class DefinirExpedienteService:
    """
    Use Case: Definir horário de trabalho de um técnico.

    ADMIN altera qualquer técnico; o técnico só altera o próprio.
    O expediente anterior é desativado (um ativo por técnico).
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        expediente_repo: ExpedienteRepository,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.expediente_repo = expediente_repo
        self.uow = uow

    def execute(
        self,
        input_dto: DefinirExpedienteInputDTO,
        ator: UsuarioAutenticado,
    ) -> ExpedienteOutputDTO:
        if ator.regra == Regra.TECNICO and ator.id != input_dto.tecnico_id:
            raise AcessoNegadoError()

        ExpedienteEntity.validar_janela(input_dto.entrada, input_dto.saida)

        with self.uow:
            tecnico = _buscar_usuario(self.usuario_repo, input_dto.tecnico_id, Regra.TECNICO)

            atual = self.expediente_repo.get_ativo_por_usuario(tecnico.id)
            if atual:
                atual.desativar()
                self.expediente_repo.save(atual)

            novo = ExpedienteEntity.criar(
                usuario_id=tecnico.id,
                entrada=input_dto.entrada,
                saida=input_dto.saida,
            )
            self.expediente_repo.save(novo)

        return ExpedienteOutputDTO.from_entity(novo)

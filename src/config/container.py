"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Resource: Cliente MongoDB (um por processo, fechado no shutdown)
- Singleton: Uma instância para toda app (repositories, tokens)
- Factory: Nova instância por chamada (services, UoW)

Imports de adapters Django são adiados até o primeiro uso do
provider, para que o container possa ser importado antes de
django.setup().
"""

from typing import Optional
import atexit

from dependency_injector import containers, providers
from django.utils import timezone

from src.adapters.mongodb.historico import init_mongo_client


def _lazy(caminho: str):
    """Construtor com import tardio: 'pacote.modulo.Classe'."""
    modulo, nome = caminho.rsplit('.', 1)

    def construir(*args, **kwargs):
        return getattr(__import__(modulo, fromlist=[nome]), nome)(*args, **kwargs)

    return construir


def _setting(nome: str, padrao=None):
    from django.conf import settings
    return getattr(settings, nome, padrao)


def _event_publisher():
    from src.adapters.django_app.events.publishers import get_event_publisher
    return get_event_publisher(_setting('EVENT_PUBLISHER_MODE', 'sync'))


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Infrastructure: MongoDB, publisher, tokens, senhas
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from src.config.container import get_container

        service = get_container().abrir_chamado_service()
        output = service.execute(input_dto, ator)

    Nos testes, qualquer provider pode ser sobrescrito:

        container.historico_chamado_repository.override(
            providers.Object(InMemoryHistoricoChamadoRepository())
        )
    """

    # =========================================================================
    # Infrastructure
    # =========================================================================

    mongo_client = providers.Resource(
        init_mongo_client,
        uri=providers.Callable(_setting, 'MONGO_URI', 'mongodb://localhost:27017'),
    )

    mongo_database = providers.Callable(
        lambda client, nome: client[nome],
        client=mongo_client,
        nome=providers.Callable(_setting, 'MONGO_DB_NAME', 'helpme'),
    )

    event_publisher = providers.Singleton(_event_publisher)

    password_hasher = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.senhas.DjangoPasswordHasher')
    )

    token_service = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.tokens.JoseTokenService')
    )

    token_blacklist = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.tokens.CacheTokenBlacklist')
    )

    # Horário local para a janela de expediente
    relogio = providers.Object(timezone.localtime)

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    usuario_repository = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.repositories.DjangoUsuarioRepository')
    )

    expediente_repository = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.repositories.DjangoExpedienteRepository')
    )

    servico_repository = providers.Singleton(
        _lazy('src.adapters.django_app.chamados.repositories.DjangoServicoRepository')
    )

    chamado_repository = providers.Singleton(
        _lazy('src.adapters.django_app.chamados.repositories.DjangoChamadoRepository')
    )

    historico_chamado_repository = providers.Singleton(
        _lazy('src.adapters.mongodb.historico.MongoHistoricoChamadoRepository'),
        database=mongo_database,
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy('src.adapters.django_app.shared.unit_of_work.DjangoUnitOfWork'),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services: Identidade
    # =========================================================================

    autenticar_usuario_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.AutenticarUsuarioService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        token_service=token_service,
        uow=unit_of_work,
    )

    renovar_token_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.RenovarTokenService'),
        usuario_repo=usuario_repository,
        token_service=token_service,
        uow=unit_of_work,
    )

    encerrar_sessao_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.EncerrarSessaoService'),
        usuario_repo=usuario_repository,
        token_blacklist=token_blacklist,
        uow=unit_of_work,
    )

    resolver_usuario_autenticado_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.ResolverUsuarioAutenticadoService'),
        usuario_repo=usuario_repository,
        token_service=token_service,
        token_blacklist=token_blacklist,
    )

    obter_perfil_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.ObterPerfilService'),
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
    )

    obter_usuario_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.ObterUsuarioService'),
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
    )

    buscar_usuario_por_email_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.BuscarUsuarioPorEmailService'),
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
    )

    listar_usuarios_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.ListarUsuariosService'),
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
    )

    criar_usuario_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.CriarUsuarioService'),
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )

    atualizar_usuario_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.AtualizarUsuarioService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )

    remover_usuario_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.RemoverUsuarioService'),
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
        uow=unit_of_work,
    )

    reativar_usuario_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.ReativarUsuarioService'),
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
        uow=unit_of_work,
    )

    alterar_senha_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.AlterarSenhaService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )

    definir_expediente_service = providers.Factory(
        _lazy('src.core.identidade.use_cases.DefinirExpedienteService'),
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services: Catálogo
    # =========================================================================

    criar_servico_service = providers.Factory(
        _lazy('src.core.catalogo.use_cases.CriarServicoService'),
        servico_repo=servico_repository,
        uow=unit_of_work,
    )

    atualizar_servico_service = providers.Factory(
        _lazy('src.core.catalogo.use_cases.AtualizarServicoService'),
        servico_repo=servico_repository,
        uow=unit_of_work,
    )

    obter_servico_service = providers.Factory(
        _lazy('src.core.catalogo.use_cases.ObterServicoService'),
        servico_repo=servico_repository,
    )

    listar_servicos_service = providers.Factory(
        _lazy('src.core.catalogo.use_cases.ListarServicosService'),
        servico_repo=servico_repository,
    )

    desativar_servico_service = providers.Factory(
        _lazy('src.core.catalogo.use_cases.DesativarServicoService'),
        servico_repo=servico_repository,
        uow=unit_of_work,
    )

    reativar_servico_service = providers.Factory(
        _lazy('src.core.catalogo.use_cases.ReativarServicoService'),
        servico_repo=servico_repository,
        uow=unit_of_work,
    )

    excluir_servico_service = providers.Factory(
        _lazy('src.core.catalogo.use_cases.ExcluirServicoService'),
        servico_repo=servico_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services: Chamados
    # =========================================================================

    abrir_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.AbrirChamadoService'),
        chamado_repo=chamado_repository,
        servico_repo=servico_repository,
        historico_repo=historico_chamado_repository,
        uow=unit_of_work,
    )

    atribuir_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.AtribuirChamadoService'),
        chamado_repo=chamado_repository,
        usuario_repo=usuario_repository,
        expediente_repo=expediente_repository,
        historico_repo=historico_chamado_repository,
        uow=unit_of_work,
        relogio=relogio,
    )

    encerrar_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.EncerrarChamadoService'),
        chamado_repo=chamado_repository,
        usuario_repo=usuario_repository,
        historico_repo=historico_chamado_repository,
        uow=unit_of_work,
    )

    cancelar_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.CancelarChamadoService'),
        chamado_repo=chamado_repository,
        historico_repo=historico_chamado_repository,
        uow=unit_of_work,
    )

    alterar_status_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.AlterarStatusChamadoService'),
        atribuir=atribuir_chamado_service,
        encerrar=encerrar_chamado_service,
        cancelar=cancelar_chamado_service,
    )

    reabrir_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.ReabrirChamadoService'),
        chamado_repo=chamado_repository,
        historico_repo=historico_chamado_repository,
        uow=unit_of_work,
    )

    excluir_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.ExcluirChamadoService'),
        chamado_repo=chamado_repository,
        uow=unit_of_work,
    )

    obter_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.ObterChamadoService'),
        chamado_repo=chamado_repository,
    )

    listar_historico_chamado_service = providers.Factory(
        _lazy('src.core.chamados.use_cases.ListarHistoricoChamadoService'),
        chamado_repo=chamado_repository,
        historico_repo=historico_chamado_repository,
    )

    # Leitura (sem UoW)
    fila_de_chamados_service = providers.Factory(
        _lazy('src.core.chamados.fila.FilaDeChamadosService'),
        chamado_repo=chamado_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization). O cliente MongoDB é
    fechado na saída do processo.
    """
    global _container

    if _container is None:
        _container = Container()
        atexit.register(_container.shutdown_resources)

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Libera os resources do container atual e permite criar um novo.
    """
    global _container
    if _container is not None:
        _container.shutdown_resources()
    _container = None

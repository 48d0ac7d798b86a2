"""
Exceções de Domínio do Help-Me.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.
Cada exceção corresponde a um status HTTP no adapter de API.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)            -> 400
    ├── AutenticacaoError (token ausente/inválido)        -> 401
    │   └── CredenciaisInvalidasError (login recusado)    -> 401
    ├── AcessoNegadoError (regra sem permissão)           -> 403
    ├── EntityNotFoundError (entidade não existe)         -> 404
    ├── ConflitoError (chave única duplicada)             -> 409
    ├── BusinessRuleViolationError (regra de negócio)     -> 422
    └── LimiteRequisicoesExcedidoError (rate limit)       -> 429
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            chamado.encerrar(descricao)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    A mensagem sempre cita o campo problemático, pois clientes
    da API dependem dela para exibir o erro ao usuário.

    Example:
        if not status:
            raise ValidationError("Parâmetro status é obrigatório", field="status")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class AutenticacaoError(DomainException):
    """
    Falha de autenticação: token ausente, expirado ou inválido.

    A mensagem é genérica de propósito e segue para o cliente.
    """

    def __init__(self, message: str = "Token inválido."):
        super().__init__(message, "AUTHENTICATION_ERROR")


class CredenciaisInvalidasError(AutenticacaoError):
    """Email ou senha não conferem (ou usuário inativo)."""

    def __init__(self, message: str = "Credenciais inválidas."):
        super().__init__(message)
        self.code = "INVALID_CREDENTIALS"


class AcessoNegadoError(DomainException):
    """
    Regra do usuário não permite a operação.

    Nunca informa qual regra seria necessária.
    """

    def __init__(self, message: str = "Acesso negado."):
        super().__init__(message, "FORBIDDEN")


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Example:
        chamado = repo.get_by_id(chamado_id)
        if not chamado:
            raise EntityNotFoundError(f"Chamado {chamado_id} não encontrado")
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class ConflitoError(DomainException):
    """Violação de unicidade (email ou nome de serviço já cadastrado)."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message, "CONFLICT")


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Lançada quando uma operação viola uma regra de negócio
    estabelecida no domínio.

    Example:
        if chamado.status == ChamadoStatus.ENCERRADO:
            raise BusinessRuleViolationError(
                "Chamado encerrado não pode ser cancelado",
                rule="chamado_encerrado_imutavel",
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class LimiteRequisicoesExcedidoError(DomainException):
    """
    Orçamento de requisições esgotado para o IP.

    Attributes:
        retry_after: Segundos até a janela reiniciar
    """

    def __init__(self, message: str, retry_after: int = 0):
        self.retry_after = retry_after
        super().__init__(message, "RATE_LIMITED")

"""
Entidades do Domínio de Identidade.

Entidades:
- Regra: Papel do usuário (enum fechado)
- Setor: Setor da empresa ao qual o usuário pertence
- UsuarioEntity: Usuário do sistema (usuário final, técnico ou admin)
- ExpedienteEntity: Janela de trabalho de um técnico
- UsuarioAutenticado: Identidade resolvida a partir do token

Regras de Negócio Encapsuladas:
- Email válido e normalizado em minúsculas
- Usuário nunca é removido no fluxo normal, apenas desativado
- Técnico só atende dentro do expediente
"""

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Optional
import re
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)
from src.core.shared.tempo import agora


EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
HORARIO_REGEX = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class Regra(Enum):
    """
    Papéis de acesso.

    A autorização compara membros deste enum, nunca strings soltas.
    """

    USUARIO = "USUARIO"
    TECNICO = "TECNICO"
    ADMIN = "ADMIN"

    @classmethod
    def from_string(cls, value: str) -> "Regra":
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Regra inválida: {value}")


class Setor(Enum):
    """Setores atendidos pelo helpdesk."""

    ADMINISTRACAO = "ADMINISTRACAO"
    ALMOXARIFADO = "ALMOXARIFADO"
    CALL_CENTER = "CALL_CENTER"
    COMERCIAL = "COMERCIAL"
    DEPARTAMENTO_PESSOAL = "DEPARTAMENTO_PESSOAL"
    FINANCEIRO = "FINANCEIRO"
    JURIDICO = "JURIDICO"
    LOGISTICA = "LOGISTICA"
    MARKETING = "MARKETING"
    QUALIDADE = "QUALIDADE"
    RECURSOS_HUMANOS = "RECURSOS_HUMANOS"
    TECNOLOGIA_INFORMACAO = "TECNOLOGIA_INFORMACAO"

    @classmethod
    def from_string(cls, value: str) -> "Setor":
        try:
            return cls[value.strip().upper().replace(" ", "_")]
        except (KeyError, AttributeError):
            raise ValueError(f"Setor inválido: {value}")


@dataclass
class UsuarioEntity:
    """
    Entidade de Domínio: Usuário.

    Um mesmo agregado representa usuários finais, técnicos e
    administradores; o que muda é a `regra`.

    Invariantes:
    - Nome entre 2 e 100 caracteres
    - Email em formato válido (armazenado em minúsculas)
    - password_hash nunca é a senha em texto puro

    Attributes:
        id: Identificador único (UUID)
        nome / sobrenome: Nome de exibição
        email: Login do usuário (único)
        password_hash: Hash gerado pelo PasswordHasher
        regra: Papel de acesso
        setor: Setor do usuário (opcional para técnicos/admins)
        ativo: False quando desativado ou excluído
        refresh_token: Último refresh token emitido (rotação)
        deletado_em: Preenchido na exclusão lógica
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    sobrenome: str = ""
    email: str = ""
    password_hash: str = ""
    regra: Regra = Regra.USUARIO
    setor: Optional[Setor] = None
    telefone: Optional[str] = None
    ramal: Optional[str] = None
    avatar_url: Optional[str] = None
    ativo: bool = True
    refresh_token: Optional[str] = None
    gerado_em: datetime = field(default_factory=agora)
    atualizado_em: datetime = field(default_factory=agora)
    deletado_em: Optional[datetime] = None

    NOME_MIN_LENGTH: int = 2
    NOME_MAX_LENGTH: int = 100
    SENHA_MIN_LENGTH: int = 8

    @classmethod
    def criar(
        cls,
        nome: str,
        sobrenome: str,
        email: str,
        password_hash: str,
        regra: Regra = Regra.USUARIO,
        setor: Optional[Setor] = None,
        telefone: Optional[str] = None,
        ramal: Optional[str] = None,
    ) -> "UsuarioEntity":
        """
        Factory method para criar usuário com validações.

        A senha chega já transformada em hash; a validação do
        texto puro acontece em `validar_senha` antes do hash.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls.validar_nome(nome)
        cls.validar_email(email)

        if regra == Regra.USUARIO and setor is None:
            raise ValidationError("Setor é obrigatório para usuários", field="setor")

        return cls(
            nome=nome.strip(),
            sobrenome=(sobrenome or "").strip(),
            email=email.strip().lower(),
            password_hash=password_hash,
            regra=regra,
            setor=setor,
            telefone=telefone,
            ramal=ramal,
        )

    @classmethod
    def validar_nome(cls, nome: str) -> None:
        if not nome or not nome.strip():
            raise ValidationError("Nome é obrigatório", field="nome")

        nome_limpo = nome.strip()
        if len(nome_limpo) < cls.NOME_MIN_LENGTH:
            raise ValidationError(
                f"Nome deve ter pelo menos {cls.NOME_MIN_LENGTH} caracteres",
                field="nome",
            )
        if len(nome_limpo) > cls.NOME_MAX_LENGTH:
            raise ValidationError(
                f"Nome deve ter no máximo {cls.NOME_MAX_LENGTH} caracteres",
                field="nome",
            )

    @classmethod
    def validar_email(cls, email: str) -> None:
        if not email or not EMAIL_REGEX.match(email.strip()):
            raise ValidationError("Email inválido", field="email")

    @classmethod
    def validar_senha(cls, senha: str) -> None:
        if not senha or len(senha) < cls.SENHA_MIN_LENGTH:
            raise ValidationError(
                f"Senha (password) deve ter pelo menos {cls.SENHA_MIN_LENGTH} caracteres",
                field="password",
            )

    @property
    def nome_completo(self) -> str:
        return f"{self.nome} {self.sobrenome}".strip()

    @property
    def pode_autenticar(self) -> bool:
        """Somente usuários ativos e não excluídos fazem login."""
        return self.ativo and self.deletado_em is None

    def atualizar_dados(
        self,
        nome: Optional[str] = None,
        sobrenome: Optional[str] = None,
        email: Optional[str] = None,
        setor: Optional[Setor] = None,
        telefone: Optional[str] = None,
        ramal: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> None:
        """Atualização parcial: apenas campos informados são alterados."""
        if nome is not None:
            self.validar_nome(nome)
            self.nome = nome.strip()
        if sobrenome is not None:
            self.sobrenome = sobrenome.strip()
        if email is not None:
            self.validar_email(email)
            self.email = email.strip().lower()
        if setor is not None:
            self.setor = setor
        if telefone is not None:
            self.telefone = telefone
        if ramal is not None:
            self.ramal = ramal
        if avatar_url is not None:
            self.avatar_url = avatar_url
        self._atualizar_timestamp()

    def alterar_senha(self, novo_hash: str) -> None:
        self.password_hash = novo_hash
        self.refresh_token = None
        self._atualizar_timestamp()

    def registrar_refresh_token(self, token: Optional[str]) -> None:
        self.refresh_token = token
        self._atualizar_timestamp()

    def desativar(self) -> None:
        """
        Exclusão lógica.

        Raises:
            BusinessRuleViolationError: Se já estiver excluído
        """
        if self.deletado_em is not None:
            raise BusinessRuleViolationError(
                "Usuário já foi excluído",
                rule="usuario_ja_excluido",
            )
        self.ativo = False
        self.deletado_em = agora()
        self.refresh_token = None
        self._atualizar_timestamp()

    def reativar(self) -> None:
        """Desfaz a exclusão lógica; a senha e os dados são mantidos."""
        if self.ativo and self.deletado_em is None:
            raise BusinessRuleViolationError(
                "Usuário já está ativo",
                rule="usuario_ja_ativo",
            )
        self.ativo = True
        self.deletado_em = None
        self._atualizar_timestamp()

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = agora()

    def __str__(self) -> str:
        return f"{self.nome_completo} <{self.email}> ({self.regra.value})"


@dataclass
class ExpedienteEntity:
    """
    Entidade de Domínio: Expediente (turno de trabalho).

    Um técnico tem no máximo um expediente ativo. Horários são
    strings HH:MM no fuso local do helpdesk.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    usuario_id: str = ""
    entrada: str = "08:00"
    saida: str = "17:00"
    ativo: bool = True
    gerado_em: datetime = field(default_factory=agora)
    deletado_em: Optional[datetime] = None

    ENTRADA_PADRAO: str = "08:00"
    SAIDA_PADRAO: str = "17:00"

    @classmethod
    def criar(
        cls,
        usuario_id: str,
        entrada: Optional[str] = None,
        saida: Optional[str] = None,
    ) -> "ExpedienteEntity":
        entrada = entrada or cls.ENTRADA_PADRAO
        saida = saida or cls.SAIDA_PADRAO
        cls.validar_janela(entrada, saida)
        return cls(usuario_id=usuario_id, entrada=entrada, saida=saida)

    @staticmethod
    def validar_janela(entrada: str, saida: str) -> None:
        """
        Raises:
            ValidationError: Formato diferente de HH:MM ou entrada >= saída
        """
        if not entrada or not HORARIO_REGEX.match(entrada):
            raise ValidationError("Horário de entrada inválido, use HH:MM", field="entrada")
        if not saida or not HORARIO_REGEX.match(saida):
            raise ValidationError("Horário de saída inválido, use HH:MM", field="saida")
        if _para_time(entrada) >= _para_time(saida):
            raise ValidationError(
                "Horário de entrada deve ser anterior ao de saída",
                field="entrada",
            )

    def esta_no_horario(self, momento: datetime) -> bool:
        """Verifica se o horário local de `momento` cai na janela (inclusiva)."""
        if not self.ativo or self.deletado_em is not None:
            return False
        atual = time(momento.hour, momento.minute)
        return _para_time(self.entrada) <= atual <= _para_time(self.saida)

    def desativar(self) -> None:
        self.ativo = False
        self.deletado_em = agora()


@dataclass(frozen=True)
class UsuarioAutenticado:
    """
    Identidade do chamador, resolvida a partir do access token
    e confirmada no repositório.
    """

    id: str
    regra: Regra
    email: str = ""
    nome: str = ""
    jti: Optional[str] = None
    expira_em: Optional[int] = None

    def tem_regra(self, *regras: Regra) -> bool:
        return self.regra in regras

    @property
    def is_admin(self) -> bool:
        return self.regra == Regra.ADMIN


def _para_time(horario: str) -> time:
    hora, minuto = horario.split(":")
    return time(int(hora), int(minuto))

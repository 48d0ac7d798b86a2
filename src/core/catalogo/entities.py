"""
Entidades do Catálogo de Serviços.

Serviços são as categorias de atendimento escolhidas na abertura
de um chamado (ex: "Suporte de Rede", "Instalação de Software").
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)
from src.core.shared.tempo import agora


@dataclass
class ServicoEntity:
    """
    Entidade de Domínio: Serviço.

    Invariantes:
    - Nome entre 3 e 100 caracteres (único, verificado no use case)
    - Descrição com no máximo 500 caracteres
    - Serviço excluído não pode ser reativado
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    descricao: Optional[str] = None
    ativo: bool = True
    gerado_em: datetime = field(default_factory=agora)
    atualizado_em: datetime = field(default_factory=agora)
    deletado_em: Optional[datetime] = None

    NOME_MIN_LENGTH: int = 3
    NOME_MAX_LENGTH: int = 100
    DESCRICAO_MAX_LENGTH: int = 500

    @classmethod
    def criar(cls, nome: str, descricao: Optional[str] = None) -> "ServicoEntity":
        cls._validar_nome(nome)
        cls._validar_descricao(descricao)
        return cls(
            nome=nome.strip(),
            descricao=descricao.strip() if descricao else None,
        )

    @classmethod
    def _validar_nome(cls, nome: str) -> None:
        if not nome or not nome.strip():
            raise ValidationError("Nome do serviço é obrigatório", field="nome")
        tamanho = len(nome.strip())
        if tamanho < cls.NOME_MIN_LENGTH or tamanho > cls.NOME_MAX_LENGTH:
            raise ValidationError(
                f"Nome do serviço deve ter entre {cls.NOME_MIN_LENGTH} "
                f"e {cls.NOME_MAX_LENGTH} caracteres",
                field="nome",
            )

    @classmethod
    def _validar_descricao(cls, descricao: Optional[str]) -> None:
        if descricao and len(descricao.strip()) > cls.DESCRICAO_MAX_LENGTH:
            raise ValidationError(
                f"Descrição (descricao) deve ter no máximo {cls.DESCRICAO_MAX_LENGTH} caracteres",
                field="descricao",
            )

    @property
    def disponivel(self) -> bool:
        """Pode ser usado na abertura de chamados."""
        return self.ativo and self.deletado_em is None

    def atualizar(self, nome: Optional[str] = None, descricao: Optional[str] = None) -> None:
        if nome is not None:
            self._validar_nome(nome)
            self.nome = nome.strip()
        if descricao is not None:
            self._validar_descricao(descricao)
            self.descricao = descricao.strip() or None
        self.atualizado_em = agora()

    def desativar(self) -> None:
        if not self.ativo:
            raise BusinessRuleViolationError(
                "Serviço já está desativado",
                rule="servico_ja_desativado",
            )
        self.ativo = False
        self.atualizado_em = agora()

    def reativar(self) -> None:
        if self.deletado_em is not None:
            raise BusinessRuleViolationError(
                "Serviço excluído não pode ser reativado",
                rule="servico_excluido",
            )
        if self.ativo:
            raise BusinessRuleViolationError(
                "Serviço já está ativo",
                rule="servico_ja_ativo",
            )
        self.ativo = True
        self.atualizado_em = agora()

    def excluir(self) -> None:
        """Exclusão lógica: some das listagens e da abertura de chamados."""
        self.ativo = False
        self.deletado_em = agora()
        self.atualizado_em = self.deletado_em

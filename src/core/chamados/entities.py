"""
Entidades do Domínio de Chamados.

Entidades:
- ChamadoEntity: Agregado principal (o chamado de suporte)
- ChamadoStatus: Estados possíveis de um chamado
- TipoHistorico: Natureza de uma entrada de histórico
- HistoricoChamado: Registro imutável de uma transição

Regras de Negócio Encapsuladas:
- Transições de status controladas
- Encerramento exige descrição e registra data
- Reabertura somente até 48 horas após o encerramento
- Numeração sequencial de OS (INC0001, INC0002, ...)
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional
import re
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)
from src.core.shared.tempo import agora


OS_PREFIXO = "INC"
OS_REGEX = re.compile(r"^INC(\d+)$")


class ChamadoStatus(Enum):
    """
    Estados possíveis de um chamado.

    Fluxo de Estados:
        ABERTO ⇄ REABERTO → EM_ATENDIMENTO → ENCERRADO
                                                 ↓
                                             REABERTO (até 48h)

        ABERTO / REABERTO / EM_ATENDIMENTO → CANCELADO (terminal)
    """

    ABERTO = "ABERTO"
    EM_ATENDIMENTO = "EM_ATENDIMENTO"
    ENCERRADO = "ENCERRADO"
    REABERTO = "REABERTO"
    CANCELADO = "CANCELADO"

    @classmethod
    def from_string(cls, value: str) -> "ChamadoStatus":
        """
        Converte string para enum.

        Raises:
            ValueError: Se valor inválido
        """
        try:
            return cls[value.strip().upper().replace(" ", "_")]
        except (KeyError, AttributeError):
            raise ValueError(f"Status inválido: {value}")

    @classmethod
    def na_fila(cls) -> tuple:
        """Status que aguardam um técnico."""
        return (cls.ABERTO, cls.REABERTO)


class TipoHistorico(Enum):
    ABERTURA = "ABERTURA"
    STATUS = "STATUS"
    REABERTURA = "REABERTURA"
    CANCELAMENTO = "CANCELAMENTO"


def formatar_os(numero: int) -> str:
    return f"{OS_PREFIXO}{numero:04d}"


def proxima_os(ultima_os: Optional[str]) -> str:
    """
    Calcula a próxima OS a partir da última emitida.

    Example:
        proxima_os(None)       -> "INC0001"
        proxima_os("INC0041")  -> "INC0042"
    """
    if not ultima_os:
        return formatar_os(1)
    match = OS_REGEX.match(ultima_os)
    if not match:
        return formatar_os(1)
    return formatar_os(int(match.group(1)) + 1)


@dataclass
class ChamadoEntity:
    """
    Entidade de Domínio: Chamado.

    Invariantes:
    - Exatamente um solicitante (usuario_id)
    - No máximo um técnico atribuído (tecnico_id)
    - Pelo menos um serviço vinculado
    - Chamado cancelado não pode ser modificado

    Attributes:
        id: Identificador único (UUID)
        os: Número da ordem de serviço (INC0001)
        descricao: Problema relatado pelo usuário
        descricao_encerramento: Solução (ou justificativa de cancelamento)
        status: Estado atual
        usuario_id: Solicitante
        tecnico_id: Técnico responsável
        servicos: Nomes dos serviços vinculados (Ordens de Serviço)
        encerrado_em: Momento do encerramento/cancelamento
        deletado_em: Exclusão lógica (admin)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    os: str = ""
    descricao: str = ""
    descricao_encerramento: Optional[str] = None
    status: ChamadoStatus = field(default=ChamadoStatus.ABERTO)
    usuario_id: str = ""
    tecnico_id: Optional[str] = None
    servicos: List[str] = field(default_factory=list)
    gerado_em: datetime = field(default_factory=agora)
    atualizado_em: datetime = field(default_factory=agora)
    encerrado_em: Optional[datetime] = None
    deletado_em: Optional[datetime] = None

    DESCRICAO_MIN_LENGTH: int = 10
    DESCRICAO_MAX_LENGTH: int = 5000
    PRAZO_REABERTURA_HORAS: int = 48

    @classmethod
    def criar(
        cls,
        os: str,
        descricao: str,
        usuario_id: str,
        servicos: List[str],
    ) -> "ChamadoEntity":
        """
        Factory method para abrir chamado com validações.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls._validar_descricao(descricao)

        if not usuario_id:
            raise ValidationError("Solicitante é obrigatório", field="usuario_id")

        if not servicos:
            raise ValidationError(
                "É obrigatório informar pelo menos um serviço (servico)",
                field="servico",
            )

        return cls(
            os=os,
            descricao=descricao.strip(),
            usuario_id=usuario_id,
            servicos=list(servicos),
            status=ChamadoStatus.ABERTO,
        )

    @classmethod
    def _validar_descricao(cls, descricao: str) -> None:
        if not descricao or not descricao.strip():
            raise ValidationError(
                "A descrição (descricao) do chamado é obrigatória",
                field="descricao",
            )

        descricao_limpa = descricao.strip()

        if len(descricao_limpa) < cls.DESCRICAO_MIN_LENGTH:
            raise ValidationError(
                f"Descrição (descricao) deve ter pelo menos {cls.DESCRICAO_MIN_LENGTH} caracteres",
                field="descricao",
            )

        if len(descricao_limpa) > cls.DESCRICAO_MAX_LENGTH:
            raise ValidationError(
                f"Descrição (descricao) deve ter no máximo {cls.DESCRICAO_MAX_LENGTH} caracteres",
                field="descricao",
            )

    # =========================================================================
    # Transições
    # =========================================================================

    def atribuir_a(self, tecnico_id: str) -> None:
        """
        Técnico assume o chamado.

        Regras:
        - Apenas ABERTO ou REABERTO
        - Status passa a EM_ATENDIMENTO

        Raises:
            ValidationError: Se tecnico_id vazio
            BusinessRuleViolationError: Se status não permite
        """
        if not tecnico_id:
            raise ValidationError("ID do técnico (tecnicoId) é obrigatório", field="tecnicoId")

        self._garantir_status(
            ChamadoStatus.na_fila(),
            ChamadoStatus.EM_ATENDIMENTO,
        )

        self.tecnico_id = tecnico_id
        self.status = ChamadoStatus.EM_ATENDIMENTO
        self._atualizar_timestamp()

    def encerrar(self, descricao_encerramento: str, momento: Optional[datetime] = None) -> None:
        """
        Encerra o chamado.

        Regras:
        - Apenas EM_ATENDIMENTO
        - Descrição de encerramento obrigatória
        - Registra encerrado_em

        Raises:
            ValidationError: Se descrição ausente
            BusinessRuleViolationError: Se status não permite
        """
        if not descricao_encerramento or not descricao_encerramento.strip():
            raise ValidationError(
                "A descrição de encerramento (descricaoEncerramento) é obrigatória",
                field="descricaoEncerramento",
            )

        self._garantir_status((ChamadoStatus.EM_ATENDIMENTO,), ChamadoStatus.ENCERRADO)

        self.status = ChamadoStatus.ENCERRADO
        self.descricao_encerramento = descricao_encerramento.strip()
        self.encerrado_em = momento or agora()
        self._atualizar_timestamp()

    def reabrir(self, momento: Optional[datetime] = None) -> None:
        """
        Reabre chamado encerrado.

        Regras:
        - Apenas ENCERRADO
        - Até 48 horas após encerrado_em
        - Mantém o último técnico; limpa dados de encerramento

        Raises:
            BusinessRuleViolationError: Se status ou prazo não permitem
        """
        momento = momento or agora()

        self._garantir_status((ChamadoStatus.ENCERRADO,), ChamadoStatus.REABERTO)

        if self.encerrado_em is None:
            raise BusinessRuleViolationError(
                "Data de encerramento não localizada",
                rule="encerramento_sem_data",
            )

        if not self.pode_reabrir(momento):
            raise BusinessRuleViolationError(
                f"Só é possível reabrir até {self.PRAZO_REABERTURA_HORAS} horas "
                f"após o encerramento",
                rule="prazo_reabertura_expirado",
            )

        self.status = ChamadoStatus.REABERTO
        self.encerrado_em = None
        self.descricao_encerramento = None
        self._atualizar_timestamp()

    def cancelar(self, justificativa: str, momento: Optional[datetime] = None) -> None:
        """
        Cancela o chamado (estado terminal).

        Raises:
            ValidationError: Se justificativa ausente
            BusinessRuleViolationError: Se ENCERRADO ou já CANCELADO
        """
        if not justificativa or not justificativa.strip():
            raise ValidationError(
                "É necessário informar a justificativa do cancelamento (descricaoEncerramento)",
                field="descricaoEncerramento",
            )

        if self.status == ChamadoStatus.ENCERRADO:
            raise BusinessRuleViolationError(
                "Não é possível cancelar um chamado encerrado",
                rule="chamado_encerrado",
            )
        if self.status == ChamadoStatus.CANCELADO:
            raise BusinessRuleViolationError(
                "Este chamado já está cancelado",
                rule="chamado_cancelado",
            )

        self.status = ChamadoStatus.CANCELADO
        self.descricao_encerramento = justificativa.strip()
        self.encerrado_em = momento or agora()
        self._atualizar_timestamp()

    def excluir(self) -> None:
        """Exclusão lógica: o chamado some das filas."""
        if self.deletado_em is not None:
            raise BusinessRuleViolationError(
                "Chamado já foi excluído",
                rule="chamado_ja_excluido",
            )
        self.deletado_em = agora()
        self._atualizar_timestamp()

    def _garantir_status(self, permitidos: tuple, destino: ChamadoStatus) -> None:
        if self.status == ChamadoStatus.CANCELADO:
            raise BusinessRuleViolationError(
                "Chamados cancelados não podem ser reabertos ou alterados",
                rule="chamado_cancelado",
            )
        if self.status not in permitidos:
            raise BusinessRuleViolationError(
                f"Transição de {self.status.value} para {destino.value} não é permitida",
                rule="transicao_status_invalida",
            )

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = agora()

    # =========================================================================
    # Propriedades
    # =========================================================================

    def pode_reabrir(self, momento: Optional[datetime] = None) -> bool:
        if self.status != ChamadoStatus.ENCERRADO or self.encerrado_em is None:
            return False
        momento = momento or agora()
        limite = self.encerrado_em + timedelta(hours=self.PRAZO_REABERTURA_HORAS)
        return momento <= limite

    @property
    def esta_excluido(self) -> bool:
        return self.deletado_em is not None

    @property
    def esta_atribuido(self) -> bool:
        return self.tecnico_id is not None

    def envolve(self, usuario_id: str) -> bool:
        """Solicitante ou técnico do chamado."""
        return usuario_id in (self.usuario_id, self.tecnico_id)

    def __str__(self) -> str:
        return f"[{self.os}] {self.descricao[:50]}"

    def __repr__(self) -> str:
        return f"<ChamadoEntity os={self.os} status={self.status.value}>"


@dataclass(frozen=True)
class HistoricoChamado:
    """
    Entrada imutável do histórico de um chamado.

    Gravada no document store a cada transição; nunca é
    alterada nem removida depois de criada.
    """

    chamado_id: str
    tipo: TipoHistorico
    para: str
    descricao: str
    autor_id: str
    autor_nome: str = ""
    autor_email: str = ""
    de: Optional[str] = None
    data_hora: datetime = field(default_factory=agora)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def registrar(
        cls,
        chamado: ChamadoEntity,
        tipo: TipoHistorico,
        de: Optional[ChamadoStatus],
        descricao: str,
        autor,
    ) -> "HistoricoChamado":
        """
        Cria entrada a partir do estado atual do chamado.

        Args:
            chamado: Chamado já com o novo status
            tipo: Natureza da transição
            de: Status anterior (None na abertura)
            descricao: Texto livre
            autor: UsuarioAutenticado que executou a ação
        """
        return cls(
            chamado_id=chamado.id,
            tipo=tipo,
            de=de.value if de else None,
            para=chamado.status.value,
            descricao=descricao,
            autor_id=autor.id,
            autor_nome=autor.nome,
            autor_email=autor.email,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "chamadoId": self.chamado_id,
            "dataHora": self.data_hora.isoformat(),
            "tipo": self.tipo.value,
            "de": self.de,
            "para": self.para,
            "descricao": self.descricao,
            "autorId": self.autor_id,
            "autorNome": self.autor_nome,
            "autorEmail": self.autor_email,
        }

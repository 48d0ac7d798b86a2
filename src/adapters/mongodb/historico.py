"""
Histórico de chamados no MongoDB.

Implementa HistoricoChamadoRepository do Core sobre a coleção
`chamado_historico`. A coleção é append-only: este adapter só
insere e consulta.

Documento:
{
    "_id": "<uuid da entrada>",
    "chamadoId": "...",
    "dataHora": ISODate,
    "sequencia": ObjectId,
    "tipo": "ABERTURA | STATUS | REABERTURA | CANCELAMENTO",
    "de": "ABERTO" | null,
    "para": "EM_ATENDIMENTO",
    "descricao": "...",
    "autorId": "...", "autorNome": "...", "autorEmail": "..."
}

`dataHora` tem precisão de milissegundos; `sequencia` desempata entradas
do mesmo milissegundo na ordem de inserção.
"""

from typing import Iterator, List
import logging

from bson import ObjectId
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from src.core.chamados.entities import HistoricoChamado, TipoHistorico

logger = logging.getLogger(__name__)

COLECAO_HISTORICO = "chamado_historico"

ORDEM_CRONOLOGICA = [("dataHora", ASCENDING), ("sequencia", ASCENDING)]


def init_mongo_client(uri: str, server_selection_timeout_ms: int = 5000) -> Iterator[MongoClient]:
    """
    Resource do container: um cliente por processo.

    A conexão é aberta sob demanda pelo driver; o cliente é fechado
    em container.shutdown_resources().
    """
    client = MongoClient(
        uri,
        tz_aware=True,
        serverSelectionTimeoutMS=server_selection_timeout_ms,
    )
    logger.info("Cliente MongoDB criado")
    try:
        yield client
    finally:
        client.close()
        logger.info("Cliente MongoDB fechado")


class MongoHistoricoChamadoRepository:
    """
    Example:
        repo = MongoHistoricoChamadoRepository(client["helpme"])
        repo.registrar(entrada)
        repo.listar_por_chamado(chamado_id)  # ordem crescente de dataHora
    """

    def __init__(self, database: Database):
        self._colecao = database[COLECAO_HISTORICO]

    def registrar(self, entrada: HistoricoChamado) -> None:
        self._colecao.insert_one(self._to_document(entrada))
        logger.debug(f"Histórico {entrada.tipo.value} gravado para {entrada.chamado_id}")

    def listar_por_chamado(self, chamado_id: str) -> List[HistoricoChamado]:
        cursor = self._colecao.find({"chamadoId": chamado_id}).sort(ORDEM_CRONOLOGICA)
        return [self._to_entity(doc) for doc in cursor]

    @staticmethod
    def _to_document(entrada: HistoricoChamado) -> dict:
        return {
            "_id": entrada.id,
            "chamadoId": entrada.chamado_id,
            "dataHora": entrada.data_hora,
            "sequencia": ObjectId(),
            "tipo": entrada.tipo.value,
            "de": entrada.de,
            "para": entrada.para,
            "descricao": entrada.descricao,
            "autorId": entrada.autor_id,
            "autorNome": entrada.autor_nome,
            "autorEmail": entrada.autor_email,
        }

    @staticmethod
    def _to_entity(doc: dict) -> HistoricoChamado:
        return HistoricoChamado(
            id=str(doc["_id"]),
            chamado_id=doc["chamadoId"],
            data_hora=doc["dataHora"],
            tipo=TipoHistorico(doc["tipo"]),
            de=doc.get("de"),
            para=doc["para"],
            descricao=doc.get("descricao", ""),
            autor_id=doc.get("autorId", ""),
            autor_nome=doc.get("autorNome", ""),
            autor_email=doc.get("autorEmail", ""),
        )

"""
Replicación de una colección: documentos primero, índices después.

Flujo de replicate():
1. Contar documentos del origen (solo para dimensionar el progreso)
2. Abrir un cursor crudo (RawBSONDocument) con sesión explícita
3. Agrupar con DocumentBatcher y hacer un insert_many por lote
4. Recorrer list_indexes() del origen y recrear cada índice en destino

Los documentos se leen como BSON crudo y se escriben sin decodificar, así
el orden de campos y los tipos (Int64, Decimal128, fechas, etc.) llegan
idénticos al destino.

LIMITACIÓN CONOCIDA: el conteo del paso 1 puede quedar desactualizado si el
origen recibe escrituras durante la copia. Solo afecta al total mostrado.
"""

from bson.codec_options import CodecOptions
from bson.raw_bson import RawBSONDocument
from pymongo.errors import PyMongoError

from .batcher import DocumentBatcher
from .errors import CopyError
from .indexes import IndexTranslator
from .progress import SilentProgress, collection_scope

RAW_CODEC_OPTIONS = CodecOptions(document_class=RawBSONDocument)


class CollectionReplicator:
    """
    Copia documentos e índices de una colección del origen a la homónima
    del destino. El llamador ya eliminó la colección destino.

    Attributes:
        source_db: Database pymongo de origen
        target_db: Database pymongo de destino
        batcher (DocumentBatcher): Agrupador de documentos
        index_translator (IndexTranslator): Traductor de índices
        progress (ProgressObserver): Observador de progreso
    """

    def __init__(
        self,
        source_db,
        target_db,
        chunk_size=None,
        progress=None,
        index_translator=None,
    ):
        self.source_db = source_db
        self.target_db = target_db
        self.batcher = (
            DocumentBatcher(chunk_size) if chunk_size else DocumentBatcher()
        )
        self.index_translator = index_translator or IndexTranslator()
        self.progress = progress or SilentProgress()

    def replicate(self, collection_name: str) -> dict:
        """
        Replica una colección completa.

        Args:
            collection_name: Nombre de la colección (igual en origen y destino)

        Returns:
            dict: Resumen de la copia:
                {
                    'name': str,
                    'documents': int,   # documentos insertados
                    'batches': int,     # llamadas a insert_many
                    'indexes': [str],   # nombres de índices creados
                }

        Raises:
            CopyError: Falla al contar, leer el cursor o insertar un lote
            IndexCreationError: El destino rechazó un índice
        """
        self.progress.status(f"\n📦 Procesando colección: {collection_name}")

        documents, batches = self.copy_documents(collection_name)
        self.progress.status(
            f"   ✅ Colección '{collection_name}' copiada: "
            f"{documents:,} documentos en {batches} lote(s)"
        )

        indexes = self.copy_indexes(collection_name)

        return {
            "name": collection_name,
            "documents": documents,
            "batches": batches,
            "indexes": indexes,
        }

    def copy_documents(self, collection_name: str):
        """
        Copia todos los documentos, un insert_many por lote.

        Returns:
            tuple: (documentos insertados, lotes escritos)
        """
        source_collection = self.source_db.get_collection(
            collection_name, codec_options=RAW_CODEC_OPTIONS
        )
        target_collection = self.target_db[collection_name]

        try:
            total_docs = source_collection.count_documents({})
        except PyMongoError as e:
            raise CopyError(
                f"No se pudo contar documentos: {e}",
                operation="count_documents",
                collection=collection_name,
            ) from e

        scope = collection_scope(collection_name)
        self.progress.set_total(scope, self.batcher.expected_batches(total_docs))

        copied = 0
        written = 0
        operation = "find"

        try:
            # Sesión explícita para prevenir timeout de cursor
            with self.source_db.client.start_session() as session:
                cursor = source_collection.find(
                    no_cursor_timeout=True, session=session
                )
                try:
                    for batch in self.batcher.batches(cursor):
                        operation = "insert_many"
                        target_collection.insert_many(batch, ordered=True)
                        operation = "find"

                        copied += len(batch)
                        written += 1
                        self.progress.advance(scope)
                finally:
                    cursor.close()
        except PyMongoError as e:
            raise CopyError(
                f"Copia interrumpida tras {copied:,} documentos: {e}",
                operation=operation,
                collection=collection_name,
            ) from e

        return copied, written

    def copy_indexes(self, collection_name: str) -> list:
        """
        Recrea en destino los índices del origen, en el orden del catálogo.

        Returns:
            list: Nombres de los índices creados
        """
        try:
            descriptors = list(self.source_db[collection_name].list_indexes())
        except PyMongoError as e:
            raise CopyError(
                f"No se pudieron listar índices: {e}",
                operation="list_indexes",
                collection=collection_name,
            ) from e

        target_collection = self.target_db[collection_name]
        created = []

        for descriptor in descriptors:
            name = self.index_translator.apply(target_collection, descriptor)
            created.append(name)
            self.progress.status(
                f"   🔑 Índice creado: {name} en colección: {collection_name}"
            )

        return created

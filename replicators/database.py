"""
Orquestación de una corrida completa de copia MongoDB → MongoDB.

ESTADOS (por corrida):
    idle → truncating → copying (colección 1..n) → done
    Cualquier MigrationError en cualquier estado → failed (terminal)

FLUJO:
1. Truncar destino: eliminar TODAS sus colecciones (destructivo, sin
   confirmación; la confirmación es responsabilidad del llamador)
2. Tomar una foto de la lista de colecciones del origen
3. Replicar cada colección en orden, de a una (sin paralelismo)
4. Medir y reportar el tiempo total

LIMITACIÓN CONOCIDA: la copia no es atómica. Si la corrida falla o el
proceso muere a mitad de camino, el destino queda parcialmente poblado y la
única recuperación es volver a correr todo (que vuelve a truncar).
"""

import time

from pymongo.errors import PyMongoError

from .collection import CollectionReplicator
from .errors import MigrationError, TruncationError
from .progress import OVERALL_SCOPE, SilentProgress


def format_duration(seconds) -> str:
    """
    Formatea segundos como HH:MM:SS.

    Ejemplo:
        >>> format_duration(3725.4)
        '01:02:05'
    """
    seconds = int(seconds)
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class DatabaseMigrator:
    """
    Reemplaza el contenido del destino por una copia del origen.

    Una instancia corre una sola vez; para reintentar se crea otra.

    Attributes:
        source_db: Database pymongo de origen
        target_db: Database pymongo de destino
        progress (ProgressObserver): Observador de progreso
        replicator (CollectionReplicator): Replicador por colección
        state (str): Estado actual de la corrida
        current_collection (str|None): Colección en copia
    """

    IDLE = "idle"
    TRUNCATING = "truncating"
    COPYING = "copying"
    DONE = "done"
    FAILED = "failed"

    def __init__(self, source_db, target_db, chunk_size=None, progress=None):
        self.source_db = source_db
        self.target_db = target_db
        self.progress = progress or SilentProgress()
        self.replicator = CollectionReplicator(
            source_db, target_db, chunk_size=chunk_size, progress=self.progress
        )
        self.state = self.IDLE
        self.current_collection = None

    def truncate(self) -> list:
        """
        Elimina todas las colecciones del destino.

        Idempotente: sobre un destino vacío no hace nada y retorna [].

        Returns:
            list: Nombres de las colecciones eliminadas

        Raises:
            TruncationError: Si no se puede listar o eliminar una colección
        """
        try:
            collection_names = self.target_db.list_collection_names()
        except PyMongoError as e:
            raise TruncationError(
                f"No se pudieron listar las colecciones del destino: {e}",
                operation="list_collections",
            ) from e

        dropped = []
        for name in collection_names:
            try:
                self.target_db.drop_collection(name)
            except PyMongoError as e:
                raise TruncationError(
                    f"No se pudo eliminar la colección: {e}",
                    operation="drop_collection",
                    collection=name,
                ) from e
            dropped.append(name)
            self.progress.status(f"   🗑️  Colección eliminada: {name}")

        self.progress.status("✅ Base de datos destino truncada")
        return dropped

    def list_source_collections(self) -> list:
        """
        Foto de las colecciones del origen, en el orden del catálogo.

        Se toma una sola vez por corrida: colecciones creadas en el origen
        después de este punto no se copian.
        """
        try:
            return list(self.source_db.list_collection_names())
        except PyMongoError as e:
            raise MigrationError(
                f"No se pudieron listar las colecciones del origen: {e}",
                operation="list_collections",
            ) from e

    def run(self) -> dict:
        """
        Ejecuta la corrida completa.

        Returns:
            dict: Reporte de la corrida:
                {
                    'success': bool,
                    'state': 'done' | 'failed',
                    'collections': [dict],  # resúmenes de CollectionReplicator
                    'duration': float,      # segundos
                    'error': MigrationError | None,
                }

        Raises:
            RuntimeError: Si la instancia ya fue ejecutada
        """
        if self.state != self.IDLE:
            raise RuntimeError(
                f"DatabaseMigrator ya fue ejecutado (estado: {self.state})"
            )

        start_time = time.perf_counter()
        summaries = []
        error = None

        self.progress.status(
            "🚚 Iniciando la copia de colecciones del origen al destino..."
        )

        try:
            self.state = self.TRUNCATING
            self.truncate()

            collection_names = self.list_source_collections()
            self.progress.set_total(OVERALL_SCOPE, len(collection_names) or 1)

            self.state = self.COPYING
            for collection_name in collection_names:
                self.current_collection = collection_name
                summaries.append(self.replicator.replicate(collection_name))
                self.progress.advance(OVERALL_SCOPE)

            self.current_collection = None
            self.state = self.DONE
        except MigrationError as e:
            self.state = self.FAILED
            error = e
            self.progress.status(f"\n❌ Error durante la copia: {e}")
        except Exception:
            self.state = self.FAILED
            raise

        duration = time.perf_counter() - start_time

        if error is None:
            self.progress.status(
                f"\n✅ Copia completada exitosamente en {format_duration(duration)}"
            )

        return {
            "success": error is None,
            "state": self.state,
            "collections": summaries,
            "duration": duration,
            "error": error,
        }

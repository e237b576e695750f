"""
Replicadores para copiar una base MongoDB completa hacia otra base MongoDB.

Cada componente resuelve una etapa del pipeline de copia y se compone en
DatabaseMigrator, que es lo único que mongocopy.py necesita conocer.

Estructura:
    batcher.py: DocumentBatcher (agrupa el cursor en lotes de tamaño fijo)
    indexes.py: IndexTranslator (traduce y recrea índices en destino)
    collection.py: CollectionReplicator (documentos + índices de una colección)
    database.py: DatabaseMigrator (truncado, enumeración, progreso, tiempos)
    progress.py: ProgressObserver y sus implementaciones (consola / silencio)
    errors.py: Jerarquía de errores MigrationError

Flujo:
    DatabaseMigrator → truncar destino → por cada colección origen →
    CollectionReplicator → DocumentBatcher + IndexTranslator → escrituras
"""

from .batcher import DocumentBatcher
from .collection import CollectionReplicator
from .database import DatabaseMigrator
from .errors import (
    CopyError,
    IndexCreationError,
    MigrationError,
    TruncationError,
)
from .indexes import IndexTranslator
from .progress import ConsoleProgress, ProgressObserver, SilentProgress

__all__ = [
    "ConsoleProgress",
    "CollectionReplicator",
    "CopyError",
    "DatabaseMigrator",
    "DocumentBatcher",
    "IndexCreationError",
    "IndexTranslator",
    "MigrationError",
    "ProgressObserver",
    "SilentProgress",
    "TruncationError",
]

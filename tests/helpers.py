"""
Funciones helper compartidas para todos los tests.

Proporciona un doble en memoria del subconjunto de la API de pymongo que usa
replicators/ (cliente, base de datos, colección, cursor), para que los tests
corran sin servidor MongoDB.

Inyección de fallas:
    db.fail_operations = {'drop_collection'}
    collection.fail_operations = {'insert_many', 'create_index'}  # create_index: createIndexes
    collection.cursor_fail_after = 1500  # el cursor falla tras N documentos
"""

import copy
import sys
import os

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import bson
from bson.raw_bson import RawBSONDocument
from pymongo.errors import OperationFailure

from replicators.progress import ProgressObserver

IDENTITY_INDEX = {"v": 2, "key": {"_id": 1}, "name": "_id_"}


def _fail_if_requested(owner, operation):
    if operation in owner.fail_operations:
        raise OperationFailure(f"Falla simulada en {operation}")


class FakeSession:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeCursor:
    """Cursor de una sola pasada, como el de pymongo."""

    def __init__(self, documents, fail_after=None):
        self._documents = documents
        self._fail_after = fail_after
        self._position = 0
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        if self.closed or self._position >= len(self._documents):
            raise StopIteration
        if self._fail_after is not None and self._position >= self._fail_after:
            raise OperationFailure("Cursor interrumpido (simulado)")
        document = self._documents[self._position]
        self._position += 1
        return document

    def close(self):
        self.closed = True


class FakeCollection:
    """
    Colección en memoria.

    Los documentos se guardan tal como llegan: un RawBSONDocument insertado
    conserva sus bytes. find() respeta codec_options.document_class, igual
    que pymongo: con RawBSONDocument entrega BSON crudo.

    Attributes:
        documents (list): Documentos almacenados, en orden de inserción
        indexes (list): Descriptores de índices (como list_indexes())
        insert_calls (list): Tamaño de cada llamada a insert_many
        index_commands (list): Especificaciones recibidas por createIndexes
        created (bool): True si la colección existe en la base
    """

    def __init__(self, database, name):
        self.database = database
        self.name = name
        self.documents = []
        self.indexes = []
        self.insert_calls = []
        self.index_commands = []
        self.find_calls = []
        self.codec_options = None
        self.created = False
        self.fail_operations = set()
        self.cursor_fail_after = None

    def _ensure_created(self):
        if not self.created:
            self.created = True
            self.indexes.append(copy.deepcopy(IDENTITY_INDEX))

    def _as_stored(self, document):
        if isinstance(document, RawBSONDocument):
            return document
        return copy.deepcopy(document)

    def _as_returned(self, document):
        raw = self.codec_options is not None and (
            self.codec_options.document_class is RawBSONDocument
        )
        if raw and not isinstance(document, RawBSONDocument):
            return RawBSONDocument(bson.encode(document))
        if not raw and isinstance(document, RawBSONDocument):
            return bson.decode(document.raw)
        return document

    # --- Lectura ---

    def count_documents(self, filter):
        _fail_if_requested(self, "count_documents")
        return len(self.documents)

    def find(self, no_cursor_timeout=False, session=None):
        _fail_if_requested(self, "find")
        self.find_calls.append(
            {"no_cursor_timeout": no_cursor_timeout, "session": session}
        )
        documents = [self._as_returned(d) for d in self.documents]
        return FakeCursor(documents, fail_after=self.cursor_fail_after)

    def list_indexes(self):
        _fail_if_requested(self, "list_indexes")
        return iter(copy.deepcopy(self.indexes))

    # --- Escritura ---

    def insert_many(self, documents, ordered=True):
        _fail_if_requested(self, "insert_many")
        documents = list(documents)
        if not documents:
            raise TypeError("documents must be a non-empty list")
        self._ensure_created()
        self.insert_calls.append(len(documents))
        self.documents.extend(self._as_stored(d) for d in documents)

    def _create_index(self, spec):
        """Una entrada de createIndexes, con las validaciones del servidor."""
        _fail_if_requested(self, "create_index")
        self.index_commands.append(copy.deepcopy(spec))

        if "_id" in spec["key"]:
            for option in ("unique", "sparse"):
                if option in spec:
                    raise OperationFailure(
                        f"The field '{option}' is not valid for an _id index specification"
                    )

        self._ensure_created()
        for existing in self.indexes:
            if existing["name"] == spec["name"]:
                return

        descriptor = {"v": 2}
        descriptor.update(copy.deepcopy(spec))
        self.indexes.append(descriptor)

    # --- Helpers de test ---

    def seed(self, documents, indexes=()):
        """Carga documentos e índices sin pasar por insert_many."""
        self._ensure_created()
        self.documents.extend(documents)
        for descriptor in indexes:
            if descriptor["name"] == "_id_":
                self.indexes[0] = copy.deepcopy(descriptor)
            else:
                self.indexes.append(copy.deepcopy(descriptor))
        return self

    def decoded_documents(self):
        """Documentos como dicts, decodificando los RawBSONDocument."""
        return [
            bson.decode(d.raw) if isinstance(d, RawBSONDocument) else d
            for d in self.documents
        ]

    def index_by_name(self, name):
        for descriptor in self.indexes:
            if descriptor["name"] == name:
                return descriptor
        return None


class FakeDatabase:
    def __init__(self, client, name):
        self.client = client
        self.name = name
        self._handles = {}
        self.fail_operations = set()

    def __getitem__(self, name):
        if name not in self._handles:
            self._handles[name] = FakeCollection(self, name)
        return self._handles[name]

    def get_collection(self, name, codec_options=None):
        collection = self[name]
        collection.codec_options = codec_options
        return collection

    def list_collection_names(self):
        _fail_if_requested(self, "list_collection_names")
        return [name for name, c in self._handles.items() if c.created]

    def drop_collection(self, name):
        _fail_if_requested(self, "drop_collection")
        self._handles.pop(name, None)

    def command(self, command, value, **kwargs):
        if command != "createIndexes":
            raise OperationFailure(f"Comando no soportado: {command}")
        collection = self[value]
        for spec in kwargs["indexes"]:
            collection._create_index(spec)
        return {"ok": 1.0}


class FakeClient:
    def __init__(self):
        self._databases = {}
        self.sessions_started = 0

    def __getitem__(self, name):
        if name not in self._databases:
            self._databases[name] = FakeDatabase(self, name)
        return self._databases[name]

    def start_session(self):
        self.sessions_started += 1
        return FakeSession()


class RecordingProgress(ProgressObserver):
    """Observador que registra cada llamada para inspección."""

    def __init__(self):
        self.totals = {}
        self.advances = {}
        self.messages = []

    def set_total(self, scope, total):
        self.totals[scope] = total

    def advance(self, scope, step=1):
        self.advances[scope] = self.advances.get(scope, 0) + step

    def status(self, message):
        self.messages.append(message)


def make_databases():
    """Retorna (source_db, target_db) vacíos en clientes independientes."""
    return FakeClient()["source"], FakeClient()["target"]


def make_documents(count, start=0):
    """Documentos de prueba con _id entero y campos de tipos variados."""
    return [
        {
            "_id": i,
            "email": f"user{i}@example.com",
            "profile": {"age": 20 + i % 50, "tags": ["a", "b"]},
            "active": i % 2 == 0,
        }
        for i in range(start, start + count)
    ]

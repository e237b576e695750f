"""
Errores de la copia MongoDB → MongoDB.

Toda falla de una corrida se expresa como MigrationError (o una subclase),
con la colección y la operación que fallaron. El error original de pymongo
queda encadenado en __cause__ (raise ... from e).

No hay reintentos: cualquiera de estos errores corta la corrida completa.
"""


class MigrationError(Exception):
    """
    Falla de una corrida de migración.

    Attributes:
        operation (str): Operación que falló (ej: 'drop_collection', 'insert_many')
        collection (str|None): Colección involucrada, None si la falla es global
    """

    def __init__(self, message, operation, collection=None):
        super().__init__(message)
        self.operation = operation
        self.collection = collection

    def __str__(self):
        base = super().__str__()
        if self.collection:
            return f"[{self.operation} en '{self.collection}'] {base}"
        return f"[{self.operation}] {base}"


class TruncationError(MigrationError):
    """No se pudo listar o eliminar una colección del destino."""


class CopyError(MigrationError):
    """Falló el conteo, la lectura del cursor o el insert_many de un lote."""


class IndexCreationError(MigrationError):
    """El destino rechazó la creación de un índice."""

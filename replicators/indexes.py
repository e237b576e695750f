"""
Traducción de índices del origen hacia el destino.

Un descriptor de índice es el documento que retorna list_indexes():
    {'v': 2, 'key': {'email': 1}, 'name': 'email_1', 'unique': True}

REGLAS:
- 'key' se copia tal cual, preservando el orden de los campos
- Todo lo demás es opción, salvo los campos estructurales ('ns', 'key')
- Índice de identidad (key contiene '_id'): se quitan 'unique' y 'sparse'.
  El destino ya garantiza unicidad y presencia de _id, y createIndexes
  rechaza esas opciones sobre ese índice.
"""

from pymongo.errors import PyMongoError

from .errors import IndexCreationError

IDENTITY_FIELD = "_id"

# Campos del descriptor que no son opciones
STRUCTURAL_FIELDS = frozenset({"ns", "key"})

# Opciones inválidas sobre el índice de identidad
IDENTITY_RESTRICTED_OPTIONS = ("unique", "sparse")


def index_name(keys) -> str:
    """
    Nombre por defecto de un índice, con la convención del servidor.

    Ejemplo:
        >>> index_name([('tenant', 1), ('created_at', -1)])
        'tenant_1_created_at_-1'
    """
    return "_".join(f"{field}_{direction}" for field, direction in keys)


class IndexTranslator:
    """Convierte descriptores del origen en comandos createIndexes del destino."""

    def is_identity_index(self, descriptor) -> bool:
        return IDENTITY_FIELD in descriptor["key"]

    def translate(self, descriptor):
        """
        Traduce un descriptor a un par (keys, options).

        Args:
            descriptor: Mapping con al menos 'key' (y normalmente 'name', 'v')

        Returns:
            tuple: (keys, options)
                keys: list de (campo, dirección) en el orden del origen
                options: dict con las opciones filtradas
        """
        keys = list(descriptor["key"].items())
        options = {
            field: value
            for field, value in descriptor.items()
            if field not in STRUCTURAL_FIELDS
        }

        if self.is_identity_index(descriptor):
            for option in IDENTITY_RESTRICTED_OPTIONS:
                options.pop(option, None)

        return keys, options

    def apply(self, target_collection, descriptor) -> str:
        """
        Crea en el destino el índice equivalente a descriptor.

        Usa el comando createIndexes directamente: create_index de pymongo
        valida las direcciones en el cliente y rechaza doubles (1.0), que el
        shell legacy guarda y el servidor acepta.

        Args:
            target_collection: Colección pymongo destino
            descriptor: Descriptor de índice del origen

        Returns:
            str: Nombre del índice creado

        Raises:
            IndexCreationError: Si el destino rechaza el índice
        """
        keys, options = self.translate(descriptor)
        name = options.pop("name", None) or index_name(keys)
        index_spec = {"key": dict(keys), "name": name, **options}

        try:
            target_collection.database.command(
                "createIndexes", target_collection.name, indexes=[index_spec]
            )
        except PyMongoError as e:
            raise IndexCreationError(
                f"No se pudo crear el índice {name}: {e}",
                operation="create_index",
                collection=target_collection.name,
            ) from e
        return name

"""
Configuración centralizada para la copia MongoDB → MongoDB.

ARQUITECTURA:
Dos conexiones del mismo motor (MongoDB):
- source: Base de datos de origen (solo lectura durante la copia)
- target: Base de datos de destino (se trunca y se repuebla completa)

RESOLUCIÓN DE CONEXIONES:
Cada dato de conexión se lee de SOURCE_MONGO_* / TARGET_MONGO_* y, si no
está definido, cae en los valores por defecto:
- host: 127.0.0.1
- port: 27017
- database: DB_DATABASE (destino: DB_DATABASE + '_staging')
- username / password: DB_USERNAME / DB_PASSWORD

El núcleo (replicators/) recibe las conexiones ya resueltas: toda la lógica
de valores por defecto vive acá.

USO DE LAS FUNCIONES HELPER:
    # Obtener configuración de una conexión
    connection = get_connection_config('target')
    database = connection['database']  # 'midb_staging'

    # URI lista para MongoClient
    uri = get_mongo_uri('source')
"""

import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Carga las variables del archivo .env en las variables de entorno del sistema
load_dotenv(override=True)

# --- Valores por defecto ---
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "27017"
DEFAULT_AUTH_SOURCE = "admin"
STAGING_SUFFIX = "_staging"

_DB_DATABASE = os.getenv("DB_DATABASE") or ""


def _resolve_connection(prefix: str, default_database: str) -> dict:
    """Arma la configuración de una conexión a partir de {prefix}_MONGO_*."""
    return {
        "host": os.getenv(f"{prefix}_MONGO_HOST") or DEFAULT_HOST,
        "port": os.getenv(f"{prefix}_MONGO_PORT") or DEFAULT_PORT,
        "database": os.getenv(f"{prefix}_MONGO_DATABASE") or default_database,
        "username": os.getenv(f"{prefix}_MONGO_USER")
        or os.getenv("DB_USERNAME")
        or "",
        "password": os.getenv(f"{prefix}_MONGO_PASSWORD")
        or os.getenv("DB_PASSWORD")
        or "",
        "auth_source": os.getenv(f"{prefix}_MONGO_AUTH_SOURCE")
        or DEFAULT_AUTH_SOURCE,
    }


# --- Configuración de MongoDB (Origen y Destino) ---
CONNECTIONS = {
    "source": _resolve_connection("SOURCE", _DB_DATABASE),
    "target": _resolve_connection(
        "TARGET", f"{_DB_DATABASE}{STAGING_SUFFIX}" if _DB_DATABASE else ""
    ),
}

# --- Configuración de Copia ---
CHUNK_SIZE = int(os.getenv("COPY_CHUNK_SIZE") or 1000)  # Documentos por insert_many
SERVER_SELECTION_TIMEOUT_MS = 5000


# --- Funciones Helper ---


def get_connection_config(role: str) -> dict:
    """
    Obtiene la configuración de una conexión por rol.

    Args:
        role: 'source' o 'target'

    Returns:
        dict: Configuración con keys host, port, database, username,
              password, auth_source

    Raises:
        KeyError: Si el rol no está configurado

    Ejemplo:
        >>> get_connection_config('source')['port']
        '27017'
    """
    if role not in CONNECTIONS:
        available = ", ".join(CONNECTIONS.keys())
        raise KeyError(
            f"Conexión '{role}' no está configurada.\n"
            f"Conexiones disponibles: {available}"
        )
    return CONNECTIONS[role]


def build_mongo_uri(connection: dict) -> str:
    """
    Construye la URI de MongoDB para una configuración de conexión.

    Usuario y contraseña se escapan con quote_plus; si no hay usuario la URI
    no lleva credenciales ni authSource.

    Ejemplo:
        >>> build_mongo_uri({'host': 'db', 'port': '27017', 'username': '',
        ...                  'password': '', 'auth_source': 'admin'})
        'mongodb://db:27017/?readPreference=primary&directConnection=true'
    """
    credentials = ""
    options = "readPreference=primary&directConnection=true"

    if connection.get("username"):
        credentials = (
            f"{quote_plus(connection['username'])}:"
            f"{quote_plus(connection.get('password') or '')}@"
        )
        options = f"authSource={connection.get('auth_source') or DEFAULT_AUTH_SOURCE}&{options}"

    return f"mongodb://{credentials}{connection['host']}:{connection['port']}/?{options}"


def get_mongo_uri(role: str) -> str:
    """URI de MongoDB para el rol 'source' o 'target'."""
    return build_mongo_uri(get_connection_config(role))


def get_database_name(role: str) -> str:
    """
    Nombre de la base de datos para un rol.

    Raises:
        KeyError: Si el rol no existe o no tiene base de datos configurada
    """
    database = get_connection_config(role)["database"]
    if not database:
        raise KeyError(
            f"La conexión '{role}' no tiene base de datos configurada "
            f"(definir {role.upper()}_MONGO_DATABASE o DB_DATABASE)"
        )
    return database

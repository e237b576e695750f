r"""
Script principal de copia de una base MongoDB completa hacia otra.

Arquitectura:
- mongocopy.py: Infraestructura (conexiones, banner, códigos de salida)
- replicators/*.py: Lógica de copia (truncado, lotes, índices, progreso)
- config.py: Configuración centralizada de conexiones

Flujo de ejecución:
1. Conectar a origen y destino (ping a ambos antes de tocar nada)
2. Truncar el destino (TODAS sus colecciones)
3. Copiar cada colección del origen en lotes de CHUNK_SIZE documentos
4. Recrear los índices de cada colección
5. Reportar duración total

ADVERTENCIA: el destino se trunca sin confirmación. Si la corrida falla,
volver a ejecutar desde cero.

Uso:
    python mongocopy.py [chunk_size]
"""

import sys
import traceback

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure

import config
from replicators import ConsoleProgress, DatabaseMigrator
from replicators.database import format_duration


def connect_to_mongo(role):
    """
    Establece conexión a MongoDB para un rol de config.py.

    Args:
        role: 'source' o 'target'

    Returns:
        tuple: (client, database) de pymongo

    Raises:
        SystemExit: Si no puede conectar
    """
    database_name = config.get_database_name(role)
    try:
        print(f"🔌 Conectando a MongoDB ({role})...")
        client = MongoClient(
            config.get_mongo_uri(role),
            serverSelectionTimeoutMS=config.SERVER_SELECTION_TIMEOUT_MS,
        )
        client.admin.command("ping")
        db = client[database_name]
        print(f"✅ Conexión a MongoDB ({role}) exitosa")
        return client, db
    except ConnectionFailure as e:
        print(f"❌ Error de conexión a MongoDB ({role})", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def parse_chunk_size(argv):
    """Lee el tamaño de lote opcional de la línea de comandos."""
    if len(argv) < 2:
        return config.CHUNK_SIZE
    try:
        chunk_size = int(argv[1])
    except ValueError:
        chunk_size = 0
    if chunk_size < 1:
        print(f"❌ Tamaño de lote inválido: {argv[1]}", file=sys.stderr)
        print("Uso: python mongocopy.py [chunk_size]", file=sys.stderr)
        sys.exit(1)
    return chunk_size


def print_summary(report):
    """Imprime el resumen por colección de una corrida."""
    print("\n" + "=" * 70)
    print("📊 RESUMEN")
    print("=" * 70)

    for summary in report["collections"]:
        print(
            f"   • {summary['name']}: {summary['documents']:,} documentos, "
            f"{summary['batches']} lote(s), {len(summary['indexes'])} índice(s)"
        )

    print(f"\n⏱️  Duración: {format_duration(report['duration'])}")


def main():
    """
    Función principal que coordina la corrida completa.

    Exit Codes:
        0: Éxito
        1: Error de conexión o de copia
    """
    chunk_size = parse_chunk_size(sys.argv)

    try:
        source_name = config.get_database_name("source")
        target_name = config.get_database_name("target")
    except KeyError as e:
        print(f"❌ Configuración incompleta: {e}", file=sys.stderr)
        sys.exit(1)

    print("=" * 70)
    print("🚀 COPIA DE BASE DE DATOS MONGODB → MONGODB")
    print("=" * 70)
    print(f"📍 Origen: {source_name}")
    print(f"📍 Destino: {target_name}")
    print(f"📦 Tamaño de lote: {chunk_size}")

    source_client, source_db = connect_to_mongo("source")
    target_client, target_db = connect_to_mongo("target")

    try:
        migrator = DatabaseMigrator(
            source_db, target_db, chunk_size=chunk_size, progress=ConsoleProgress()
        )
        report = migrator.run()
        print_summary(report)

        if not report["success"]:
            error = report["error"]
            print(f"\n❌ Error durante la copia: {error}", file=sys.stderr)
            if error.__cause__ is not None:
                traceback.print_exception(
                    type(error.__cause__),
                    error.__cause__,
                    error.__cause__.__traceback__,
                )
            print("   El destino quedó incompleto: volver a ejecutar la copia")
            sys.exit(1)

        print("\n" + "=" * 70)
        print("✅ PROCESO COMPLETADO EXITOSAMENTE")
        print("=" * 70)

    finally:
        print("\n🔒 Cerrando conexiones...")
        source_client.close()
        target_client.close()
        print("✅ Conexiones cerradas correctamente")


if __name__ == "__main__":
    main()

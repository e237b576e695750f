# reset_database.py
"""
Script para vaciar completamente la base de datos MongoDB de destino.

Ejecuta el mismo truncado que la primera etapa de mongocopy.py, sin copiar
nada después. Útil para dejar el destino limpio tras una corrida fallida.

ADVERTENCIA: Esto elimina TODAS las colecciones del destino.
"""

import sys

import config
from mongocopy import connect_to_mongo
from replicators import ConsoleProgress, DatabaseMigrator, MigrationError


def reset_database(target_db, progress=None):
    """
    Elimina todas las colecciones de target_db.

    Args:
        target_db: Database pymongo de destino
        progress: ProgressObserver opcional

    Returns:
        list: Nombres de las colecciones eliminadas
    """
    # El origen no se usa para truncar
    migrator = DatabaseMigrator(None, target_db, progress=progress)
    return migrator.truncate()


if __name__ == "__main__":
    # Seguridad: pedir confirmación
    database_name = config.get_database_name("target")
    print(f"\n⚠️  ADVERTENCIA: Esto eliminará TODAS las colecciones de '{database_name}'.")
    response = input("¿Continuar? (escribir 'SI' en mayúsculas): ")

    if response != "SI":
        print("\n❌ Operación cancelada")
        sys.exit(0)

    print("=" * 70)
    print("🗑️  LIMPIEZA COMPLETA DE BASE DE DATOS")
    print("=" * 70)

    client, db = connect_to_mongo("target")
    try:
        dropped = reset_database(db, progress=ConsoleProgress())
    except MigrationError as e:
        print(f"\n❌ {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        client.close()

    print("\n" + "=" * 70)
    print(f"✅ LIMPIEZA COMPLETA FINALIZADA ({len(dropped)} colecciones)")
    print("=" * 70)
    print("\nAhora ejecutar:")
    print("  python mongocopy.py (copiar datos)")

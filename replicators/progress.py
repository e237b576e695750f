"""
Reporte de progreso de la copia.

El núcleo (DatabaseMigrator, CollectionReplicator) no imprime nada por sí
mismo: avisa a un ProgressObserver. mongocopy.py inyecta ConsoleProgress;
los tests y los usos programáticos usan SilentProgress.

Patrón de diseño: Observer
- DatabaseMigrator / CollectionReplicator = Sujetos
- ProgressObserver = Observador abstracto
- ConsoleProgress, SilentProgress = Observadores concretos

Scopes:
    OVERALL_SCOPE ('overall'): progreso global, una unidad por colección
    collection_scope(nombre) ('collection:<nombre>'): progreso de la
        colección, una unidad por lote

Los scopes de colección llevan prefijo para que ningún nombre de colección
coincida con el scope global.

Ningún flujo de control depende de estas llamadas.
"""

import sys
from abc import ABC, abstractmethod

OVERALL_SCOPE = "overall"
COLLECTION_SCOPE_PREFIX = "collection:"


def collection_scope(collection_name: str) -> str:
    """Scope de progreso de una colección (ej: 'collection:users')."""
    return f"{COLLECTION_SCOPE_PREFIX}{collection_name}"


class ProgressObserver(ABC):
    """Interfaz que reciben los replicadores para informar avance."""

    @abstractmethod
    def set_total(self, scope: str, total: int):
        """
        Fija la cantidad de unidades esperadas para un scope.

        Args:
            scope: OVERALL_SCOPE o collection_scope(nombre)
            total: Unidades esperadas (colecciones o lotes). Es estimativo:
                   si el origen cambia durante la copia puede no coincidir.
        """
        pass

    @abstractmethod
    def advance(self, scope: str, step: int = 1):
        """Avanza step unidades en el scope."""
        pass

    @abstractmethod
    def status(self, message: str):
        """Línea de estado (colección iniciada/terminada, índice creado, etc.)."""
        pass


class SilentProgress(ProgressObserver):
    """Descarta todo. Observador por defecto del núcleo."""

    def set_total(self, scope, total):
        pass

    def advance(self, scope, step=1):
        pass

    def status(self, message):
        pass


class ConsoleProgress(ProgressObserver):
    """
    Progreso en consola, en la misma línea.

    Los contadores son monótonos: advance() nunca resta, y el valor mostrado
    no supera el total salvo que el origen haya crecido durante la copia.

    Attributes:
        stream: Destino de la salida (sys.stdout por defecto)
        totals (dict): scope → unidades esperadas
        completed (dict): scope → unidades completadas
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.totals = {}
        self.completed = {}
        self._inline = False

    def set_total(self, scope, total):
        self.totals[scope] = total
        self.completed[scope] = 0

    def advance(self, scope, step=1):
        if step < 0:
            raise ValueError("El progreso no puede retroceder")
        self.completed[scope] = self.completed.get(scope, 0) + step
        done = self.completed[scope]
        total = self.totals.get(scope) or done
        percent = done * 100 // total if total else 100

        if scope == OVERALL_SCOPE:
            label = "Colecciones"
        else:
            name = scope
            if scope.startswith(COLLECTION_SCOPE_PREFIX):
                name = scope[len(COLLECTION_SCOPE_PREFIX):]
            label = f"Chunks de {name}"

        # \033[K limpia la línea para evitar basura visual
        print(
            f"\r\033[K⏳ {label}: {done:,}/{total:,} ({percent}%)",
            end="",
            flush=True,
            file=self.stream,
        )
        self._inline = True

    def status(self, message):
        if self._inline:
            print(file=self.stream)
            self._inline = False
        print(message, file=self.stream)

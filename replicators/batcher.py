"""
Agrupación de documentos en lotes de tamaño fijo para escrituras masivas.

DocumentBatcher no hace I/O: recibe un iterable perezoso (típicamente un
cursor de pymongo) y lo consume de a un documento, emitiendo listas de hasta
chunk_size documentos en el mismo orden del origen.
"""

import math

DEFAULT_CHUNK_SIZE = 1000


class DocumentBatcher:
    """
    Convierte un cursor en una secuencia de lotes.

    Garantías:
    - Orden del origen preservado dentro y entre lotes
    - Ningún documento se pierde ni se duplica
    - Ningún lote supera chunk_size; solo el último puede ser menor
    - Un origen vacío no emite lotes

    Attributes:
        chunk_size (int): Capacidad máxima de cada lote
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"chunk_size debe ser >= 1 (recibido: {chunk_size})")
        self.chunk_size = chunk_size

    def batches(self, documents):
        """
        Genera lotes a partir de un iterable de documentos.

        Args:
            documents: Iterable (o cursor) de documentos, se consume una vez

        Yields:
            list: Lote de 1..chunk_size documentos
        """
        batch = []
        for document in documents:
            batch.append(document)
            if len(batch) >= self.chunk_size:
                yield batch
                batch = []

        # Lote residual
        if batch:
            yield batch

    def expected_batches(self, total: int) -> int:
        """
        Cantidad de lotes esperada para total documentos.

        Solo se usa para dimensionar el progreso. Con 0 documentos retorna 1
        para que la barra de progreso tenga al menos un paso.

        Ejemplo:
            >>> DocumentBatcher(1000).expected_batches(2500)
            3
        """
        if total <= 0:
            return 1
        return math.ceil(total / self.chunk_size)

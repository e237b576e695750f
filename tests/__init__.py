"""
Suite de tests para la copia MongoDB → MongoDB.

Los tests NO se conectan a servidores reales, solo validan:
- Sintaxis de código Python
- Configuración y resolución de conexiones
- Lotes, traducción de índices, replicación y orquestación (con dobles en memoria)
"""

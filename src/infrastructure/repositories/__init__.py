"""
Repositorios de acceso a datos.
Cada módulo encapsula las operaciones de una entidad del dominio.
Reciben la conexión ya abierta: no saben ni les importa si viene
de un pool aiomysql o de una conexión PyMySQL de un worker.
"""

from src.infrastructure.repositories.medicamentos import (
    listar_medicamentos,
    buscar_medicamento_por_id,
    buscar_medicamento_por_nombre,
    buscar_por_vencer,
    buscar_por_vencer_sync,
    descontar_stock,
)
from src.infrastructure.repositories.pedidos import insertar_pedido

__all__ = [
    "listar_medicamentos",
    "buscar_medicamento_por_id",
    "buscar_medicamento_por_nombre",
    "buscar_por_vencer",
    "buscar_por_vencer_sync",
    "descontar_stock",
    "insertar_pedido",
]

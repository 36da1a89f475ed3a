"""
Paquete de infraestructura de FarmaBot.

Estructura interna:
  clients/      → conexiones a servicios externos (MariaDB, Redis, Telegram)
  repositories/ → operaciones de datos por entidad del dominio

Todo se re-exporta desde aquí para que el resto del sistema
importe desde src.infrastructure sin conocer la estructura interna.
"""

from src.infrastructure.clients import (
    crear_pool_async,
    cerrar_pool_async,
    get_sync_connection,
    get_redis_client,
    obtener_candado_vencimientos,
    CanalTelegram,
    ModoRender,
)
from src.infrastructure.repositories import (
    listar_medicamentos,
    buscar_medicamento_por_id,
    buscar_medicamento_por_nombre,
    buscar_por_vencer,
    buscar_por_vencer_sync,
    descontar_stock,
    insertar_pedido,
)

__all__ = [
    "crear_pool_async",
    "cerrar_pool_async",
    "get_sync_connection",
    "get_redis_client",
    "obtener_candado_vencimientos",
    "CanalTelegram",
    "ModoRender",
    "listar_medicamentos",
    "buscar_medicamento_por_id",
    "buscar_medicamento_por_nombre",
    "buscar_por_vencer",
    "buscar_por_vencer_sync",
    "descontar_stock",
    "insertar_pedido",
]

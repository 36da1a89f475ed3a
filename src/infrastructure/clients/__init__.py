"""
Clientes de servicios externos.
Centraliza la creación de conexiones para que el resto del sistema
no sepa ni le importe qué motor de BD, broker o mensajería se está usando.
"""

from src.infrastructure.clients.database import (
    crear_pool_async,
    cerrar_pool_async,
    get_sync_connection,
)
from src.infrastructure.clients.redis import get_redis_client, obtener_candado_vencimientos
from src.infrastructure.clients.telegram import CanalTelegram, ModoRender

__all__ = [
    "crear_pool_async",
    "cerrar_pool_async",
    "get_sync_connection",
    "get_redis_client",
    "obtener_candado_vencimientos",
    "CanalTelegram",
    "ModoRender",
]

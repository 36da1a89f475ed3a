"""
Cliente de Redis.

Celery lo usa como broker por su cuenta; este cliente es el que usan
las tareas para el candado de "un solo ciclo de vencimientos a la vez"
cuando hay varios workers o Beat dispara antes de que termine el anterior.
"""

import redis
from src.shared.config import REDIS_HOST, REDIS_PORT, REDIS_DB

CLAVE_CANDADO_VENCIMIENTOS = "farmabot:lock:verificar_vencimientos"


def get_redis_client() -> redis.Redis:
    """Cliente Redis sincrónico para los workers de Celery."""
    return redis.Redis(host=REDIS_HOST, port=REDIS_PORT, db=REDIS_DB)


def obtener_candado_vencimientos(cliente: redis.Redis, expira_segundos: int):
    """
    Candado distribuido del ciclo de vencimientos.
    Expira solo por si el worker muere sin liberarlo.
    """
    return cliente.lock(CLAVE_CANDADO_VENCIMIENTOS, timeout=expira_segundos, blocking=False)

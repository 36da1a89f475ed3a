"""
Clientes de conexión a MariaDB.

Provee las conexiones según el modelo de ejecución:
  - crear_pool_async(): pool para el bot (usa aiomysql). Cada handler
    toma una conexión prestada y la devuelve al terminar, así dos
    usuarios nunca comparten una transacción.
  - get_sync_connection(): para los workers de Celery y el seed (usa PyMySQL).

Centralizar la creación de conexiones aquí significa que si la BD
cambia de host, credenciales, o motor, el cambio ocurre en un único lugar.
"""

import aiomysql
import pymysql
from src.shared.config import (
    DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD,
    DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE,
)


async def crear_pool_async() -> aiomysql.Pool:
    """
    Pool de conexiones async a MariaDB para el bot.
    autocommit=True deja las lecturas sueltas sin transacción abierta;
    el motor de pedidos abre la suya explícitamente con conn.begin().
    """
    return await aiomysql.create_pool(
        host=DB_HOST,
        port=DB_PORT,
        user=DB_USER,
        password=DB_PASSWORD,
        db=DB_NAME,
        minsize=DB_POOL_MIN_SIZE,
        maxsize=DB_POOL_MAX_SIZE,
        autocommit=True
    )


async def cerrar_pool_async(pool: aiomysql.Pool) -> None:
    """Cierra el pool esperando a que se devuelvan las conexiones prestadas."""
    pool.close()
    await pool.wait_closed()


def get_sync_connection():
    """
    Conexión sync a MariaDB para los workers de Celery y el seed.
    Los workers no tienen event loop, por eso usan pymysql directamente.
    """
    return pymysql.connect(
        host=DB_HOST,
        port=DB_PORT,
        user=DB_USER,
        password=DB_PASSWORD,
        database=DB_NAME,
        autocommit=True
    )

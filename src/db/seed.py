"""
Crea las tablas de FarmaBot y carga datos de ejemplo.

  python -m src.db.seed

Se puede correr más de una vez: las tablas usan CREATE TABLE IF NOT EXISTS
y las filas llevan id explícito con INSERT IGNORE, así que una segunda
ejecución no duplica nada ni pisa el stock que ya haya cambiado.
"""

import os
from datetime import date, datetime

import pymysql

from src.infrastructure.clients.database import get_sync_connection
from src.shared.logger import obtener_logger
from src.shared.modelos import EstadoPedido, Pedido

logger = obtener_logger("seed")

RUTA_ESQUEMA = os.path.join(os.path.dirname(__file__), "schema.sql")

# (id, nombre, stock, fecha_vencimiento)
MEDICAMENTOS = [
    (1, "Aspirin", 500, date(2025, 6, 30)),
    (2, "Amoxicillin", 300, date(2024, 12, 31)),
    (3, "Lisinopril", 400, date(2025, 3, 15)),
    (4, "Levothyroxine", 250, date(2026, 1, 31)),
    (5, "Metformin", 350, date(2025, 9, 30)),
    (6, "Amlodipine", 200, date(2024, 11, 30)),
    (7, "Omeprazole", 450, date(2025, 7, 31)),
    (8, "Albuterol", 150, date(2026, 4, 30)),
    (9, "Gabapentin", 300, date(2025, 5, 31)),
    (10, "Metoprolol", 275, date(2024, 10, 31)),
    # Destino del pedido por defecto (DEFAULT_ORDER_MEDICINE).
    (11, "Acetaminophen 500mg", 1000, date(2025, 12, 31)),
]

PEDIDOS = [
    Pedido(1, "user123", 1, 2, EstadoPedido.ENTREGADO, datetime(2023, 5, 15)),
    Pedido(2, "patient456", 3, 1, EstadoPedido.ENVIADO, datetime(2023, 6, 2)),
    Pedido(3, "customer789", 2, 3, EstadoPedido.PROCESADO, datetime(2023, 6, 10)),
    Pedido(4, "client101", 5, 1, EstadoPedido.PENDIENTE, datetime(2023, 6, 12)),
    Pedido(5, "user123", 7, 2, EstadoPedido.ENTREGADO, datetime(2023, 5, 20)),
    Pedido(6, "patient456", 4, 1, EstadoPedido.ENVIADO, datetime(2023, 6, 5)),
    Pedido(7, "customer789", 6, 2, EstadoPedido.PROCESADO, datetime(2023, 6, 11)),
    Pedido(8, "client101", 8, 1, EstadoPedido.PENDIENTE, datetime(2023, 6, 13)),
    Pedido(9, "user123", 9, 3, EstadoPedido.ENTREGADO, datetime(2023, 5, 25)),
    Pedido(10, "patient456", 10, 1, EstadoPedido.ENVIADO, datetime(2023, 6, 7)),
]


def leer_sentencias(ruta: str = RUTA_ESQUEMA) -> list[str]:
    """Separa el script en sentencias; PyMySQL ejecuta una por llamada."""
    with open(ruta, encoding="utf-8") as archivo:
        lineas = [l for l in archivo if not l.lstrip().startswith("--")]
    return [s.strip() for s in "".join(lineas).split(";") if s.strip()]


def cargar_datos(conn) -> tuple[int, int]:
    """
    Crea las tablas e inserta los datos de ejemplo en una sola transacción.
    Devuelve cuántos medicamentos y pedidos se insertaron de verdad
    (los que ya existían no cuentan).
    """
    with conn.cursor() as cursor:
        for sentencia in leer_sentencias():
            cursor.execute(sentencia)

        conn.begin()
        try:
            medicamentos = cursor.executemany(
                "INSERT IGNORE INTO medicamentos (id, nombre, stock, fecha_vencimiento) VALUES (%s, %s, %s, %s)",
                MEDICAMENTOS
            )
            pedidos = cursor.executemany(
                """
                INSERT IGNORE INTO pedidos (id, usuario_id, medicamento_id, cantidad, estado, creado_en)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                [(p.id, p.usuario_id, p.medicamento_id, p.cantidad, p.estado.value, p.creado_en) for p in PEDIDOS]
            )
            conn.commit()
        except pymysql.MySQLError:
            conn.rollback()
            raise

    return medicamentos or 0, pedidos or 0


def main() -> None:
    conn = None
    try:
        conn = get_sync_connection()
        medicamentos, pedidos = cargar_datos(conn)
        logger.info(f"Seed terminado: {medicamentos} medicamento(s) y {pedidos} pedido(s) nuevos.")
    except pymysql.MySQLError as e:
        logger.error(f"No se pudo cargar la base: {e}")
        raise SystemExit(1)
    finally:
        if conn:
            conn.close()


if __name__ == "__main__":
    main()

"""
Repositorio de medicamentos.

Las funciones async las usa el bot (conexiones del pool aiomysql);
las *_sync las usan los workers de Celery (PyMySQL), que no tienen event loop.
Todas devuelven Medicamento, nunca tuplas crudas.
"""

from datetime import date, timedelta

from src.shared.modelos import Medicamento

COLUMNAS = "id, nombre, stock, fecha_vencimiento"


def _a_medicamento(fila) -> Medicamento:
    return Medicamento(id=fila[0], nombre=fila[1], stock=fila[2], fecha_vencimiento=fila[3])


def patron_nombre(fragmento: str) -> str:
    """
    Patrón LIKE para buscar el fragmento en cualquier parte del nombre.
    Escapamos % y _ para que el texto del usuario no actúe como comodín.
    """
    escapado = fragmento.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escapado}%"


def fecha_limite(horizonte_dias: int, hoy: date | None = None) -> date:
    """Último día (inclusive) que cuenta como 'por vencer'."""
    return (hoy or date.today()) + timedelta(days=horizonte_dias)


# =============================================================================
# Lecturas async (bot)
# =============================================================================

async def listar_medicamentos(conn) -> list[Medicamento]:
    """Todo el inventario, ordenado por nombre para el listado del bot."""
    async with conn.cursor() as cursor:
        await cursor.execute(f"SELECT {COLUMNAS} FROM medicamentos ORDER BY nombre ASC")
        filas = await cursor.fetchall()
    return [_a_medicamento(fila) for fila in filas]


async def buscar_medicamento_por_id(conn, medicamento_id: int, bloquear: bool = False) -> Medicamento | None:
    """
    Busca un medicamento por id.
    Con bloquear=True agrega FOR UPDATE: solo tiene sentido dentro de una
    transacción abierta, y retiene la fila hasta el COMMIT o ROLLBACK.
    """
    query = f"SELECT {COLUMNAS} FROM medicamentos WHERE id = %s"
    if bloquear:
        query += " FOR UPDATE"
    async with conn.cursor() as cursor:
        await cursor.execute(query, (medicamento_id,))
        fila = await cursor.fetchone()
    return _a_medicamento(fila) if fila else None


async def buscar_medicamento_por_nombre(conn, fragmento: str) -> Medicamento | None:
    """
    Primer medicamento (menor id) cuyo nombre contiene el fragmento,
    sin distinguir mayúsculas. No hay ranking de "mejor coincidencia".
    """
    async with conn.cursor() as cursor:
        await cursor.execute(
            f"""
            SELECT {COLUMNAS} FROM medicamentos
            WHERE LOWER(nombre) LIKE LOWER(%s)
            ORDER BY id ASC
            LIMIT 1
            """,
            (patron_nombre(fragmento),)
        )
        fila = await cursor.fetchone()
    return _a_medicamento(fila) if fila else None


async def buscar_por_vencer(conn, horizonte_dias: int, hoy: date | None = None) -> list[Medicamento]:
    """
    Medicamentos cuya fecha de vencimiento es anterior o igual a hoy + horizonte.
    Incluye los ya vencidos. Una lista vacía es un resultado válido.
    La fecha límite se calcula en Python para no depender de CURDATE()
    ni de la zona horaria del servidor de BD.
    """
    async with conn.cursor() as cursor:
        await cursor.execute(
            f"""
            SELECT {COLUMNAS} FROM medicamentos
            WHERE fecha_vencimiento <= %s
            ORDER BY fecha_vencimiento ASC, id ASC
            """,
            (fecha_limite(horizonte_dias, hoy),)
        )
        filas = await cursor.fetchall()
    return [_a_medicamento(fila) for fila in filas]


# =============================================================================
# Escrituras async (solo dentro de la transacción del motor de pedidos)
# =============================================================================

async def descontar_stock(conn, medicamento_id: int, cantidad: int) -> bool:
    """
    Resta cantidad al stock si alcanza.
    La condición stock >= cantidad en el WHERE hace que la BD nunca
    deje el stock negativo, aunque dos procesos compitan por la fila.
    Devuelve False si no se actualizó ninguna fila.
    """
    async with conn.cursor() as cursor:
        await cursor.execute(
            "UPDATE medicamentos SET stock = stock - %s WHERE id = %s AND stock >= %s",
            (cantidad, medicamento_id, cantidad)
        )
        return cursor.rowcount == 1


# =============================================================================
# Lecturas sync (workers de Celery)
# =============================================================================

def buscar_por_vencer_sync(conn, horizonte_dias: int, hoy: date | None = None) -> list[Medicamento]:
    """Gemela sincrónica de buscar_por_vencer() para los workers."""
    with conn.cursor() as cursor:
        cursor.execute(
            f"""
            SELECT {COLUMNAS} FROM medicamentos
            WHERE fecha_vencimiento <= %s
            ORDER BY fecha_vencimiento ASC, id ASC
            """,
            (fecha_limite(horizonte_dias, hoy),)
        )
        filas = cursor.fetchall()
    return [_a_medicamento(fila) for fila in filas]

"""
Repositorio de pedidos.
La tabla es de solo inserción desde el bot: el cambio de estado
(enviado, entregado) lo hace la farmacia por fuera de este sistema.
"""

from datetime import datetime

from src.shared.modelos import EstadoPedido


async def insertar_pedido(conn, usuario_id: str, medicamento_id: int, cantidad: int, creado_en: datetime | None = None) -> int:
    """
    Inserta un pedido en estado 'pendiente' y devuelve el id que generó
    AUTO_INCREMENT. Debe llamarse dentro de la transacción que descontó el stock.
    """
    async with conn.cursor() as cursor:
        await cursor.execute(
            """
            INSERT INTO pedidos (usuario_id, medicamento_id, cantidad, estado, creado_en)
            VALUES (%s, %s, %s, %s, %s)
            """,
            (usuario_id, medicamento_id, cantidad, EstadoPedido.PENDIENTE.value, creado_en or datetime.now())
        )
        return cursor.lastrowid

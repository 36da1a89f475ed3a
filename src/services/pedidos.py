"""
Motor de pedidos de FarmaBot.

Un pedido descuenta stock e inserta una fila en `pedidos` como una única
unidad atómica: o se aplican las dos escrituras o ninguna.

Dos mecanismos evitan la sobreventa cuando varios usuarios piden el
mismo medicamento a la vez:
  1. Un asyncio.Lock por medicamento serializa los intentos dentro del
     proceso del bot. Pedidos de medicamentos distintos no se esperan.
  2. SELECT ... FOR UPDATE dentro de la transacción retiene la fila
     frente a otros procesos (otro bot, un script de reposición).

Ningún mensaje sale hacia Telegram desde acá: el handler responde
al usuario recién cuando realizar_pedido() devolvió o lanzó.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime

import aiomysql

from src.infrastructure.repositories import (
    buscar_medicamento_por_id,
    buscar_medicamento_por_nombre,
    descontar_stock,
    insertar_pedido,
)
from src.shared.logger import obtener_logger
from src.shared.modelos import ConfirmacionPedido
from src.utils.exceptions import (
    CantidadInvalida,
    ErrorPedido,
    ErrorPersistencia,
    MedicamentoNoEncontrado,
    StockInsuficiente,
)

logger = obtener_logger("pedidos")

# Errores de infraestructura que se traducen a ErrorPersistencia.
# aiomysql re-exporta la jerarquía de PyMySQL; OSError cubre la red caída.
ERRORES_BD = (aiomysql.MySQLError, OSError)


class MotorPedidos:
    def __init__(self, pool):
        """
        :param pool: pool aiomysql (o cualquier objeto con acquire() como
                     context manager async que entregue conexiones).
        """
        self.pool = pool
        # Un candado vive mientras alguien lo espera o lo tiene tomado.
        self._candados: dict[int, asyncio.Lock] = {}
        self._esperando: dict[int, int] = {}

    async def realizar_pedido(self, usuario_id: str, selector: int | str, cantidad: int) -> ConfirmacionPedido:
        """
        Descuenta `cantidad` unidades del medicamento elegido y registra el pedido.

        :param usuario_id: identificador opaco de quien pide (el id de Telegram).
        :param selector:   int → id exacto; str → primer medicamento (menor id)
                           cuyo nombre contiene el texto, sin distinguir mayúsculas.
        :param cantidad:   unidades, mayor a cero.
        :raises CantidadInvalida, MedicamentoNoEncontrado, StockInsuficiente:
                reglas de negocio; el inventario y los pedidos quedan intactos.
        :raises ErrorPersistencia: la BD falló; la transacción se revirtió.
        """
        if cantidad <= 0:
            raise CantidadInvalida(cantidad)

        try:
            medicamento_id = await self._resolver_id(selector)

            async with self._candado(medicamento_id):
                async with self.pool.acquire() as conn:
                    confirmacion = await self._ejecutar_transaccion(
                        conn, str(usuario_id), selector, medicamento_id, cantidad
                    )

        except ErrorPedido:
            raise
        except ERRORES_BD as e:
            logger.error(f"[usuario={usuario_id}] Error de BD al pedir '{selector}' x{cantidad}: {e}")
            raise ErrorPersistencia(f"No se pudo registrar el pedido: {e}") from e

        logger.info(
            f"[usuario={usuario_id}] Pedido #{confirmacion.pedido_id} registrado: "
            f"'{confirmacion.nombre_medicamento}' x{cantidad}"
        )
        return confirmacion

    @asynccontextmanager
    async def _candado(self, medicamento_id: int):
        """
        Toma el candado del medicamento, creándolo si hace falta.
        Al salir el último interesado se borra, así los ids inexistentes
        que mande un usuario no quedan ocupando memoria.
        """
        candado = self._candados.get(medicamento_id)
        if candado is None:
            candado = self._candados[medicamento_id] = asyncio.Lock()
            self._esperando[medicamento_id] = 0
        self._esperando[medicamento_id] += 1
        try:
            async with candado:
                yield
        finally:
            self._esperando[medicamento_id] -= 1
            if self._esperando[medicamento_id] == 0:
                del self._esperando[medicamento_id]
                del self._candados[medicamento_id]

    async def _resolver_id(self, selector: int | str) -> int:
        """
        Traduce el selector a un id. Un id explícito no requiere lectura:
        su existencia se verifica dentro de la transacción.
        """
        if isinstance(selector, int):
            return selector

        async with self.pool.acquire() as conn:
            medicamento = await buscar_medicamento_por_nombre(conn, selector)
        if medicamento is None:
            logger.info(f"Sin coincidencias para el medicamento '{selector}'")
            raise MedicamentoNoEncontrado(selector)
        return medicamento.id

    async def _ejecutar_transaccion(self, conn, usuario_id: str, selector, medicamento_id: int, cantidad: int) -> ConfirmacionPedido:
        await conn.begin()
        try:
            medicamento = await buscar_medicamento_por_id(conn, medicamento_id, bloquear=True)
            if medicamento is None:
                raise MedicamentoNoEncontrado(selector)

            if medicamento.stock < cantidad:
                logger.warning(
                    f"[usuario={usuario_id}] Stock insuficiente de '{medicamento.nombre}': "
                    f"hay {medicamento.stock}, se pidieron {cantidad}"
                )
                raise StockInsuficiente(medicamento.nombre, medicamento.stock, cantidad)

            # Con la fila bloqueada no debería fallar; si otro proceso la tocó
            # sin FOR UPDATE, la condición del UPDATE igual frena la sobreventa.
            if not await descontar_stock(conn, medicamento.id, cantidad):
                actual = await buscar_medicamento_por_id(conn, medicamento.id)
                disponible = actual.stock if actual else 0
                logger.warning(
                    f"[usuario={usuario_id}] El UPDATE condicional de '{medicamento.nombre}' no afectó filas: "
                    f"hay {disponible}, se pidieron {cantidad}"
                )
                raise StockInsuficiente(medicamento.nombre, disponible, cantidad)

            pedido_id = await insertar_pedido(conn, usuario_id, medicamento.id, cantidad, datetime.now())
            await conn.commit()

        except BaseException:
            await self._revertir(conn)
            raise

        return ConfirmacionPedido(pedido_id=pedido_id, nombre_medicamento=medicamento.nombre, cantidad=cantidad)

    async def _revertir(self, conn) -> None:
        """
        ROLLBACK de la transacción en curso. Si el rollback también falla
        (conexión cortada) se registra: MariaDB descarta la transacción
        al cerrarse la conexión, y la excepción original es la que importa.
        """
        try:
            await conn.rollback()
        except ERRORES_BD as e:
            logger.error(f"Falló el ROLLBACK de la transacción del pedido: {e}")

"""
Fixtures de pytest para FarmaBot.

BaseDatosFalsa reemplaza a MariaDB en memoria: entiende exactamente las
consultas que emiten los repositorios, soporta transacciones (BEGIN,
COMMIT, ROLLBACK con deshacer) y permite inyectar fallos de BD.
Cada sentencia async cede el control al event loop, así las corrutinas
concurrentes se intercalan como lo harían contra una BD real.
"""

import asyncio
from datetime import date, timedelta
from types import SimpleNamespace

import aiomysql
import pytest

HOY = date(2026, 1, 15)


# =============================================================================
# Base de datos en memoria
# =============================================================================

class BaseDatosFalsa:
    def __init__(self):
        self.medicamentos: dict[int, dict] = {}
        self.pedidos: list[dict] = []
        self.siguiente_pedido_id = 1
        self.consultas: list[str] = []
        self.rollbacks = 0
        self.commits = 0
        # Prefijo de sentencia ("INSERT", "UPDATE", "SELECT", "COMMIT") que debe fallar.
        self.fallar_en: str | None = None
        # UPDATEs de stock rechazados por la condición `stock >= cantidad`.
        self.updates_sin_efecto = 0
        # Simula a otro proceso que toca la fila justo antes del UPDATE.
        self.antes_de_update = None
        self.transacciones_abiertas = 0
        self.max_transacciones_abiertas = 0

    def agregar(self, id: int, nombre: str, stock: int, fecha_vencimiento: date) -> None:
        self.medicamentos[id] = {
            "id": id, "nombre": nombre, "stock": stock, "fecha_vencimiento": fecha_vencimiento
        }

    def stock(self, id: int) -> int:
        return self.medicamentos[id]["stock"]

    def _fila(self, m: dict) -> tuple:
        return (m["id"], m["nombre"], m["stock"], m["fecha_vencimiento"])

    def verificar_fallo(self, sentencia: str) -> None:
        if self.fallar_en and sentencia.startswith(self.fallar_en):
            raise aiomysql.OperationalError(2013, "Lost connection to MySQL server during query")

    def ejecutar(self, query: str, params: tuple, deshacer: list | None):
        """Devuelve (filas, rowcount, lastrowid)."""
        q = " ".join(query.split()).upper()
        self.consultas.append(q)
        self.verificar_fallo(q)

        if q.startswith("SELECT"):
            todos = list(self.medicamentos.values())
            if "ORDER BY NOMBRE" in q:
                filas = sorted(todos, key=lambda m: m["nombre"])
            elif "WHERE ID = %S" in q:
                filas = [m for m in todos if m["id"] == params[0]]
            elif "LIKE" in q:
                fragmento = params[0][1:-1].replace("\\%", "%").replace("\\_", "_").replace("\\\\", "\\")
                filas = sorted(
                    (m for m in todos if fragmento.lower() in m["nombre"].lower()),
                    key=lambda m: m["id"]
                )[:1]
            elif "FECHA_VENCIMIENTO <= %S" in q:
                filas = sorted(
                    (m for m in todos if m["fecha_vencimiento"] <= params[0]),
                    key=lambda m: (m["fecha_vencimiento"], m["id"])
                )
            else:
                raise AssertionError(f"SELECT inesperado: {q}")
            return [self._fila(m) for m in filas], len(filas), None

        if q.startswith("UPDATE MEDICAMENTOS SET STOCK = STOCK - %S"):
            if self.antes_de_update:
                self.antes_de_update()
            cantidad, id, minimo = params
            m = self.medicamentos.get(id)
            if m is None or m["stock"] < minimo:
                self.updates_sin_efecto += 1
                return [], 0, None
            anterior = m["stock"]
            m["stock"] -= cantidad
            if deshacer is not None:
                deshacer.append(lambda: m.__setitem__("stock", anterior))
            return [], 1, None

        if q.startswith("INSERT INTO PEDIDOS"):
            usuario_id, medicamento_id, cantidad, estado, creado_en = params
            pedido = {
                "id": self.siguiente_pedido_id,
                "usuario_id": usuario_id,
                "medicamento_id": medicamento_id,
                "cantidad": cantidad,
                "estado": estado,
                "creado_en": creado_en,
            }
            self.siguiente_pedido_id += 1
            self.pedidos.append(pedido)
            if deshacer is not None:
                deshacer.append(lambda: self.pedidos.remove(pedido))
            return [], 1, pedido["id"]

        raise AssertionError(f"Consulta inesperada: {q}")


class CursorFalso:
    def __init__(self, conn):
        self.conn = conn
        self.filas = []
        self.rowcount = -1
        self.lastrowid = None

    def _ejecutar(self, query, params=()):
        self.filas, self.rowcount, self.lastrowid = self.conn.db.ejecutar(
            query, params, self.conn.deshacer if self.conn.en_transaccion else None
        )

    # --- versión async (aiomysql) ---
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute(self, query, params=()):
        await asyncio.sleep(0)
        self._ejecutar(query, params)

    async def fetchall(self):
        return list(self.filas)

    async def fetchone(self):
        return self.filas[0] if self.filas else None


class CursorSyncFalso(CursorFalso):
    # --- versión sync (PyMySQL) ---
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=()):
        self._ejecutar(query, params)

    def fetchall(self):
        return list(self.filas)


class ConexionFalsa:
    def __init__(self, db: BaseDatosFalsa):
        self.db = db
        self.en_transaccion = False
        self.deshacer: list = []

    def cursor(self):
        return CursorFalso(self)

    async def begin(self):
        await asyncio.sleep(0)
        self.en_transaccion = True
        self.deshacer = []
        self.db.transacciones_abiertas += 1
        self.db.max_transacciones_abiertas = max(
            self.db.max_transacciones_abiertas, self.db.transacciones_abiertas
        )

    def _cerrar_transaccion(self):
        if self.en_transaccion:
            self.db.transacciones_abiertas -= 1
        self.en_transaccion = False
        self.deshacer = []

    async def commit(self):
        await asyncio.sleep(0)
        self.db.verificar_fallo("COMMIT")
        self.db.commits += 1
        self._cerrar_transaccion()

    async def rollback(self):
        await asyncio.sleep(0)
        self.db.rollbacks += 1
        for accion in reversed(self.deshacer):
            accion()
        self._cerrar_transaccion()


class ConexionSyncFalsa:
    def __init__(self, db: BaseDatosFalsa):
        self.db = db
        self.en_transaccion = False
        self.deshacer: list = []
        self.cerrada = False

    def cursor(self):
        return CursorSyncFalso(self)

    def close(self):
        self.cerrada = True


class _Prestamo:
    def __init__(self, pool):
        self.pool = pool

    async def __aenter__(self):
        self.pool.prestadas += 1
        self.pool.max_prestadas = max(self.pool.max_prestadas, self.pool.prestadas)
        return ConexionFalsa(self.pool.db)

    async def __aexit__(self, *exc):
        self.pool.prestadas -= 1
        return False


class PoolFalso:
    """Imita aiomysql.Pool.acquire() como context manager async."""

    def __init__(self, db: BaseDatosFalsa):
        self.db = db
        self.prestadas = 0
        self.max_prestadas = 0

    def acquire(self):
        return _Prestamo(self)


# =============================================================================
# Canal de mensajería
# =============================================================================

class CanalFalso:
    """
    Registra cada envío. `fallar` decide por texto si el envío lanza;
    `demora` simula la latencia de Telegram.
    """

    def __init__(self, fallar=None, demora: float = 0.0):
        self.enviados: list[tuple] = []
        self.fallar = fallar or (lambda texto: False)
        self.demora = demora
        self.en_vuelo = 0
        self.max_en_vuelo = 0

    async def enviar(self, chat_id, texto, modo=None):
        self.en_vuelo += 1
        self.max_en_vuelo = max(self.max_en_vuelo, self.en_vuelo)
        try:
            await asyncio.sleep(self.demora)
            if self.fallar(texto):
                raise RuntimeError("Forbidden: bot was blocked by the user")
            self.enviados.append((chat_id, texto, modo))
        finally:
            self.en_vuelo -= 1


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def base_datos() -> BaseDatosFalsa:
    db = BaseDatosFalsa()

    db.agregar(1, "Aspirin", 5, HOY + timedelta(days=300))
    db.agregar(2, "Amoxicillin", 300, HOY + timedelta(days=10))
    db.agregar(3, "Acetaminophen 500mg", 1000, HOY + timedelta(days=180))
    db.agregar(4, "Acetaminophen Forte", 50, HOY + timedelta(days=181))
    db.agregar(5, "Metoprolol", 275, HOY - timedelta(days=5))
    db.agregar(6, "Gel_50%", 10, HOY + timedelta(days=400))

    return db


@pytest.fixture
def pool(base_datos) -> PoolFalso:
    return PoolFalso(base_datos)


@pytest.fixture
def canal() -> CanalFalso:
    return CanalFalso()


# =============================================================================
# Objetos de Telegram para los handlers
# =============================================================================

class MensajeFalso:
    def __init__(self, text=None, reply_to_message=None, from_user=None):
        self.text = text
        self.reply_to_message = reply_to_message
        self.from_user = from_user
        self.respuestas: list[tuple[str, dict]] = []

    async def reply_text(self, texto, **kwargs):
        self.respuestas.append((texto, kwargs))


def crear_update(texto=None, usuario_id=111, idioma="es", chat_id=-100123, respondido=None):
    usuario = SimpleNamespace(id=usuario_id, language_code=idioma, full_name=f"Usuario {usuario_id}")
    mensaje = MensajeFalso(texto, reply_to_message=respondido, from_user=usuario)
    return SimpleNamespace(
        effective_user=usuario,
        effective_chat=SimpleNamespace(id=chat_id),
        effective_message=mensaje,
    )


def crear_contexto(args=None, bot_data=None, bot=None):
    return SimpleNamespace(
        args=args or [],
        bot_data=bot_data if bot_data is not None else {},
        user_data={},
        bot=bot,
    )


def respuestas(update) -> list[str]:
    return [texto for texto, _ in update.effective_message.respuestas]


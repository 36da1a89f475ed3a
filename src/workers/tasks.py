import asyncio

from redis.exceptions import LockError, RedisError
from telegram import Bot

from src.workers.celery_app import celery_app
from src.shared.logger import obtener_logger
from src.shared.config import (
    EXPIRY_HORIZON_DAYS,
    PHARMACY_GROUP_CHAT_ID,
    TELEGRAM_BOT_TOKEN,
    VERIFICATION_INTERVAL_SECONDS,
)
from src.infrastructure import (
    CanalTelegram,
    buscar_por_vencer_sync,
    get_redis_client,
    get_sync_connection,
    obtener_candado_vencimientos,
)
from src.services.vencimientos import notificar_vencimientos
from src.shared.modelos import ReporteNotificacion

logger = obtener_logger("worker")

# El candado expira solo si el worker muere sin liberarlo.
EXPIRACION_CANDADO_SEGUNDOS = max(VERIFICATION_INTERVAL_SECONDS * 5, 300)


async def _notificar(medicamentos) -> ReporteNotificacion:
    """
    Los workers no tienen una Application de Telegram corriendo:
    se crea un Bot solo para este ciclo y se cierra al terminar.
    """
    async with Bot(TELEGRAM_BOT_TOKEN) as bot:
        return await notificar_vencimientos(medicamentos, CanalTelegram(bot), PHARMACY_GROUP_CHAT_ID)


@celery_app.task(bind=True)
def verificar_vencimientos(self, horizonte_dias: int = EXPIRY_HORIZON_DAYS) -> dict:
    """
    Un ciclo de vencimientos disparado por Beat.

    - Si otro worker todavía está corriendo un ciclo, este se saltea
      (candado no bloqueante en Redis).
    - Un fallo de la BD o de Redis marca la tarea como fallida y se registra,
      pero no se reintenta: el próximo disparo de Beat es el reintento natural,
      porque los medicamentos siguen dentro del horizonte.
    - Los fallos de envío individuales ya vienen contados en el reporte.
    """
    try:
        candado = obtener_candado_vencimientos(get_redis_client(), EXPIRACION_CANDADO_SEGUNDOS)
        tomado = candado.acquire()
    except RedisError as e:
        logger.error(f"[task_id={self.request.id}] Redis no disponible en verificar_vencimientos: {e}")
        raise

    if not tomado:
        logger.warning(
            f"[task_id={self.request.id}] "
            f"verificar_vencimientos salteado: otro ciclo sigue en curso."
        )
        return {"salteado": True}

    conn = None
    try:
        # Conexión sync porque los workers no tienen event loop.
        conn = get_sync_connection()
        por_vencer = buscar_por_vencer_sync(conn, horizonte_dias)
        conn.close()
        conn = None

        logger.info(
            f"[task_id={self.request.id}] "
            f"verificar_vencimientos: {len(por_vencer)} medicamento(s) dentro de {horizonte_dias} días."
        )

        reporte = asyncio.run(_notificar(por_vencer)) if por_vencer else ReporteNotificacion()

        logger.info(
            f"[task_id={self.request.id}] "
            f"{reporte.exitosos}/{reporte.intentados} alertas enviadas, {reporte.fallidos} fallida(s)."
        )
        return reporte.como_dict()

    except Exception as e:
        logger.error(f"[task_id={self.request.id}] Error en verificar_vencimientos: {e}")
        raise

    finally:
        if conn:
            conn.close()
        try:
            candado.release()
        except LockError:
            # Expiró antes de terminar: otro worker pudo haberlo tomado.
            logger.warning(f"[task_id={self.request.id}] El candado de vencimientos ya había expirado.")

"""
Detección y aviso de medicamentos próximos a vencer.

Un ciclo completo es: buscar_por_vencer() → notificar_vencimientos().
El ciclo lo dispara el Programador del bot o la tarea de Celery;
este módulo no sabe cuál de los dos lo llamó.

El envío de alertas es un fan-out: una corrutina por medicamento, todas
en paralelo, acotadas por un semáforo para no saturar la API de Telegram.
Que falle una alerta no cancela ni demora a las demás.
"""

import asyncio
from datetime import date
from typing import Iterable

from src.infrastructure.clients.telegram import ModoRender
from src.infrastructure.repositories import buscar_por_vencer
from src.shared.config import (
    NOTIFICATION_MAX_CONCURRENCY,
    NOTIFICATION_SEND_TIMEOUT_SECONDS,
)
from src.shared.logger import obtener_logger
from src.shared.modelos import Medicamento, ReporteNotificacion
from src.utils.exceptions import ErrorEnvioNotificacion
from src.utils.formato import escapar_markdown, formatear_fecha

logger = obtener_logger("vencimientos")


def aviso_dias(dias_restantes: int) -> str:
    if dias_restantes < 0:
        atraso = -dias_restantes
        return f"venció hace {atraso} día" if atraso == 1 else f"venció hace {atraso} días"
    if dias_restantes == 0:
        return "vence HOY"
    if dias_restantes == 1:
        return "vence mañana"
    return f"vence en {dias_restantes} días"


def construir_alerta(medicamento: Medicamento, hoy: date) -> str:
    """
    Texto MarkdownV2 de la alerta. Solo el nombre viene de la BD y se escapa;
    fecha y números van dentro de backticks, donde '-' no necesita escape.
    Los días restantes se muestran tal cual aunque sean negativos.
    """
    dias = medicamento.dias_para_vencer(hoy)
    return (
        "⚠️ *Alerta de vencimiento*\n\n"
        f"*Medicamento:* {escapar_markdown(medicamento.nombre)}\n"
        f"*Vencimiento:* `{formatear_fecha(medicamento.fecha_vencimiento)}`\n"
        f"*Días restantes:* `{dias}` \\({aviso_dias(dias)}\\)\n"
        f"*Stock:* `{medicamento.stock}`\n"
        "Revisar y tomar las medidas necesarias\\."
    )


async def notificar_vencimientos(
    medicamentos: Iterable[Medicamento],
    canal,
    chat_id: int | str,
    hoy: date | None = None,
    max_concurrentes: int = NOTIFICATION_MAX_CONCURRENCY,
    timeout_envio: float = NOTIFICATION_SEND_TIMEOUT_SECONDS,
) -> ReporteNotificacion:
    """
    Envía una alerta por medicamento al chat indicado, en paralelo.

    :param canal:            objeto con `async enviar(chat_id, texto, modo)`.
    :param max_concurrentes: envíos simultáneos como máximo.
    :param timeout_envio:    segundos por envío; vencido el plazo cuenta como fallo.
    :return: ReporteNotificacion. Nunca lanza por fallos individuales de envío.
    """
    medicamentos = list(medicamentos)
    hoy = hoy or date.today()
    semaforo = asyncio.Semaphore(max(1, max_concurrentes))

    async def enviar_una(medicamento: Medicamento) -> ErrorEnvioNotificacion | None:
        async with semaforo:
            try:
                texto = construir_alerta(medicamento, hoy)
                await asyncio.wait_for(
                    canal.enviar(chat_id, texto, ModoRender.MARKDOWN),
                    timeout=timeout_envio
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                error = ErrorEnvioNotificacion(medicamento.id, e)
                logger.error(f"{error} ('{medicamento.nombre}')")
                return error

        # WARNING: situación que requiere atención humana, no un error del sistema.
        logger.warning(
            f"Alerta enviada: '{medicamento.nombre}' (id={medicamento.id}) "
            f"{aviso_dias(medicamento.dias_para_vencer(hoy))}"
        )
        return None

    resultados = await asyncio.gather(*(enviar_una(m) for m in medicamentos))

    reporte = ReporteNotificacion(intentados=len(medicamentos))
    for resultado in resultados:
        if resultado is None:
            reporte.exitosos += 1
        else:
            reporte.fallidos += 1
            reporte.ids_fallidos.append(resultado.medicamento_id)
    return reporte


async def ejecutar_ciclo(pool, canal, chat_id: int | str, horizonte_dias: int, hoy: date | None = None) -> ReporteNotificacion:
    """
    Un ciclo completo: consulta y después avisa.
    La conexión se devuelve al pool antes del fan-out para no retenerla
    mientras se espera a Telegram. Un fallo de la consulta se propaga:
    quien dispara el ciclo decide cómo registrarlo.
    """
    async with pool.acquire() as conn:
        por_vencer = await buscar_por_vencer(conn, horizonte_dias, hoy)

    logger.info(f"verificar_vencimientos: {len(por_vencer)} medicamento(s) dentro de {horizonte_dias} días.")
    if not por_vencer:
        return ReporteNotificacion()

    reporte = await notificar_vencimientos(por_vencer, canal, chat_id, hoy)
    logger.info(
        f"Ciclo terminado: {reporte.exitosos}/{reporte.intentados} alertas enviadas, "
        f"{reporte.fallidos} fallida(s)."
    )
    return reporte

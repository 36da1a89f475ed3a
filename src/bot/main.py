"""
Punto de entrada del bot de Telegram de FarmaBot.

  python -m src.bot.main [--modo-programador interno|celery] [--intervalo N]

Todo corre en un único event loop (el de la Application):
  1. los handlers que atienden a los usuarios;
  2. el Programador que dispara el ciclo de vencimientos (modo "interno").

En modo "celery" el bot no programa nada: el ciclo lo dispara Celery Beat
y lo ejecuta un worker (ver src/workers/).
"""

import argparse
from functools import partial

from telegram import Update
from telegram.ext import Application, CommandHandler, MessageHandler, filters

from src.bot import handlers, moderacion
from src.infrastructure import CanalTelegram, cerrar_pool_async, crear_pool_async
from src.scheduler import Programador
from src.services import MotorPedidos, ejecutar_ciclo
from src.shared.config import (
    EXPIRY_HORIZON_DAYS,
    PHARMACY_GROUP_CHAT_ID,
    SCHEDULER_INITIAL_DELAY_SECONDS,
    SCHEDULER_MODE,
    TELEGRAM_BOT_TOKEN,
    VERIFICATION_INTERVAL_SECONDS,
)
from src.shared.logger import obtener_logger
from src.utils.input_utils import parsear_entero_positivo

logger = obtener_logger("bot")

MODOS_PROGRAMADOR = ("interno", "celery")


def registrar_handlers(app: Application) -> None:
    app.add_handler(CommandHandler("start", handlers.start))
    app.add_handler(CommandHandler("mensaje", handlers.mensaje))
    app.add_handler(CommandHandler("inventario", handlers.inventario))
    app.add_handler(CommandHandler("pedido", handlers.pedido))
    app.add_handler(CommandHandler("menu", handlers.menu))
    app.add_handler(CommandHandler("ayuda", handlers.ayuda))

    app.add_handler(CommandHandler("expulsar", moderacion.expulsar))
    app.add_handler(CommandHandler("banear", moderacion.banear))
    app.add_handler(CommandHandler("silenciar", moderacion.silenciar))

    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handlers.recibir_texto))
    app.add_handler(MessageHandler(~filters.TEXT & ~filters.COMMAND, handlers.recibir_no_texto))

    app.add_error_handler(handlers.registrar_error)


async def al_iniciar(app: Application, modo_programador: str, intervalo: int) -> None:
    """
    post_init de la Application: crea los recursos compartidos una sola vez
    y los deja en bot_data para que los handlers los encuentren.
    """
    pool = await crear_pool_async()
    canal = CanalTelegram(app.bot)

    app.bot_data["pool"] = pool
    app.bot_data["canal"] = canal
    app.bot_data["motor"] = MotorPedidos(pool)
    logger.info("Pool de MariaDB creado.")

    if modo_programador != "interno":
        logger.info("Modo celery: el ciclo de vencimientos lo dispara Celery Beat.")
        return

    if not PHARMACY_GROUP_CHAT_ID:
        logger.warning("PHARMACY_GROUP_CHAT_ID no está configurado: las alertas van a fallar.")

    programador = Programador(
        intervalo,
        partial(ejecutar_ciclo, pool, canal, PHARMACY_GROUP_CHAT_ID, EXPIRY_HORIZON_DAYS),
        retraso_inicial=SCHEDULER_INITIAL_DELAY_SECONDS
    )
    programador.iniciar()
    app.bot_data["programador"] = programador
    app.bot_data["intervalo"] = intervalo


async def al_detener(app: Application) -> None:
    """
    post_stop: el bot todavía puede enviar mensajes, así que el tick
    en curso tiene tiempo de terminar su fan-out antes de cerrar.
    """
    programador = app.bot_data.pop("programador", None)
    if programador is not None:
        intervalo = app.bot_data.get("intervalo", VERIFICATION_INTERVAL_SECONDS)
        await programador.detener(esperar_en_curso=True, timeout=intervalo)


async def al_apagar(app: Application) -> None:
    pool = app.bot_data.pop("pool", None)
    if pool is not None:
        await cerrar_pool_async(pool)
        logger.info("Pool de MariaDB cerrado.")


def construir_aplicacion(modo_programador: str = SCHEDULER_MODE, intervalo: int = VERIFICATION_INTERVAL_SECONDS) -> Application:
    app = (
        Application.builder()
        .token(TELEGRAM_BOT_TOKEN)
        .post_init(partial(al_iniciar, modo_programador=modo_programador, intervalo=intervalo))
        .post_stop(al_detener)
        .post_shutdown(al_apagar)
        .build()
    )
    registrar_handlers(app)
    return app


def intervalo_valido(valor: str) -> int:
    """Tipo de argparse para --intervalo: segundos enteros mayores a cero."""
    segundos = parsear_entero_positivo(valor)
    if segundos is None:
        raise argparse.ArgumentTypeError(f"el intervalo debe ser un entero mayor a cero: {valor!r}")
    return segundos


def parsear_argumentos(argv=None):
    parser = argparse.ArgumentParser(
        description="FarmaBot — Bot de Telegram de inventario, pedidos y alertas de vencimiento"
    )
    parser.add_argument(
        "--modo-programador",
        choices=MODOS_PROGRAMADOR,
        default=SCHEDULER_MODE if SCHEDULER_MODE in MODOS_PROGRAMADOR else "interno",
        help=f"Quién dispara el ciclo de vencimientos (default: {SCHEDULER_MODE})"
    )
    parser.add_argument(
        "--intervalo",
        type=intervalo_valido,
        default=VERIFICATION_INTERVAL_SECONDS,
        help=f"Segundos entre ciclos en modo interno (default: {VERIFICATION_INTERVAL_SECONDS})"
    )
    return parser.parse_args(argv)


def main() -> None:
    args = parsear_argumentos()

    if not TELEGRAM_BOT_TOKEN:
        logger.error("Falta TELEGRAM_BOT_TOKEN en el entorno o en el archivo .env.")
        raise SystemExit(1)

    app = construir_aplicacion(args.modo_programador, args.intervalo)
    logger.info(f"Iniciando FarmaBot (programador: {args.modo_programador})...")

    # run_polling maneja SIGINT/SIGTERM y llama a post_stop y post_shutdown al salir.
    app.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()

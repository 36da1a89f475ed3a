"""
Handlers de los comandos y mensajes del bot.

Cada handler recibe las dependencias desde context.bot_data, que la
Application carga al arrancar (ver main.py):
  - "pool":  pool aiomysql para las lecturas sueltas (inventario).
  - "motor": MotorPedidos, dueño de las transacciones de pedidos.
  - "canal": CanalTelegram, para reenviar los mensajes anónimos.

Ningún handler toca la BD dentro de una transacción propia: los pedidos
pasan siempre por el motor, y la respuesta al usuario sale recién cuando
el motor terminó.
"""

from telegram import KeyboardButton, ReplyKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from src.bot.textos import idioma_de, texto, textos_de_boton
from src.infrastructure.repositories import listar_medicamentos
from src.services.pedidos import ERRORES_BD
from src.shared.config import DEFAULT_ORDER_MEDICINE, DEFAULT_ORDER_QUANTITY
from src.shared.logger import obtener_logger
from src.utils.exceptions import (
    CantidadInvalida,
    ErrorPersistencia,
    MedicamentoNoEncontrado,
    StockInsuficiente,
)
from src.utils.formato import formatear_fecha_larga
from src.utils.input_utils import parsear_argumentos_pedido

logger = obtener_logger("bot")

# Clave de user_data con el chat del farmacéutico que espera un mensaje anónimo.
CLAVE_DESTINO_ANONIMO = "destino_anonimo"


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    /start sin argumentos saluda. Con argumento es un deep link
    t.me/<bot>?start=<chat_id>: el próximo texto del usuario se reenvía
    de forma anónima a ese chat.
    """
    idioma = idioma_de(update.effective_user)

    if not context.args:
        logger.info(f"[usuario={update.effective_user.id}] /start")
        await update.effective_message.reply_text(texto(idioma, "bienvenida"))
        return

    try:
        destino = int(context.args[0])
    except ValueError:
        logger.info(f"[usuario={update.effective_user.id}] /start con parámetro inválido: {context.args[0]}")
        await update.effective_message.reply_text(texto(idioma, "enlace_invalido"))
        return

    logger.info(f"[usuario={update.effective_user.id}] /start para escribirle al chat {destino}")
    context.user_data[CLAVE_DESTINO_ANONIMO] = destino
    await update.effective_message.reply_text(texto(idioma, "escribi_mensaje"))


async def mensaje(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Devuelve el enlace que otros usan para escribirle a este chat."""
    idioma = idioma_de(update.effective_user)
    enlace = f"{context.bot.link}?start={update.effective_chat.id}"
    await update.effective_message.reply_text(texto(idioma, "enlace_mensajes", enlace=enlace))


async def inventario(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    idioma = idioma_de(update.effective_user)
    logger.info(f"[usuario={update.effective_user.id}] Listando inventario")

    try:
        async with context.bot_data["pool"].acquire() as conn:
            medicamentos = await listar_medicamentos(conn)
    except ERRORES_BD as e:
        logger.error(f"Error al listar el inventario: {e}")
        await update.effective_message.reply_text(texto(idioma, "error_inventario"))
        return

    if not medicamentos:
        await update.effective_message.reply_text(texto(idioma, "sin_medicamentos"))
        return

    lineas = [
        texto(
            idioma, "linea_inventario",
            nombre=m.nombre,
            stock=m.stock,
            vencimiento=formatear_fecha_larga(m.fecha_vencimiento)
        )
        for m in medicamentos
    ]
    await update.effective_message.reply_text(f"{texto(idioma, 'inventario')}:\n\n" + "\n\n".join(lineas))


async def pedido(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/pedido [medicamento...] [cantidad]. Sin argumentos usa el pedido por defecto."""
    argumentos = parsear_argumentos_pedido(context.args or [], DEFAULT_ORDER_MEDICINE, DEFAULT_ORDER_QUANTITY)
    if argumentos is None:
        idioma = idioma_de(update.effective_user)
        await update.effective_message.reply_text(texto(idioma, "pedido_cantidad_invalida"))
        return

    selector, cantidad = argumentos
    await _hacer_pedido(update, context, selector, cantidad)


async def _hacer_pedido(update: Update, context: ContextTypes.DEFAULT_TYPE, selector, cantidad: int) -> None:
    idioma = idioma_de(update.effective_user)
    motor = context.bot_data["motor"]

    try:
        confirmacion = await motor.realizar_pedido(str(update.effective_user.id), selector, cantidad)
    except CantidadInvalida:
        respuesta = texto(idioma, "pedido_cantidad_invalida")
    except MedicamentoNoEncontrado as e:
        respuesta = texto(idioma, "pedido_no_encontrado", selector=e.selector)
    except StockInsuficiente as e:
        respuesta = texto(idioma, "pedido_sin_stock", nombre=e.nombre, disponible=e.disponible)
    except ErrorPersistencia:
        # El motor ya registró el detalle; al usuario solo le decimos que reintente.
        respuesta = texto(idioma, "pedido_error")
    else:
        respuesta = texto(
            idioma, "pedido_ok",
            pedido_id=confirmacion.pedido_id,
            cantidad=confirmacion.cantidad,
            nombre=confirmacion.nombre_medicamento
        )

    await update.effective_message.reply_text(respuesta)


async def menu(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    idioma = idioma_de(update.effective_user)
    teclado = ReplyKeyboardMarkup(
        [
            [KeyboardButton(texto(idioma, "boton_inventario"))],
            [KeyboardButton(texto(idioma, "boton_pedido"))],
            [KeyboardButton(texto(idioma, "boton_ayuda"))],
        ],
        resize_keyboard=True,
        one_time_keyboard=True
    )
    await update.effective_message.reply_text(texto(idioma, "menu"), reply_markup=teclado)


async def ayuda(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    idioma = idioma_de(update.effective_user)
    await update.effective_message.reply_text(texto(idioma, "ayuda"), parse_mode=ParseMode.MARKDOWN_V2)


async def recibir_texto(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Texto libre: si el usuario llegó por un deep link se reenvía como
    mensaje anónimo; si no, se interpretan los botones del menú.
    """
    idioma = idioma_de(update.effective_user)
    contenido = update.effective_message.text

    destino = context.user_data.pop(CLAVE_DESTINO_ANONIMO, None)
    if destino is not None:
        await _reenviar_anonimo(update, context, destino, contenido, idioma)
        return

    if contenido in textos_de_boton("boton_inventario"):
        await inventario(update, context)
    elif contenido in textos_de_boton("boton_pedido"):
        await _hacer_pedido(update, context, DEFAULT_ORDER_MEDICINE, DEFAULT_ORDER_QUANTITY)
    elif contenido in textos_de_boton("boton_ayuda"):
        await ayuda(update, context)
    else:
        await update.effective_message.reply_text(texto(idioma, "no_entiendo"))


async def recibir_no_texto(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Fotos, stickers, etc. Solo importan si hay un mensaje anónimo pendiente."""
    if CLAVE_DESTINO_ANONIMO in context.user_data:
        idioma = idioma_de(update.effective_user)
        await update.effective_message.reply_text(texto(idioma, "solo_texto"))


async def _reenviar_anonimo(update: Update, context: ContextTypes.DEFAULT_TYPE, destino: int, contenido: str, idioma: str) -> None:
    canal = context.bot_data["canal"]
    try:
        await canal.enviar(destino, texto(idioma, "mensaje_anonimo", texto=contenido))
    except TelegramError as e:
        logger.warning(f"No se pudo reenviar el mensaje anónimo al chat {destino}: {e}")
        await update.effective_message.reply_text(texto(idioma, "mensaje_no_enviado"))
        return

    logger.info(f"Mensaje anónimo reenviado al chat {destino}")
    await update.effective_message.reply_text(texto(idioma, "mensaje_enviado"))


async def registrar_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Error handler de la Application: cualquier excepción no capturada por un handler."""
    logger.error(f"Error no manejado procesando un update: {context.error}", exc_info=context.error)

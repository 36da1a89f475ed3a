"""
Comandos de moderación para el grupo de la farmacia.

Se usan respondiendo al mensaje del usuario afectado:
  /expulsar                 → lo saca del chat (puede volver a entrar)
  /banear <n> <h|m|s>       → lo banea por ese tiempo
  /silenciar <n> <h|m|s>    → le quita los permisos de escribir por ese tiempo

Solo los administradores del chat pueden usarlos, y nunca contra otro
administrador. El bot también tiene que ser administrador: si Telegram
rechaza la acción se avisa en el chat.
"""

from datetime import datetime, timezone

from telegram import ChatPermissions, Update
from telegram.constants import ChatMemberStatus
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from src.bot.textos import idioma_de, texto
from src.shared.logger import obtener_logger
from src.utils.input_utils import parsear_duracion

logger = obtener_logger("moderacion")

ESTADOS_ADMIN = (ChatMemberStatus.ADMINISTRATOR, ChatMemberStatus.OWNER)


async def es_admin(context: ContextTypes.DEFAULT_TYPE, chat_id: int, usuario_id: int) -> bool:
    miembro = await context.bot.get_chat_member(chat_id, usuario_id)
    return miembro.status in ESTADOS_ADMIN


async def _objetivo(update: Update, context: ContextTypes.DEFAULT_TYPE, idioma: str):
    """
    Valida quién ejecuta el comando y contra quién.
    Devuelve el telegram.User afectado, o None si ya se respondió con el motivo.
    """
    mensaje = update.effective_message
    chat_id = update.effective_chat.id

    if not await es_admin(context, chat_id, update.effective_user.id):
        await mensaje.reply_text(texto(idioma, "solo_admins"))
        return None

    respondido = mensaje.reply_to_message
    if respondido is None or respondido.from_user is None:
        await mensaje.reply_text(texto(idioma, "responder_a_usuario"))
        return None

    if await es_admin(context, chat_id, respondido.from_user.id):
        await mensaje.reply_text(texto(idioma, "no_a_admin"))
        return None

    return respondido.from_user


async def expulsar(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    idioma = idioma_de(update.effective_user)
    usuario = await _objetivo(update, context, idioma)
    if usuario is None:
        return

    try:
        # unban sobre un miembro activo lo saca del chat sin dejarlo baneado.
        await context.bot.unban_chat_member(update.effective_chat.id, usuario.id)
    except TelegramError as e:
        logger.error(f"No se pudo expulsar a {usuario.id} del chat {update.effective_chat.id}: {e}")
        await update.effective_message.reply_text(texto(idioma, "moderacion_error"))
        return

    logger.info(f"[admin={update.effective_user.id}] Expulsó a {usuario.id} del chat {update.effective_chat.id}")
    await update.effective_message.reply_text(texto(idioma, "expulsado", usuario=usuario.full_name))


async def banear(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _restringir(update, context, "banear")


async def silenciar(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _restringir(update, context, "silenciar")


async def _restringir(update: Update, context: ContextTypes.DEFAULT_TYPE, comando: str) -> None:
    idioma = idioma_de(update.effective_user)
    args = context.args or []

    duracion = parsear_duracion(args[0], args[1]) if len(args) == 2 else None
    if duracion is None:
        await update.effective_message.reply_text(texto(idioma, "uso_restriccion", comando=comando))
        return

    usuario = await _objetivo(update, context, idioma)
    if usuario is None:
        return

    chat_id = update.effective_chat.id
    hasta = datetime.now(timezone.utc) + duracion

    try:
        if comando == "banear":
            await context.bot.ban_chat_member(chat_id, usuario.id, until_date=hasta)
        else:
            await context.bot.restrict_chat_member(
                chat_id, usuario.id,
                permissions=ChatPermissions.no_permissions(),
                until_date=hasta
            )
    except TelegramError as e:
        logger.error(f"No se pudo {comando} a {usuario.id} en el chat {chat_id}: {e}")
        await update.effective_message.reply_text(texto(idioma, "moderacion_error"))
        return

    logger.info(f"[admin={update.effective_user.id}] /{comando} a {usuario.id} en el chat {chat_id} por {duracion}")
    clave = "baneado" if comando == "banear" else "silenciado"
    await update.effective_message.reply_text(
        texto(idioma, clave, usuario=usuario.full_name, duracion=" ".join(args))
    )

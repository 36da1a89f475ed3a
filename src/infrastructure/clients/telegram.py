"""
Canal de mensajería sobre Telegram.

El resto del sistema solo conoce CanalTelegram.enviar(chat_id, texto, modo):
no importa si el bot vive dentro de una Application del bot o si lo
crea un worker de Celery para un único ciclo.
"""

from enum import Enum

from telegram import Bot
from telegram.constants import ParseMode


class ModoRender(str, Enum):
    PLANO = "plano"
    MARKDOWN = "markdown"   # MarkdownV2: exige escapar los caracteres reservados


_PARSE_MODES = {
    ModoRender.PLANO: None,
    ModoRender.MARKDOWN: ParseMode.MARKDOWN_V2,
}


class CanalTelegram:
    def __init__(self, bot: Bot):
        self.bot = bot

    async def enviar(self, chat_id: int | str, texto: str, modo: ModoRender = ModoRender.PLANO) -> None:
        """
        Envía un mensaje. Cualquier rechazo de Telegram (chat inexistente,
        bot bloqueado, Markdown mal formado, red caída) se propaga como
        telegram.error.TelegramError para que el llamador decida.
        """
        await self.bot.send_message(
            chat_id=chat_id,
            text=texto,
            parse_mode=_PARSE_MODES[modo],
        )

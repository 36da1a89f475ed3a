"""
Funciones puras de formato para los textos que envía el bot.
"""

from datetime import date

# Caracteres con significado especial en MarkdownV2 de Telegram.
# La barra invertida va primero porque es el propio carácter de escape.
RESERVADOS_MARKDOWN = "\\_*[]()~`>#+-=|{}.!"


def escapar_markdown(texto: str) -> str:
    """
    Antepone una barra invertida a cada carácter reservado de MarkdownV2.
    Se aplica solo a los datos interpolados (nombres, textos de usuario),
    nunca a los asteriscos o backticks que arma el propio mensaje.
    """
    return "".join(f"\\{c}" if c in RESERVADOS_MARKDOWN else c for c in texto)


def formatear_fecha(fecha: date) -> str:
    """Formato dd-mm-aaaa usado en las alertas de vencimiento."""
    return fecha.strftime("%d-%m-%Y")


def formatear_fecha_larga(fecha: date) -> str:
    """Formato '31 Dec 2025' usado en el listado de inventario."""
    return fecha.strftime("%d %b %Y")

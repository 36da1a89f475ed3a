"""
Textos del bot por idioma.

El idioma sale del `language_code` que Telegram informa para cada usuario
("es-AR" → "es"). Si el idioma o la clave no existen se usa DEFAULT_LANGUAGE;
si tampoco está ahí, se devuelve un aviso con la clave en vez de fallar.
"""

from src.shared.config import DEFAULT_LANGUAGE

TEXTOS = {
    "es": {
        "bienvenida": "¡Bienvenido a FarmaBot! Usá /menu para ver las opciones o /ayuda para la lista de comandos.",
        "enlace_invalido": "Enlace inválido. Pedile al farmacéutico un enlace nuevo con /mensaje.",
        "escribi_mensaje": "Escribí tu mensaje para el farmacéutico:",
        "mensaje_anonimo": "Tenés un nuevo mensaje anónimo:\n\n{texto}",
        "mensaje_enviado": "¡Mensaje enviado al farmacéutico!",
        "mensaje_no_enviado": "No se pudo enviar el mensaje. Puede que el farmacéutico haya bloqueado al bot.",
        "enlace_mensajes": "Compartí este enlace para recibir mensajes anónimos: {enlace}",
        "inventario": "Inventario",
        "sin_medicamentos": "No hay medicamentos cargados.",
        "linea_inventario": "🏥 {nombre}\n   Stock: {stock} unidades\n   Vence: {vencimiento}",
        "pedido_ok": "Pedido #{pedido_id} registrado: {cantidad} x {nombre}.",
        "pedido_no_encontrado": "No encontramos el medicamento '{selector}'.",
        "pedido_sin_stock": "Stock insuficiente de {nombre}: quedan {disponible} unidades.",
        "pedido_cantidad_invalida": "La cantidad debe ser un número entero mayor a cero.",
        "pedido_error": "No pudimos registrar el pedido. Probá de nuevo en unos minutos.",
        "error_inventario": "No pudimos consultar el inventario. Probá de nuevo en unos minutos.",
        "menu": "¡Bienvenido a FarmaBot! Elegí una opción:",
        "boton_inventario": "📋 Ver inventario",
        "boton_pedido": "🛒 Hacer pedido",
        "boton_ayuda": "❓ Ayuda",
        "ayuda": (
            "*Ayuda de FarmaBot*\n\n"
            "Comandos disponibles:\n\n"
            "/start \\- Empezar a usar el bot\n"
            "/inventario \\- Ver el inventario de la farmacia\n"
            "/pedido \\[medicamento\\] \\[cantidad\\] \\- Hacer un pedido\n"
            "/mensaje \\- Obtener un enlace para recibir mensajes anónimos\n"
            "/menu \\- Mostrar el menú principal\n"
            "/ayuda \\- Mostrar esta ayuda\n\n"
            "Para usar un comando, escribilo o tocalo\\."
        ),
        "no_entiendo": "No entiendo ese mensaje. Usá el menú o escribí /ayuda para ver los comandos.",
        "solo_texto": "Mandá un mensaje de texto, por favor.",
        "solo_admins": "Solo los administradores del chat pueden usar este comando.",
        "responder_a_usuario": "Usá este comando respondiendo a un mensaje del usuario.",
        "uso_restriccion": "Uso: /{comando} <cantidad> <h|m|s>, respondiendo a un mensaje.",
        "no_a_admin": "No se puede aplicar a un administrador.",
        "expulsado": "{usuario} fue expulsado del chat.",
        "baneado": "{usuario} fue baneado por {duracion}.",
        "silenciado": "{usuario} fue silenciado por {duracion}.",
        "moderacion_error": "No se pudo aplicar la acción. ¿El bot es administrador del chat?",
    },
    "en": {
        "bienvenida": "Welcome to FarmaBot! Use /menu to see the options or /ayuda for the command list.",
        "enlace_invalido": "Invalid link. Ask the pharmacist for a new one with /mensaje.",
        "escribi_mensaje": "Send your message to the pharmacist:",
        "mensaje_anonimo": "You have a new anonymous message:\n\n{texto}",
        "mensaje_enviado": "Message sent to the pharmacist!",
        "mensaje_no_enviado": "Error sending message. The pharmacist may have blocked the bot.",
        "enlace_mensajes": "Share this link to receive anonymous messages: {enlace}",
        "inventario": "Inventory",
        "sin_medicamentos": "No medicines available.",
        "linea_inventario": "🏥 {nombre}\n   Stock: {stock} units\n   Expires: {vencimiento}",
        "pedido_ok": "Order #{pedido_id} placed: {cantidad} x {nombre}.",
        "pedido_no_encontrado": "Medicine '{selector}' not found.",
        "pedido_sin_stock": "Insufficient stock of {nombre}: {disponible} units left.",
        "pedido_cantidad_invalida": "The quantity must be a whole number greater than zero.",
        "pedido_error": "We could not place the order. Please try again in a few minutes.",
        "error_inventario": "We could not read the inventory. Please try again in a few minutes.",
        "menu": "Welcome to FarmaBot! Please choose an option:",
        "boton_inventario": "📋 Check inventory",
        "boton_pedido": "🛒 Place order",
        "boton_ayuda": "❓ Help",
        "ayuda": (
            "*FarmaBot Help*\n\n"
            "Available commands:\n\n"
            "/start \\- Start interacting with the bot\n"
            "/inventario \\- Check the pharmacy inventory\n"
            "/pedido \\[medicine\\] \\[quantity\\] \\- Place an order\n"
            "/mensaje \\- Get a link to receive anonymous messages\n"
            "/menu \\- Display the main menu\n"
            "/ayuda \\- Display this help\n\n"
            "To use a command, simply type it or tap on it\\."
        ),
        "no_entiendo": "I don't understand that. Please use the menu or type /ayuda for available commands.",
        "solo_texto": "Please send a text message.",
        "solo_admins": "Only chat administrators can use this command.",
        "responder_a_usuario": "Use this command as a reply to the user's message.",
        "uso_restriccion": "Usage: /{comando} <amount> <h|m|s>, as a reply to a message.",
        "no_a_admin": "This cannot be applied to an administrator.",
        "expulsado": "{usuario} was kicked from the chat.",
        "baneado": "{usuario} was banned for {duracion}.",
        "silenciado": "{usuario} was muted for {duracion}.",
        "moderacion_error": "The action failed. Is the bot an administrator of this chat?",
    },
}


def idioma_de(usuario) -> str:
    """Idioma soportado para un telegram.User (o None)."""
    codigo = getattr(usuario, "language_code", None) or DEFAULT_LANGUAGE
    idioma = codigo.split("-")[0].lower()
    return idioma if idioma in TEXTOS else DEFAULT_LANGUAGE


def texto(idioma: str, clave: str, **valores) -> str:
    plantilla = TEXTOS.get(idioma, {}).get(clave) or TEXTOS.get(DEFAULT_LANGUAGE, {}).get(clave)
    if plantilla is None:
        return f"Falta traducción: {clave}"
    return plantilla.format(**valores) if valores else plantilla


def textos_de_boton(clave: str) -> set[str]:
    """Todas las variantes de un botón del menú, para reconocerlo sin importar el idioma."""
    return {textos[clave] for textos in TEXTOS.values() if clave in textos}

# Configuración centralizada del logging para todos los componentes de FarmaBot.
import logging
import os
import sys


# =============================================================================
# Formato del log
# =============================================================================
# Cada línea de log va a verse así:
#   2026-10-17 08:00:01 [WARNING] vencimientos: Alerta enviada: 'Aspirin' vence en 10 días
#
#   %(asctime)s   → Fecha y hora
#   %(levelname)s → Nivel del mensaje (INFO, WARNING, ERROR)
#   %(name)s      → Componente (bot, pedidos, vencimientos, programador, worker)
#   %(message)s   → El mensaje en sí
FORMATO_LOG = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FORMATO_FECHA = "%Y-%m-%d %H:%M:%S"

# Nivel global opcional, por ejemplo LOG_LEVEL=DEBUG al depurar el bot.
NIVEL_POR_DEFECTO = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())


def obtener_logger(nombre: str, nivel: int | None = None) -> logging.Logger:
    """
    Crea y devuelve un logger configurado con el formato estándar del sistema.

    :param nombre: Identificador del componente (ej: "bot", "pedidos", "worker").
                   Aparece en cada línea de log para saber de dónde viene el mensaje.
    :param nivel:  Nivel mínimo de mensajes a mostrar. Si no se indica se usa
                   LOG_LEVEL del entorno (INFO por defecto):
                     DEBUG    → Detalles internos (solo para desarrollo)
                     INFO     → Operaciones normales (pedidos, ciclos del programador)
                     WARNING  → Situaciones de atención (medicamentos por vencer,
                                ciclos salteados, stock insuficiente)
                     ERROR    → Fallos que impiden completar una operación
                                (BD caída, Telegram rechazó un envío)
    :return: Logger listo para usar
    """
    if nivel is None:
        nivel = NIVEL_POR_DEFECTO if isinstance(NIVEL_POR_DEFECTO, int) else logging.INFO

    # getLogger con el mismo nombre devuelve siempre la MISMA instancia.
    logger = logging.getLogger(nombre)
    logger.setLevel(nivel)

    # Solo agregamos el handler la primera vez; si no, cada llamada
    # duplicaría las líneas impresas.
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(nivel)
        handler.setFormatter(logging.Formatter(FORMATO_LOG, datefmt=FORMATO_FECHA))
        logger.addHandler(handler)

    return logger

"""
Módulo compartido con configuraciones, logger y entidades usadas por todos los componentes.
"""

# Exponemos las configuraciones más usadas
from .config import (
    TELEGRAM_BOT_TOKEN,
    PHARMACY_GROUP_CHAT_ID,
    DEFAULT_LANGUAGE,
    DB_HOST,
    DB_PORT,
    DB_NAME,
    DB_USER,
    DB_PASSWORD,
    REDIS_HOST,
    REDIS_PORT,
    REDIS_DB,
    VERIFICATION_INTERVAL_SECONDS,
    SCHEDULER_MODE,
    EXPIRY_HORIZON_DAYS,
)

# Exponemos la función para obtener loggers configurados
from .logger import obtener_logger

# Entidades del dominio
from .modelos import (
    EstadoPedido,
    Medicamento,
    Pedido,
    ConfirmacionPedido,
    ReporteNotificacion,
)

__all__ = [
    'TELEGRAM_BOT_TOKEN', 'PHARMACY_GROUP_CHAT_ID', 'DEFAULT_LANGUAGE',
    'DB_HOST', 'DB_PORT', 'DB_NAME', 'DB_USER', 'DB_PASSWORD',
    'REDIS_HOST', 'REDIS_PORT', 'REDIS_DB',
    'VERIFICATION_INTERVAL_SECONDS', 'SCHEDULER_MODE', 'EXPIRY_HORIZON_DAYS',
    'obtener_logger',
    'EstadoPedido', 'Medicamento', 'Pedido', 'ConfirmacionPedido', 'ReporteNotificacion',
]

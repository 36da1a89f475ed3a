"""
Configuración centralizada de FarmaBot.

Carga las variables de entorno desde el archivo .env y expone
constantes con valores por defecto para todos los componentes:
bot de Telegram, MariaDB, Redis, Celery, programador y notificaciones.

Cualquier componente que necesite un valor configurable lo importa
desde acá, garantizando que exista una única fuente de verdad.
"""


import os
from dotenv import load_dotenv

# load_dotenv() busca el archivo .env y carga sus variables.
# Con este path explícito siempre lo encuentra sin importar desde dónde se ejecute el programa.
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), '..', '..', '.env'))

# =============================================================================
# Telegram
# =============================================================================
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")

# Chat (normalmente el grupo de la farmacia) que recibe las alertas de vencimiento.
PHARMACY_GROUP_CHAT_ID = int(os.getenv("PHARMACY_GROUP_CHAT_ID", 0))

DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "es")

# =============================================================================
# MariaDB
# =============================================================================
DB_HOST     = os.getenv("DB_HOST", "localhost")
DB_PORT     = int(os.getenv("DB_PORT", 3306))
DB_NAME     = os.getenv("DB_NAME", "farmabot_db")
DB_USER     = os.getenv("DB_USER", "farmabot_user")
DB_PASSWORD = os.getenv("DB_PASSWORD", "farmabot_pass")

# Tamaño del pool async: cada handler del bot toma una conexión prestada.
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 1))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))

# =============================================================================
# Redis
# =============================================================================
REDIS_HOST    = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT    = int(os.getenv("REDIS_PORT", 6379))
REDIS_DB      = int(os.getenv("REDIS_DB", 0)) # Bases numeradas del 0 al 15; el 0 es el de por defecto.
REDIS_URL     = f"redis://{REDIS_HOST}:{REDIS_PORT}/{REDIS_DB}"

# =============================================================================
# Celery
# =============================================================================
CELERY_BROKER_URL      = REDIS_URL
CELERY_RESULT_BACKEND  = REDIS_URL # Dónde guardar los resultados de las tareas ejecutadas
TIMEZONE = os.getenv("TIMEZONE", "America/Argentina/Buenos_Aires")

# =============================================================================
# Programador de vencimientos
# =============================================================================
VERIFICATION_INTERVAL_SECONDS = int(os.getenv("VERIFICATION_INTERVAL_SECONDS", 60))

# "interno": el bot corre su propio Programador dentro del event loop.
# "celery":  el disparo lo hace Celery Beat y el bot no programa nada.
SCHEDULER_MODE = os.getenv("SCHEDULER_MODE", "interno").strip().lower()
SCHEDULER_INITIAL_DELAY_SECONDS = int(os.getenv("SCHEDULER_INITIAL_DELAY_SECONDS", 10))

# =============================================================================
# Vencimientos y notificaciones
# =============================================================================
EXPIRY_HORIZON_DAYS = int(os.getenv("EXPIRY_HORIZON_DAYS", 180)) # Días hacia adelante que cuentan como "por vencer"
NOTIFICATION_MAX_CONCURRENCY = int(os.getenv("NOTIFICATION_MAX_CONCURRENCY", 10))
NOTIFICATION_SEND_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_SEND_TIMEOUT_SECONDS", 10))

# =============================================================================
# Pedidos
# =============================================================================
# El botón "Hacer pedido" del menú no lleva argumentos: se usan estos valores.
DEFAULT_ORDER_MEDICINE = os.getenv("DEFAULT_ORDER_MEDICINE", "acetaminophen")
DEFAULT_ORDER_QUANTITY = int(os.getenv("DEFAULT_ORDER_QUANTITY", 2))

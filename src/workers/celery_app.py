"""
Configuración de la instancia Celery y del scheduler Beat.

Es el modo de despliegue alternativo al Programador interno del bot
(SCHEDULER_MODE=celery): Beat dispara verificar_vencimientos cada
VERIFICATION_INTERVAL_SECONDS segundos y un worker lo ejecuta.

  celery -A src.workers worker --loglevel=info
  celery -A src.workers beat --loglevel=info
"""

from celery import Celery

from src.shared.config import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    TIMEZONE,
    VERIFICATION_INTERVAL_SECONDS
)

# Instancia principal de Celery
celery_app = Celery("farmabot")

celery_app.conf.update(
    # El broker es el intermediario que recibe y almacena las tareas
    broker_url=CELERY_BROKER_URL,

    # Dónde guarda Celery el ReporteNotificacion (como dict) de cada ciclo.
    result_backend=CELERY_RESULT_BACKEND,
    result_expires=3600,

    timezone=TIMEZONE,

    # Buscá las tareas en este módulo.
    include=["src.workers.tasks"],

    # Indica dónde Beat debe guardar su archivo de estado.
    beat_schedule_filename="/tmp/farmabot-celerybeat-schedule",
)


# beat_schedule define qué tareas se ejecutan automáticamente y cada cuánto.
#   "task":     el nombre completo de la función de tarea a ejecutar
#   "schedule": cada cuánto tiempo ejecutarla (en segundos, o con crontab)
#   "options":  expires evita que se acumulen ciclos si no hay workers
celery_app.conf.beat_schedule = {
    "verificar-vencimientos-periodico": {
        "task": "src.workers.tasks.verificar_vencimientos",
        "schedule": VERIFICATION_INTERVAL_SECONDS,
        "options": {"expires": VERIFICATION_INTERVAL_SECONDS},
    },
}

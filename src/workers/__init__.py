"""
Paquete de workers de FarmaBot.

Contiene la configuración de Celery (celery_app.py) y la tarea
verificar_vencimientos (tasks.py), que Beat dispara periódicamente cuando
el bot corre con SCHEDULER_MODE=celery.

La instancia `celery_app` se re-exporta aquí para que Celery la descubra
automáticamente al usar `-A src.workers` desde la línea de comandos.
"""

from src.workers.celery_app import celery_app

__all__ = ["celery_app"]

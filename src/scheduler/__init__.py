"""
Programación de tareas periódicas dentro del proceso del bot.
La alternativa distribuida (Celery Beat) vive en src.workers.
"""

from src.scheduler.programador import Programador

__all__ = ["Programador"]

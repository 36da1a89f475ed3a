"""
Servicios de dominio de FarmaBot.

  pedidos.py      → MotorPedidos: descuento de stock + alta del pedido en una transacción
  vencimientos.py → consulta de medicamentos por vencer y fan-out de alertas
"""

from src.services.pedidos import MotorPedidos
from src.services.vencimientos import (
    construir_alerta,
    notificar_vencimientos,
    ejecutar_ciclo,
)

__all__ = [
    "MotorPedidos",
    "construir_alerta",
    "notificar_vencimientos",
    "ejecutar_ciclo",
]

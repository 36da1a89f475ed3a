"""
Entidades del dominio de FarmaBot.

Son contenedores de datos sin lógica: los repositorios las construyen
a partir de las filas de la BD y los servicios las consumen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class EstadoPedido(str, Enum):
    # Solo PENDIENTE se crea desde el bot; el resto lo maneja la farmacia.
    PENDIENTE = "pendiente"
    PROCESADO = "procesado"
    ENVIADO = "enviado"
    ENTREGADO = "entregado"


@dataclass(slots=True)
class Medicamento:
    id: int
    nombre: str
    stock: int
    fecha_vencimiento: date

    def dias_para_vencer(self, hoy: date) -> int:
        """Días enteros hasta el vencimiento. Negativo si ya venció."""
        return (self.fecha_vencimiento - hoy).days


@dataclass(slots=True)
class Pedido:
    id: int
    usuario_id: str
    medicamento_id: int
    cantidad: int
    estado: EstadoPedido
    creado_en: datetime


@dataclass(slots=True, frozen=True)
class ConfirmacionPedido:
    pedido_id: int
    nombre_medicamento: str
    cantidad: int


@dataclass(slots=True)
class ReporteNotificacion:
    """
    Resultado de un fan-out de alertas.
    Los fallos individuales quedan contados acá en vez de propagarse.
    """

    intentados: int = 0
    exitosos: int = 0
    fallidos: int = 0
    ids_fallidos: list[int] = field(default_factory=list)

    def como_dict(self) -> dict:
        return {
            "intentados": self.intentados,
            "exitosos": self.exitosos,
            "fallidos": self.fallidos,
            "ids_fallidos": list(self.ids_fallidos),
        }

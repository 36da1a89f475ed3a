"""
Utilidades para interpretar y validar los argumentos de los comandos del bot.

Separadas de los handlers para que los de pedidos y los de moderación
las compartan: ambos reciben texto libre del usuario con las mismas
necesidades de validación.
"""

from datetime import timedelta

# Unidades aceptadas por /banear y /silenciar (h, m, s o su nombre completo).
UNIDADES_TIEMPO = {
    "h": "hours", "horas": "hours", "hours": "hours",
    "m": "minutes", "minutos": "minutes", "minutes": "minutes",
    "s": "seconds", "segundos": "seconds", "seconds": "seconds",
}


def parsear_entero_positivo(valor: str) -> int | None:
    """
    Devuelve el entero si es mayor a cero, None en cualquier otro caso.
    Usada para cantidades donde un texto o un cero no tienen sentido.
    """
    try:
        numero = int(valor.strip())
    except (ValueError, AttributeError):
        return None
    return numero if numero > 0 else None


def parsear_selector(texto: str) -> int | str:
    """
    Un texto puramente numérico selecciona por id; cualquier otro
    se usa como fragmento del nombre del medicamento.
    """
    texto = texto.strip()
    return int(texto) if texto.isdigit() else texto


def parsear_argumentos_pedido(args: list[str], medicamento_defecto: str, cantidad_defecto: int) -> tuple[int | str, int] | None:
    """
    Interpreta '/pedido [medicamento...] [cantidad]'.

    - Sin argumentos: se usan los valores por defecto.
    - Si el último argumento es un entero y hay más de uno, es la cantidad.
    - Devuelve None si la cantidad explícita no es un entero positivo.
    """
    if not args:
        return medicamento_defecto, cantidad_defecto

    if len(args) > 1 and args[-1].lstrip("-").isdigit():
        cantidad = parsear_entero_positivo(args[-1])
        if cantidad is None:
            return None
        return parsear_selector(" ".join(args[:-1])), cantidad

    return parsear_selector(" ".join(args)), cantidad_defecto


def parsear_duracion(cantidad: str, unidad: str) -> timedelta | None:
    """
    Convierte '10' 'm' en timedelta(minutes=10).
    Devuelve None si la cantidad no es un entero positivo o la unidad no existe.
    """
    numero = parsear_entero_positivo(cantidad)
    clave = UNIDADES_TIEMPO.get(unidad.strip().lower())
    if numero is None or clave is None:
        return None
    return timedelta(**{clave: numero})

"""
Excepciones personalizadas de FarmaBot.
Separadas en su propio módulo para que cualquier componente
(bot, servicios, workers) pueda importarlas sin depender del otro.
"""


class ErrorPedido(Exception):
    """
    Base de todos los fallos de MotorPedidos.realizar_pedido().
    El bot captura esta clase y elige el texto según la subclase.
    """
    pass


class CantidadInvalida(ErrorPedido):
    """Se pidió una cantidad menor o igual a cero. No se toca la BD."""

    def __init__(self, cantidad: int):
        super().__init__(f"La cantidad debe ser mayor a cero (recibido: {cantidad}).")
        self.cantidad = cantidad


class MedicamentoNoEncontrado(ErrorPedido):
    """Ningún medicamento coincide con el selector. No hay reintento."""

    def __init__(self, selector):
        super().__init__(f"No se encontró un medicamento para '{selector}'.")
        self.selector = selector


class StockInsuficiente(ErrorPedido):
    """
    El stock disponible no alcanza para la cantidad pedida.
    Se lanza antes de cualquier escritura: el inventario queda intacto.
    """

    def __init__(self, nombre: str, disponible: int, solicitado: int):
        super().__init__(
            f"Stock insuficiente de '{nombre}': hay {disponible}, se pidieron {solicitado}."
        )
        self.nombre = nombre
        self.disponible = disponible
        self.solicitado = solicitado


class ErrorPersistencia(ErrorPedido):
    """
    Falló la BD durante la transacción del pedido.
    La transacción se revirtió; el usuario debe volver a intentarlo.
    """
    pass


class ErrorEnvioNotificacion(Exception):
    """
    Telegram rechazó (o no respondió a tiempo) el envío de una alerta.
    Solo se usa dentro del fan-out: se registra y se cuenta, nunca sale de ahí.
    """

    def __init__(self, medicamento_id: int, causa: Exception):
        super().__init__(f"No se pudo notificar el medicamento id={medicamento_id}: {causa}")
        self.medicamento_id = medicamento_id
        self.causa = causa

"""
Programador de tareas periódicas dentro del event loop del bot.

Dispara una corrutina cada `intervalo_segundos`, sin importar el tráfico
del bot. Cada disparo (tick) corre como una tarea propia:
  - si un tick lanza una excepción, se registra y el siguiente sale igual;
  - si un tick sigue corriendo cuando toca el próximo, el próximo se saltea
    (nunca hay dos ticks simultáneos ni una cola de atrasados).

El objeto es dueño de sus tareas: detener() las cancela, sin estado
global de módulo. La Application del bot lo crea al arrancar y lo
detiene cuando recibe SIGINT/SIGTERM.
"""

import asyncio
from typing import Awaitable, Callable

from src.shared.logger import obtener_logger

logger = obtener_logger("programador")


class Programador:
    def __init__(
        self,
        intervalo_segundos: float,
        al_disparar: Callable[[], Awaitable[object]],
        nombre: str = "vencimientos",
        retraso_inicial: float = 0.0,
    ):
        """
        :param intervalo_segundos: cadencia fija entre disparos.
        :param al_disparar:        función async sin argumentos; su resultado se ignora.
        :param retraso_inicial:    espera antes del primer tick, para que el bot termine de arrancar.
        """
        if intervalo_segundos <= 0:
            raise ValueError("El intervalo debe ser mayor a cero.")

        self.intervalo_segundos = intervalo_segundos
        self.al_disparar = al_disparar
        self.nombre = nombre
        self.retraso_inicial = retraso_inicial

        self.ticks_disparados = 0
        self.ticks_salteados = 0
        self.ticks_fallidos = 0

        self._tarea_bucle: asyncio.Task | None = None
        self._tick_en_curso: asyncio.Task | None = None

    @property
    def activo(self) -> bool:
        return self._tarea_bucle is not None and not self._tarea_bucle.done()

    @property
    def tick_en_curso(self) -> bool:
        return self._tick_en_curso is not None and not self._tick_en_curso.done()

    def iniciar(self) -> None:
        """Lanza el bucle en segundo plano. Debe llamarse con el event loop corriendo."""
        if self.activo:
            raise RuntimeError(f"El programador '{self.nombre}' ya está corriendo.")

        self._tarea_bucle = asyncio.create_task(self._bucle(), name=f"programador-{self.nombre}")
        logger.info(
            f"[{self.nombre}] Programador iniciado. Intervalo: {self.intervalo_segundos}s, "
            f"primer disparo en {self.retraso_inicial}s"
        )

    async def detener(self, esperar_en_curso: bool = True, timeout: float | None = None) -> None:
        """
        Deja de disparar ticks nuevos.

        :param esperar_en_curso: si hay un tick corriendo, esperarlo en vez de cancelarlo.
        :param timeout:          máximo de segundos a esperar ese tick; vencido, se cancela.
        """
        if self._tarea_bucle is not None:
            self._tarea_bucle.cancel()
            try:
                await self._tarea_bucle
            except asyncio.CancelledError:
                pass
            self._tarea_bucle = None

        tick = self._tick_en_curso
        if tick is not None and not tick.done():
            if esperar_en_curso:
                logger.info(f"[{self.nombre}] Esperando a que termine el tick en curso...")
                try:
                    # shield: si vence el timeout, wait_for no cancela el tick por su cuenta.
                    await asyncio.wait_for(asyncio.shield(tick), timeout=timeout)
                except asyncio.TimeoutError:
                    logger.warning(f"[{self.nombre}] El tick en curso no terminó a tiempo; se cancela.")
                    await self._cancelar(tick)
            else:
                await self._cancelar(tick)

        logger.info(
            f"[{self.nombre}] Programador detenido. Ticks: {self.ticks_disparados} disparados, "
            f"{self.ticks_salteados} salteados, {self.ticks_fallidos} fallidos"
        )

    async def _bucle(self) -> None:
        loop = asyncio.get_running_loop()
        proximo = loop.time() + self.retraso_inicial

        while True:
            espera = proximo - loop.time()
            if espera > 0:
                await asyncio.sleep(espera)

            self._disparar()

            # Cadencia fija sobre el reloj monotónico. Si el loop estuvo
            # bloqueado más de un intervalo, los disparos perdidos no se recuperan.
            proximo += self.intervalo_segundos
            ahora = loop.time()
            if proximo <= ahora:
                proximo = ahora + self.intervalo_segundos

    def _disparar(self) -> None:
        if self.tick_en_curso:
            self.ticks_salteados += 1
            logger.warning(f"[{self.nombre}] El tick anterior sigue corriendo; se saltea este disparo.")
            return

        self.ticks_disparados += 1
        self._tick_en_curso = asyncio.create_task(
            self._ejecutar_tick(self.ticks_disparados),
            name=f"tick-{self.nombre}-{self.ticks_disparados}"
        )

    async def _ejecutar_tick(self, numero: int) -> None:
        try:
            await self.al_disparar()
        except asyncio.CancelledError:
            logger.info(f"[{self.nombre}] Tick #{numero} cancelado.")
            raise
        except Exception as e:
            # El fallo queda contenido en este tick: el bucle sigue disparando.
            self.ticks_fallidos += 1
            logger.error(f"[{self.nombre}] Tick #{numero} falló: {type(e).__name__}: {e}")

    @staticmethod
    async def _cancelar(tarea: asyncio.Task) -> None:
        tarea.cancel()
        try:
            await tarea
        except asyncio.CancelledError:
            pass

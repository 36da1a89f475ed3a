"""Tests del Programador de ticks periódicos."""

import asyncio

import pytest

from src.scheduler import Programador


def test_dispara_periodicamente():
    llamadas = []

    async def tick():
        llamadas.append(asyncio.get_running_loop().time())

    async def escenario():
        programador = Programador(0.02, tick)
        programador.iniciar()
        await asyncio.sleep(0.11)
        await programador.detener()
        return programador

    programador = asyncio.run(escenario())

    assert len(llamadas) >= 3
    assert programador.ticks_disparados == len(llamadas)
    assert not programador.activo


def test_un_tick_que_falla_no_detiene_al_programador():
    async def tick():
        raise RuntimeError("BD caída")

    async def escenario():
        programador = Programador(0.02, tick)
        programador.iniciar()
        await asyncio.sleep(0.09)
        sigue_activo = programador.activo
        await programador.detener()
        return programador, sigue_activo

    programador, sigue_activo = asyncio.run(escenario())

    assert sigue_activo
    assert programador.ticks_fallidos >= 2
    assert programador.ticks_fallidos == programador.ticks_disparados


def test_saltea_si_el_tick_anterior_sigue_corriendo():
    en_curso = 0
    max_en_curso = 0

    async def tick_lento():
        nonlocal en_curso, max_en_curso
        en_curso += 1
        max_en_curso = max(max_en_curso, en_curso)
        await asyncio.sleep(0.07)
        en_curso -= 1

    async def escenario():
        programador = Programador(0.02, tick_lento)
        programador.iniciar()
        await asyncio.sleep(0.15)
        await programador.detener()
        return programador

    programador = asyncio.run(escenario())

    assert max_en_curso == 1
    assert programador.ticks_salteados >= 1


def test_detener_espera_el_tick_en_curso():
    terminado = []

    async def tick():
        await asyncio.sleep(0.05)
        terminado.append(True)

    async def escenario():
        programador = Programador(10, tick)
        programador.iniciar()
        await asyncio.sleep(0.01)
        assert programador.tick_en_curso
        await programador.detener(esperar_en_curso=True)

    asyncio.run(escenario())

    assert terminado == [True]


def test_detener_con_timeout_cancela_el_tick():
    cancelado = []

    async def tick():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelado.append(True)
            raise

    async def escenario():
        programador = Programador(10, tick)
        programador.iniciar()
        await asyncio.sleep(0.01)
        await programador.detener(esperar_en_curso=True, timeout=0.02)
        return programador

    programador = asyncio.run(escenario())

    assert cancelado == [True]
    assert not programador.tick_en_curso


def test_detener_sin_esperar_cancela_de_inmediato():
    cancelado = []

    async def tick():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelado.append(True)
            raise

    async def escenario():
        programador = Programador(10, tick)
        programador.iniciar()
        await asyncio.sleep(0.01)
        await programador.detener(esperar_en_curso=False)

    asyncio.run(escenario())

    assert cancelado == [True]


def test_retraso_inicial():
    llamadas = []

    async def tick():
        llamadas.append(True)

    async def escenario():
        programador = Programador(0.01, tick, retraso_inicial=0.2)
        programador.iniciar()
        await asyncio.sleep(0.05)
        await programador.detener()

    asyncio.run(escenario())

    assert llamadas == []


@pytest.mark.parametrize("intervalo", [0, -1])
def test_intervalo_invalido(intervalo):
    with pytest.raises(ValueError):
        Programador(intervalo, lambda: None)


def test_no_se_puede_iniciar_dos_veces():
    async def tick():
        pass

    async def escenario():
        programador = Programador(1, tick)
        programador.iniciar()
        try:
            with pytest.raises(RuntimeError):
                programador.iniciar()
        finally:
            await programador.detener()

    asyncio.run(escenario())

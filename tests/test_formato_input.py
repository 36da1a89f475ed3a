"""Tests de las utilidades de formato e interpretación de argumentos."""

from datetime import date, timedelta

import pytest

from src.utils.formato import escapar_markdown, formatear_fecha, formatear_fecha_larga
from src.utils.input_utils import (
    parsear_argumentos_pedido,
    parsear_duracion,
    parsear_entero_positivo,
    parsear_selector,
)


def test_escapar_markdown_antepone_barra():
    assert escapar_markdown("Hydrocodone/APAP 5-325mg.") == "Hydrocodone/APAP 5\\-325mg\\."
    assert escapar_markdown("a_b*c[d]") == "a\\_b\\*c\\[d\\]"


def test_escapar_markdown_conserva_el_texto():
    """Quitando las barras agregadas vuelve el texto original."""
    original = "Gel (50%) + crema! #1"
    escapado = escapar_markdown(original)

    assert escapado == "Gel \\(50%\\) \\+ crema\\! \\#1"
    assert escapado.replace("\\", "") == original


def test_escapar_markdown_escapa_la_barra_invertida():
    assert escapar_markdown("a\\b") == "a\\\\b"


def test_formatos_de_fecha():
    assert formatear_fecha(date(2025, 12, 31)) == "31-12-2025"
    assert formatear_fecha_larga(date(2025, 12, 31)) == "31 Dec 2025"


@pytest.mark.parametrize("valor, esperado", [("3", 3), (" 12 ", 12), ("0", None), ("-2", None), ("dos", None)])
def test_parsear_entero_positivo(valor, esperado):
    assert parsear_entero_positivo(valor) == esperado


def test_parsear_selector():
    assert parsear_selector("7") == 7
    assert parsear_selector("aspirin") == "aspirin"
    assert parsear_selector("Gel 50") == "Gel 50"


@pytest.mark.parametrize("args, esperado", [
    ([], ("acetaminophen", 2)),
    (["aspirin"], ("aspirin", 2)),
    (["aspirin", "3"], ("aspirin", 3)),
    (["acetaminophen", "500mg", "4"], ("acetaminophen 500mg", 4)),
    (["5", "1"], (5, 1)),
    (["12"], (12, 2)),
])
def test_parsear_argumentos_pedido(args, esperado):
    assert parsear_argumentos_pedido(args, "acetaminophen", 2) == esperado


@pytest.mark.parametrize("args", [["aspirin", "0"], ["aspirin", "-1"]])
def test_parsear_argumentos_pedido_cantidad_invalida(args):
    assert parsear_argumentos_pedido(args, "acetaminophen", 2) is None


def test_parsear_duracion():
    assert parsear_duracion("2", "h") == timedelta(hours=2)
    assert parsear_duracion("30", "m") == timedelta(minutes=30)
    assert parsear_duracion("45", "segundos") == timedelta(seconds=45)
    assert parsear_duracion("10", "d") is None
    assert parsear_duracion("0", "h") is None

# backend/app/core/pricing.py
"""
Utilidades de precios.

Los precios del catálogo llegan como texto de presentación ("45 kr / kg").
Se parsean una sola vez al entrar en el carrito y a partir de ahí se trabaja
con el valor numérico.
"""
import logging
import re
from typing import Union

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"\d+")


def parse_price(value: Union[str, int, float]) -> Union[int, float]:
    """
    Extrae el precio numérico de un texto de precio.

    - Si ya es numérico se devuelve sin cambios.
    - Si es texto, se toma la primera secuencia de dígitos como entero
      ("45 kr / kg" -> 45). No se soportan decimales.
    - Si no hay dígitos se devuelve 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        match = _DIGITS_RE.search(value)
        if match:
            return int(match.group(0))
        logger.warning(f"No se encontró ningún precio en '{value}', se usa 0")
    return 0


def format_price(amount: Union[int, float], currency: str = "kr") -> str:
    """Formatea un importe como se muestra en la tienda: '120 kr'."""
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    return f"{amount} {currency}"

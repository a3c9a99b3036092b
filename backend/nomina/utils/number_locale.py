"""
Frontera única de formato numérico (es-AR por defecto).

Los sueldos históricos vienen como "$ 2.200,50", "300000", 300000.0 o
basura. normalize_salary nunca lanza: lo ilegible vale 0.
"""
import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP


@dataclass(frozen=True)
class NumberLocale:
    thousands_sep: str = "."
    decimal_sep: str = ","
    currency_symbol: str = "$"


ES_AR = NumberLocale()
DEFAULT_LOCALE = ES_AR

_NOT_NUMERIC = re.compile(r"[^\d,.\-]")


def normalize_salary(raw, locale: NumberLocale = DEFAULT_LOCALE) -> float:
    # bool es subclase de int: no es un sueldo
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float, Decimal)):
        value = float(raw)
        return value if math.isfinite(value) else 0.0
    if not isinstance(raw, str):
        return 0.0

    cleaned = _NOT_NUMERIC.sub("", raw)
    cleaned = cleaned.replace(locale.thousands_sep, "").replace(locale.decimal_sep, ".")
    if not cleaned:
        return 0.0
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def to_locale_string(value, locale: NumberLocale = DEFAULT_LOCALE) -> str:
    """Número → texto que normalize_salary vuelve a leer igual.

    300000.0 → "300000,0"; un texto se guarda tal cual vino.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return "0"
    return format(Decimal(str(value)), "f").replace(".", locale.decimal_sep)


def round_half_up(value: float) -> int:
    """Redondeo comercial (2.5 → 3), no el bancario de round()."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_money(amount: float, locale: NumberLocale = DEFAULT_LOCALE) -> str:
    """12500 → "$ 12.500" (sin decimales)."""
    value = round_half_up(amount)
    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,}".replace(",", locale.thousands_sep)
    return f"{sign}{locale.currency_symbol} {digits}"

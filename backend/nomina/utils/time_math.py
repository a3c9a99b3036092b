"""
Aritmética de horarios "HH:mm" para turnos que pueden cruzar la medianoche.

Nada acá lanza excepciones: un horario vacío o ilegible vale 0 minutos.
"""
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60


def local_today(tz_name: str) -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


def minutes_of(value: str | time | None) -> int:
    """"HH:mm" (o datetime.time) → minutos desde medianoche; inválido → 0."""
    if value is None:
        return 0
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str) or not value.strip():
        return 0

    parts = value.strip().split(":")
    if len(parts) < 2:
        return 0
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        return 0
    return hours * 60 + minutes


def _is_missing(value: str | time | None) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def duration_minutes(start: str | time | None, end: str | time | None) -> int:
    """Duración en minutos; si end < start el turno cruzó la medianoche.

    Sin entrada o sin salida el turno dura 0.
    """
    if _is_missing(start) or _is_missing(end):
        return 0
    diff = minutes_of(end) - minutes_of(start)
    if diff < 0:
        diff += MINUTES_PER_DAY
    return diff


def format_hhmm(minutes: int) -> str:
    minutes = minutes % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"

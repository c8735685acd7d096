"""
Utility per filtri di ricerca
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Parsing di identificativi e date provenienti dalla query string e
costruzione delle condizioni SQLAlchemy condivise dai service.
"""

import datetime
import uuid
from typing import Any, Optional, Union

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from goldsmith.core.exceptions import BusinessValidationError


def parse_uuid(value: Union[str, uuid.UUID], label: str = "ID") -> uuid.UUID:
    """
    Converte un identificativo in UUID.

    Raises:
        BusinessValidationError: Se il formato non è valido (→ 400)
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        raise BusinessValidationError(f"Formato {label} non valido: {value}")


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


def day_window(day: datetime.date) -> tuple[datetime.datetime, datetime.datetime]:
    """Intervallo inclusivo [00:00:00, 23:59:59.999999] UTC di un giorno."""
    start = datetime.datetime.combine(day, datetime.time.min, tzinfo=datetime.timezone.utc)
    end = datetime.datetime.combine(day, datetime.time.max, tzinfo=datetime.timezone.utc)
    return start, end


def parse_day(value: Optional[str], label: str = "data") -> Optional[datetime.date]:
    """Interpreta una data di calendario (accetta anche un datetime ISO completo)."""
    if value is None or not value.strip():
        return None
    text = value.strip()
    try:
        if len(text) == 10:
            return datetime.date.fromisoformat(text)
        return _as_utc(datetime.datetime.fromisoformat(text.replace("Z", "+00:00"))).date()
    except ValueError:
        raise BusinessValidationError(f"Formato {label} non valido: {value}")


def parse_date_bound(
    value: Optional[str],
    end: bool = False,
    label: str = "data",
) -> Optional[datetime.datetime]:
    """
    Interpreta un estremo di un intervallo di date.

    Una data semplice (YYYY-MM-DD) diventa inizio o fine del giorno,
    così che ``toDate=2024-01-31`` includa tutto il 31 gennaio.

    Raises:
        BusinessValidationError: Se la data non è ISO-8601
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    try:
        if len(text) == 10:
            start, stop = day_window(datetime.date.fromisoformat(text))
            return stop if end else start
        return _as_utc(datetime.datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        raise BusinessValidationError(f"Formato {label} non valido: {value}")


def contains(column: Any, text: Optional[str]) -> Optional[ColumnElement]:
    """Condizione ILIKE di sottostringa case-insensitive (None se il filtro è vuoto)."""
    if text is None or not text.strip():
        return None
    escaped = text.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def between_days(column: Any, day: datetime.date) -> ColumnElement:
    """Condizione "la colonna cade nel giorno indicato"."""
    start, end = day_window(day)
    return and_(column >= start, column <= end)

"""
Schemas Pydantic comuni
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Base camelCase per l'API, tipi numerici "da form" e date normalizzate in UTC.
"""

import datetime
import uuid
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import (
    AfterValidator,
    AliasChoices,
    AliasGenerator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
)
from pydantic.alias_generators import to_camel

from goldsmith.services.calculations import MAX_INPUT_VALUE, to_decimal


def _validation_alias(field_name: str) -> AliasChoices:
    return AliasChoices(to_camel(field_name), field_name)


class CamelModel(BaseModel):
    """
    Base per tutti gli schemi API.

    In input accetta sia camelCase sia snake_case; in output serializza in camelCase.
    """

    model_config = ConfigDict(
        alias_generator=AliasGenerator(
            validation_alias=_validation_alias,
            serialization_alias=to_camel,
        ),
        populate_by_name=True,
        from_attributes=True,
    )


# -------------------------------------------------------------------
# Numeri inseriti nei form
# -------------------------------------------------------------------

def parse_form_number(value: Any) -> Optional[Decimal]:
    """
    Interpreta un valore numerico inserito in un form.

    None e stringhe vuote restano None (campo non compilato);
    ogni altro valore non numerico vale 0. I valori oltre
    MAX_INPUT_VALUE in valore assoluto sono rifiutati.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    result = to_decimal(value)
    if abs(result) >= MAX_INPUT_VALUE:
        raise ValueError(f"valore fuori intervallo (massimo {MAX_INPUT_VALUE:f})")
    return result


FormNumber = Annotated[Optional[Decimal], BeforeValidator(parse_form_number)]


# -------------------------------------------------------------------
# Date
# -------------------------------------------------------------------

def parse_datetime_input(value: Any) -> Any:
    """Accetta anche una data di calendario (YYYY-MM-DD) come mezzanotte."""
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return datetime.datetime.combine(value, datetime.time.min)
    if isinstance(value, str) and len(value.strip()) == 10:
        return datetime.datetime.combine(
            datetime.date.fromisoformat(value.strip()), datetime.time.min
        )
    return value


def ensure_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """Date senza fuso orario vengono considerate UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


UtcDatetime = Annotated[
    datetime.datetime,
    BeforeValidator(parse_datetime_input),
    AfterValidator(ensure_utc),
]


# -------------------------------------------------------------------
# Blocchi condivisi
# -------------------------------------------------------------------

class ClientInfo(CamelModel):
    """Dati cliente denormalizzati mostrati sulle ricevute."""

    client_name: str = Field(..., description="Nome cliente")
    shop_name: str = Field(default="", description="Nome negozio")
    phone_number: str = Field(default="", description="Telefono")


class DeleteResponse(CamelModel):
    """Esito di una cancellazione."""

    id: uuid.UUID
    deleted: bool = True

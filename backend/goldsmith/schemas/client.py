"""
Schemas Pydantic per l'entità Client
Progetto: Goldsmith Assistant (Gestionale Oreficeria)
"""
# Definisce gli schemi di validazione e serializzazione per l'API.

import uuid
from typing import Optional

from pydantic import Field, field_validator

from goldsmith.schemas.common import CamelModel, UtcDatetime


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Rimuove gli spazi iniziali e finali (equivalente del trim dello schema)."""
    if value is None:
        return None
    return value.strip()


class ClientBase(CamelModel):
    """
    Schema base per il cliente.

    Attributes:
        shop_name: Nome del negozio
        client_name: Nome del cliente
        phone_number: Numero di telefono
        address: Indirizzo
    """

    shop_name: str = Field(..., min_length=1, max_length=150, description="Nome negozio")
    client_name: str = Field(..., min_length=1, max_length=150, description="Nome cliente")
    phone_number: str = Field(..., min_length=1, max_length=30, description="Telefono")
    address: Optional[str] = Field(None, max_length=255, description="Indirizzo")

    @field_validator("shop_name", "client_name", "phone_number", "address", mode="before")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return normalize_text(v) if isinstance(v, str) else v


class ClientCreate(ClientBase):
    """Dati per la creazione di un cliente (form nuovo cliente: indirizzo obbligatorio)."""

    address: str = Field(..., min_length=1, max_length=255, description="Indirizzo")


class ClientUpdate(CamelModel):
    """Aggiornamento parziale: vengono applicati solo i campi inviati."""

    shop_name: Optional[str] = Field(None, min_length=1, max_length=150)
    client_name: Optional[str] = Field(None, min_length=1, max_length=150)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=30)
    address: Optional[str] = Field(None, max_length=255)

    @field_validator("shop_name", "client_name", "phone_number", "address", mode="before")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return normalize_text(v) if isinstance(v, str) else v


class ClientRead(ClientBase):
    """Cliente restituito dall'API, con id in formato stringa."""

    id: uuid.UUID
    created_at: UtcDatetime
    updated_at: UtcDatetime


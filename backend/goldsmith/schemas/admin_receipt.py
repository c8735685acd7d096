"""
Schemas Pydantic per le ricevute admin
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Una ricevuta admin ha due sezioni indipendenti:
- given: articoli consegnati all'orafo
- received: articoli ricevuti dall'orafo

Lo stato (empty/incomplete/complete) e il saldo sono sempre derivati.
"""

import uuid
from typing import Optional

from pydantic import Field, computed_field

from goldsmith.models.admin_bill import AdminBillStatus
from goldsmith.schemas.common import CamelModel, ClientInfo, FormNumber, UtcDatetime
from goldsmith.services.calculations import admin_balance


GIVEN_ITEM_INPUT_FIELDS = ("productName", "pureWeight", "purePercent", "melting")
RECEIVED_ITEM_INPUT_FIELDS = (
    "productName",
    "finalOrnamentsWt",
    "stoneWeight",
    "makingChargePercent",
)


# -------------------------------------------------------------------
# Sezione "dato"
# -------------------------------------------------------------------

class GivenItemInput(CamelModel):
    product_name: str = Field(default="", max_length=150, description="Prodotto")
    pure_weight: FormNumber = Field(default=None, description="Peso puro")
    pure_percent: FormNumber = Field(default=None, description="Percentuale di puro")
    melting: FormNumber = Field(default=None, description="Fusione")


class GivenItemRead(CamelModel):
    product_name: str = ""
    pure_weight: float = 0
    pure_percent: float = 0
    melting: float = 0
    total: float = 0


class GivenTotals(CamelModel):
    pure_weight: float = 0
    total: float = 0


class GivenLedgerInput(CamelModel):
    """Sezione "dato" come inviata dal form; la data è obbligatoria se ci sono articoli."""

    date: Optional[UtcDatetime] = None
    items: list[GivenItemInput] = Field(default_factory=list)


class GivenLedgerRead(CamelModel):
    date: Optional[UtcDatetime] = None
    items: list[GivenItemRead] = Field(default_factory=list)
    totals: GivenTotals = Field(default_factory=GivenTotals)


# -------------------------------------------------------------------
# Sezione "ricevuto"
# -------------------------------------------------------------------

class ReceivedItemInput(CamelModel):
    product_name: str = Field(default="", max_length=150, description="Prodotto")
    final_ornaments_wt: FormNumber = Field(default=None, description="Peso ornamenti finito")
    stone_weight: FormNumber = Field(default=None, description="Peso pietre")
    making_charge_percent: FormNumber = Field(default=None, description="Fattura (%)")


class ReceivedItemRead(CamelModel):
    product_name: str = ""
    final_ornaments_wt: float = 0
    stone_weight: float = 0
    sub_total: float = 0
    making_charge_percent: float = 0
    total: float = 0


class ReceivedTotals(CamelModel):
    final_ornaments_wt: float = 0
    stone_weight: float = 0
    sub_total: float = 0
    total: float = 0


class ReceivedLedgerInput(CamelModel):
    date: Optional[UtcDatetime] = None
    items: list[ReceivedItemInput] = Field(default_factory=list)


class ReceivedLedgerRead(CamelModel):
    date: Optional[UtcDatetime] = None
    items: list[ReceivedItemRead] = Field(default_factory=list)
    totals: ReceivedTotals = Field(default_factory=ReceivedTotals)


# -------------------------------------------------------------------
# Ricevuta admin
# -------------------------------------------------------------------

class AdminReceiptCreate(CamelModel):
    """
    Dati per la creazione di una ricevuta admin.

    Il cliente è obbligatorio; le due sezioni possono essere create vuote
    e compilate in seguito.
    """

    client_id: uuid.UUID = Field(..., description="UUID del cliente")
    given: Optional[GivenLedgerInput] = None
    received: Optional[ReceivedLedgerInput] = None


class AdminReceiptUpdate(CamelModel):
    """
    Aggiornamento di una ricevuta admin.

    Una sezione assente (o null) resta invariata.
    """

    client_id: Optional[uuid.UUID] = None
    given: Optional[GivenLedgerInput] = None
    received: Optional[ReceivedLedgerInput] = None


class AdminReceiptRead(CamelModel):
    """Ricevuta admin restituita dall'API."""

    id: uuid.UUID
    client_id: Optional[uuid.UUID] = None
    client_info: ClientInfo
    given: GivenLedgerRead
    received: ReceivedLedgerRead
    status: AdminBillStatus
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def balance(self) -> float:
        """Saldo dato - ricevuto (peso fino)."""
        return float(admin_balance(self.given.totals.total, self.received.totals.total))


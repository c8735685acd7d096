"""
Schemas Pydantic per le ricevute cliente
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Gli articoli in input arrivano dai form: i campi numerici possono essere
stringhe vuote o non numeriche. netWt, finalWt e i totali sono sempre
calcolati dal server.
"""

import uuid
from typing import Optional

from pydantic import Field

from goldsmith.schemas.common import CamelModel, ClientInfo, FormNumber, UtcDatetime


# Campi di input di una riga: se tutti vuoti la riga viene scartata
RECEIPT_ITEM_INPUT_FIELDS = ("itemName", "tag", "grossWt", "stoneWt", "meltingTouch", "stoneAmt")


# -------------------------------------------------------------------
# Articoli
# -------------------------------------------------------------------

class ReceiptItemInput(CamelModel):
    """Riga ricevuta come inserita nel form."""

    item_name: str = Field(default="", max_length=150, description="Nome articolo")
    tag: str = Field(default="", max_length=50, description="Tag")
    gross_wt: FormNumber = Field(default=None, description="Peso lordo")
    stone_wt: FormNumber = Field(default=None, description="Peso pietre")
    melting_touch: FormNumber = Field(default=None, description="Titolo / fusione (%)")
    stone_amt: FormNumber = Field(default=None, description="Importo pietre")


class ReceiptItemRead(CamelModel):
    item_name: str = ""
    tag: str = ""
    gross_wt: float = 0
    stone_wt: float = 0
    melting_touch: float = 0
    stone_amt: float = 0
    net_wt: float = 0
    final_wt: float = 0


class ReceiptTotals(CamelModel):
    gross_wt: float = 0
    stone_wt: float = 0
    net_wt: float = 0
    final_wt: float = 0
    stone_amt: float = 0


# -------------------------------------------------------------------
# Ricevuta
# -------------------------------------------------------------------

class ReceiptCreate(CamelModel):
    """Dati per la creazione di una ricevuta."""

    client_id: uuid.UUID = Field(..., description="UUID del cliente")
    metal_type: str = Field(..., min_length=1, max_length=50, description="Tipo di metallo")
    issue_date: UtcDatetime = Field(..., description="Data di emissione")
    items: list[ReceiptItemInput] = Field(default_factory=list, description="Articoli")


class ReceiptUpdate(CamelModel):
    """Aggiornamento parziale di una ricevuta."""

    client_id: Optional[uuid.UUID] = None
    metal_type: Optional[str] = Field(None, min_length=1, max_length=50)
    issue_date: Optional[UtcDatetime] = None
    items: Optional[list[ReceiptItemInput]] = None


class ReceiptRead(CamelModel):
    """Ricevuta restituita dall'API."""

    id: uuid.UUID
    client_id: Optional[uuid.UUID] = None
    client_info: ClientInfo
    metal_type: str
    issue_date: UtcDatetime
    items: list[ReceiptItemRead]
    totals: ReceiptTotals
    created_at: UtcDatetime
    updated_at: UtcDatetime


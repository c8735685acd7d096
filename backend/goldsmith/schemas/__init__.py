"""
Schemas Pydantic per il progetto Goldsmith Assistant

Questo modulo contiene tutti gli schemi Pydantic utilizzati per la validazione
e serializzazione delle richieste e risposte API (chiavi in camelCase).
"""

# Import degli schemi per renderli disponibili tramite import diretto
# es: from goldsmith.schemas import ClientRead, ReceiptRead, etc.

from goldsmith.schemas.common import CamelModel, ClientInfo, DeleteResponse
from goldsmith.schemas.client import ClientCreate, ClientRead, ClientUpdate
from goldsmith.schemas.receipt import (
    ReceiptCreate,
    ReceiptItemInput,
    ReceiptItemRead,
    ReceiptRead,
    ReceiptTotals,
    ReceiptUpdate,
)
from goldsmith.schemas.admin_receipt import (
    AdminReceiptCreate,
    AdminReceiptRead,
    AdminReceiptUpdate,
    GivenItemInput,
    GivenLedgerInput,
    GivenLedgerRead,
    ReceivedItemInput,
    ReceivedLedgerInput,
    ReceivedLedgerRead,
)

__all__ = [
    "CamelModel",
    "ClientInfo",
    "DeleteResponse",
    "ClientCreate",
    "ClientRead",
    "ClientUpdate",
    "ReceiptCreate",
    "ReceiptItemInput",
    "ReceiptItemRead",
    "ReceiptRead",
    "ReceiptTotals",
    "ReceiptUpdate",
    "AdminReceiptCreate",
    "AdminReceiptRead",
    "AdminReceiptUpdate",
    "GivenItemInput",
    "GivenLedgerInput",
    "GivenLedgerRead",
    "ReceivedItemInput",
    "ReceivedLedgerInput",
    "ReceivedLedgerRead",
]

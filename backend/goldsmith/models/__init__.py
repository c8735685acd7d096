"""
Modelli Database SQLAlchemy
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Import centralizzato di tutti i modelli.

Modelli:
- Client: Anagrafica clienti
- ClientBill: Ricevute cliente (articoli e totali embedded come documento JSON)
- AdminBill: Ricevute admin con registri dato/ricevuto
"""

# SQLAlchemy 2.0 Base declarativa
# Importato qui per essere disponibile per tutti i modelli
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


from goldsmith.models.client import Client
from goldsmith.models.client_bill import ClientBill
from goldsmith.models.admin_bill import AdminBill, AdminBillStatus

__all__ = [
    "Base",
    "Client",
    "ClientBill",
    "AdminBill",
    "AdminBillStatus",
]

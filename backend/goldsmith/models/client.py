"""
Modello SQLAlchemy per l'entità Client
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Rappresenta l'anagrafica dei clienti del negozio.
"""


from __future__ import annotations
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from goldsmith.models import Base
from goldsmith.models.mixins import TimestampMixin, UUIDMixin


class Client(Base, UUIDMixin, TimestampMixin):
    """
    Modello per l'anagrafica clienti.

    Le ricevute associate non vengono eliminate insieme al cliente:
    il loro riferimento client_id viene azzerato e resta il nome memorizzato.

    Attributes:
        id: UUID primary key, generato automaticamente
        shop_name: Nome del negozio (obbligatorio)
        client_name: Nome del cliente (obbligatorio)
        phone_number: Numero di telefono (obbligatorio)
        address: Indirizzo (opzionale)
        created_at: Data/ora creazione record
        updated_at: Data/ora ultimo aggiornamento
    """

    __tablename__ = "clients"

    shop_name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        index=True,
        doc="Nome del negozio",
    )

    client_name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        index=True,
        doc="Nome del cliente",
    )

    phone_number: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        index=True,
        doc="Numero di telefono",
    )

    address: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Indirizzo completo",
    )

    def __repr__(self) -> str:
        return f"Client(client_name={self.client_name!r}, shop_name={self.shop_name!r})"

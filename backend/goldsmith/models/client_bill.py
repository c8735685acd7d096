"""
Modello SQLAlchemy per le ricevute cliente (ClientBill)
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Ogni ricevuta è un documento: gli articoli e i totali sono memorizzati
come JSON embedded nella riga, con le chiavi già in formato API.
"""


from __future__ import annotations
import datetime
import uuid
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from goldsmith.models import Base
from goldsmith.models.mixins import ClientInfoMixin, TimestampMixin, UUIDMixin


class ClientBill(Base, UUIDMixin, TimestampMixin, ClientInfoMixin):
    """
    Ricevuta cliente (transazione oro/argento).

    Attributes:
        client_id: Riferimento opzionale al cliente (NULL se eliminato)
        client_name / shop_name / phone_number: dati cliente denormalizzati
        metal_type: Tipo di metallo (es. Gold, Silver)
        issue_date: Data di emissione
        items: Lista articoli [{itemName, tag, grossWt, stoneWt, meltingTouch,
            stoneAmt, netWt, finalWt}]
        totals: Totali {grossWt, stoneWt, netWt, finalWt, stoneAmt}
    """

    __tablename__ = "client_bills"

    client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Cliente di riferimento",
    )

    metal_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
        doc="Tipo di metallo",
    )

    issue_date: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        doc="Data di emissione della ricevuta",
    )

    items: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Articoli della ricevuta",
    )

    totals: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Totali calcolati sugli articoli",
    )

    def __repr__(self) -> str:
        return f"ClientBill(client_name={self.client_name!r}, metal_type={self.metal_type!r})"

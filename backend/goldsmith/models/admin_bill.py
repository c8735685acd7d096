"""
Modello SQLAlchemy per le ricevute admin (AdminBill)
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Registro a due sezioni (dato/ricevuto) con l'orafo per conto di un cliente.
Le due sezioni vengono salvate indipendentemente.
"""


from __future__ import annotations
import datetime
import uuid
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from goldsmith.models import Base
from goldsmith.models.mixins import ClientInfoMixin, TimestampMixin, UUIDMixin


class AdminBillStatus(str, Enum):
    """Stato derivato dalla compilazione delle due sezioni."""
    EMPTY = "empty"
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"


class AdminBill(Base, UUIDMixin, TimestampMixin, ClientInfoMixin):
    """
    Ricevuta admin.

    Attributes:
        client_id: Riferimento al cliente (NULL se eliminato)
        given_date / given_items / given_totals: sezione "dato"
        received_date / received_items / received_totals: sezione "ricevuto"
        status: empty | incomplete | complete
    """

    __tablename__ = "admin_bills"

    client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Cliente di riferimento",
    )

    # ------------------------------------------------------------
    # Sezione "dato"
    # ------------------------------------------------------------
    given_date: Mapped[Optional[datetime.datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    given_items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    given_totals: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # ------------------------------------------------------------
    # Sezione "ricevuto"
    # ------------------------------------------------------------
    received_date: Mapped[Optional[datetime.datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    received_items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    received_totals: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AdminBillStatus.EMPTY.value,
        index=True,
        doc="Stato: empty, incomplete, complete",
    )

    @property
    def given(self) -> dict[str, Any]:
        return {
            "date": self.given_date,
            "items": self.given_items or [],
            "totals": self.given_totals or {},
        }

    @property
    def received(self) -> dict[str, Any]:
        return {
            "date": self.received_date,
            "items": self.received_items or [],
            "totals": self.received_totals or {},
        }

    def __repr__(self) -> str:
        return f"AdminBill(client_name={self.client_name!r}, status={self.status!r})"

"""
Mixin SQLAlchemy per modelli
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Mixin riutilizzabili per aggiungere funzionalità comuni ai modelli.
"""

import datetime
import uuid
from typing import Any

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy import event
from sqlalchemy.orm import Mapped, mapped_column, Session
from sqlalchemy.sql import func


class TimestampMixin:
    """
    Mixin per gestione automatica timestamp creazione e aggiornamento.

    Aggiunge i campi:
    - created_at: data/ora di creazione record (impostato automaticamente)
    - updated_at: data/ora ultimo aggiornamento (aggiornato automaticamente)
    """

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Data/ora di creazione del record",
    )

    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
        doc="Data/ora ultimo aggiornamento del record",
    )


class UUIDMixin:
    """
    Mixin per ID UUID generato server-side.

    Aggiunge il campo id come UUID primary key con generazione automatica.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="UUID primary key",
    )


class ClientInfoMixin:
    """
    Mixin per i dati cliente denormalizzati su una ricevuta.

    Il riferimento client_id è opzionale (diventa NULL se il cliente viene
    eliminato); il nome visualizzato resta sempre memorizzato sulla ricevuta.
    """

    client_name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        index=True,
        doc="Nome cliente visualizzato sulla ricevuta",
    )

    shop_name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        default="",
        doc="Nome negozio visualizzato sulla ricevuta",
    )

    phone_number: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default="",
        doc="Telefono visualizzato sulla ricevuta",
    )

    @property
    def client_info(self) -> dict[str, Any]:
        """Blocco clientInfo esposto dall'API."""
        return {
            "clientName": self.client_name,
            "shopName": self.shop_name or "",
            "phoneNumber": self.phone_number or "",
        }

    def apply_client_info(self, client: Any) -> None:
        """Copia i dati visualizzati dal cliente di riferimento."""
        self.client_name = client.client_name
        self.shop_name = client.shop_name or ""
        self.phone_number = client.phone_number or ""


# ------------------------------------------------------------
# Event Listeners
# ------------------------------------------------------------
@event.listens_for(Session, "before_flush")
def update_timestamp(session: Session, flush_context, instances) -> None:
    """
    Event listener per aggiornare automaticamente il campo updated_at.

    Aggiorna updated_at di tutti gli oggetti modificati (dirty) e nuovi (new).
    """
    now = datetime.datetime.now(datetime.timezone.utc)

    for obj in session.dirty:
        if hasattr(obj, "updated_at"):
            # Only update if the object was actually modified
            if session.is_modified(obj, include_collections=False):
                obj.updated_at = now

    for obj in session.new:
        if hasattr(obj, "updated_at"):
            obj.updated_at = now

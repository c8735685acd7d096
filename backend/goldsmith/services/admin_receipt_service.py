"""
Service Layer per le ricevute admin
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Registro a due sezioni (dato/ricevuto) con l'orafo:
- Ogni sezione viene salvata indipendentemente
- Una sezione non inviata in aggiornamento resta invariata
- Lo stato è sempre derivato dal numero di articoli delle due sezioni
"""

import logging
import uuid
from typing import Optional, Union

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from goldsmith.core.exceptions import BusinessValidationError, NotFoundError, StorageError
from goldsmith.models import AdminBill, AdminBillStatus
from goldsmith.schemas.admin_receipt import (
    GIVEN_ITEM_INPUT_FIELDS,
    RECEIVED_ITEM_INPUT_FIELDS,
    AdminReceiptCreate,
    AdminReceiptUpdate,
    GivenLedgerInput,
    ReceivedLedgerInput,
)
from goldsmith.services.calculations import (
    CalculationError,
    admin_status,
    given_line,
    given_totals,
    is_blank_item,
    received_line,
    received_totals,
    to_json_numbers,
)
from goldsmith.services.client_service import ClientService
from goldsmith.services.filters import between_days, contains, parse_day, parse_uuid

# Logger per questo modulo
logger = logging.getLogger(__name__)


def build_given_items(ledger: GivenLedgerInput) -> tuple[list[dict], dict[str, float]]:
    """Articoli "dato" da salvare (righe vuote scartate) e totali."""
    stored_items = []
    lines = []
    try:
        for item in ledger.items:
            raw = item.model_dump(by_alias=True)
            if is_blank_item(raw, GIVEN_ITEM_INPUT_FIELDS):
                continue
            line = given_line(raw)
            lines.append(line)
            stored_items.append({"productName": item.product_name.strip(), **to_json_numbers(line)})
        totals = given_totals(lines)
    except CalculationError as e:
        raise BusinessValidationError(str(e), extra={"field": "given.items"}) from e
    return stored_items, to_json_numbers(totals)


def build_received_items(ledger: ReceivedLedgerInput) -> tuple[list[dict], dict[str, float]]:
    """Articoli "ricevuto" da salvare (righe vuote scartate) e totali."""
    stored_items = []
    lines = []
    try:
        for item in ledger.items:
            raw = item.model_dump(by_alias=True)
            if is_blank_item(raw, RECEIVED_ITEM_INPUT_FIELDS):
                continue
            line = received_line(raw)
            lines.append(line)
            stored_items.append({"productName": item.product_name.strip(), **to_json_numbers(line)})
        totals = received_totals(lines)
    except CalculationError as e:
        raise BusinessValidationError(str(e), extra={"field": "received.items"}) from e
    return stored_items, to_json_numbers(totals)


class AdminReceiptService:
    """
    Service per la gestione delle ricevute admin.

    Implementa:
    - Validazione: una sezione con articoli deve avere una data
    - Aggiornamento per sezione: given e received sono indipendenti
    - Stato derivato: empty, incomplete, complete
    """

    def __init__(self, client_service: Optional[ClientService] = None) -> None:
        self.client_service = client_service or ClientService()

    async def search(
        self,
        db: AsyncSession,
        client_id: Optional[str] = None,
        client_name: Optional[str] = None,
        status: Optional[AdminBillStatus] = None,
        date: Optional[str] = None,
    ) -> list[AdminBill]:
        """
        Recupera le ricevute admin che corrispondono ai filtri.

        Il filtro ``date`` seleziona le ricevute in cui la data della sezione
        dato, della sezione ricevuto, di creazione o di aggiornamento cade
        nel giorno indicato.

        Returns:
            Lista di AdminBill, dall'ultima aggiornata

        Raises:
            BusinessValidationError: Se un ID o una data non sono validi
        """
        conditions = []

        name_condition = contains(AdminBill.client_name, client_name)
        if name_condition is not None:
            conditions.append(name_condition)

        if client_id:
            conditions.append(AdminBill.client_id == parse_uuid(client_id, "ID cliente"))

        if status is not None:
            conditions.append(AdminBill.status == AdminBillStatus(status).value)

        day = parse_day(date)
        if day is not None:
            conditions.append(
                or_(
                    between_days(AdminBill.given_date, day),
                    between_days(AdminBill.received_date, day),
                    between_days(AdminBill.created_at, day),
                    between_days(AdminBill.updated_at, day),
                )
            )

        query = select(AdminBill).order_by(AdminBill.updated_at.desc(), AdminBill.created_at.desc())
        if conditions:
            query = query.where(*conditions)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy ricerca ricevute admin: %s - %s", e.__class__.__name__, e)
            raise StorageError("Errore del database durante la ricerca delle ricevute admin")

        bills = list(result.scalars().all())
        logger.info("Recuperate %s ricevute admin", len(bills))
        return bills

    async def get_by_id(
        self,
        db: AsyncSession,
        receipt_id: Union[str, uuid.UUID],
    ) -> AdminBill:
        """
        Recupera una ricevuta admin tramite ID.

        Raises:
            BusinessValidationError: Se l'ID non è un UUID valido
            NotFoundError: Se la ricevuta non esiste
        """
        receipt_uuid = parse_uuid(receipt_id, "ID ricevuta admin")

        try:
            result = await db.execute(select(AdminBill).where(AdminBill.id == receipt_uuid))
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy lettura ricevuta admin %s: %s", receipt_uuid, e)
            raise StorageError("Errore del database durante la lettura della ricevuta admin")

        bill = result.scalar_one_or_none()
        if bill is None:
            logger.warning("Ricevuta admin non trovata: %s", receipt_uuid)
            raise NotFoundError(f"Ricevuta admin con ID {receipt_uuid} non trovata")

        return bill

    async def create(
        self,
        db: AsyncSession,
        receipt_data: AdminReceiptCreate,
    ) -> AdminBill:
        """
        Crea una nuova ricevuta admin.

        Raises:
            BusinessValidationError: Cliente inesistente o sezione con articoli senza data
            StorageError: Se il database genera un errore
        """
        client = await self.client_service.get_reference(db, receipt_data.client_id)

        bill = AdminBill(
            client_id=client.id,
            given_items=[],
            given_totals=to_json_numbers(given_totals([])),
            received_items=[],
            received_totals=to_json_numbers(received_totals([])),
        )
        bill.apply_client_info(client)

        if receipt_data.given is not None:
            self._apply_given(bill, receipt_data.given)
        if receipt_data.received is not None:
            self._apply_received(bill, receipt_data.received)
        self._refresh_status(bill)

        try:
            db.add(bill)
            await db.flush()
            await db.refresh(bill)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy creazione ricevuta admin: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante la creazione della ricevuta admin")

        logger.info(
            "Creata ricevuta admin: %s - cliente %s (stato: %s)",
            bill.id, bill.client_name, bill.status,
        )
        return bill

    async def update(
        self,
        db: AsyncSession,
        receipt_id: Union[str, uuid.UUID],
        receipt_data: AdminReceiptUpdate,
    ) -> AdminBill:
        """
        Aggiorna una ricevuta admin.

        Solo le sezioni presenti nel payload vengono sostituite; lo stato
        viene ricalcolato dopo l'aggiornamento.

        Raises:
            NotFoundError: Se la ricevuta non esiste
            BusinessValidationError: Cliente inesistente o sezione con articoli senza data
            StorageError: Se il database genera un errore
        """
        bill = await self.get_by_id(db, receipt_id)

        if receipt_data.client_id is not None:
            client = await self.client_service.get_reference(db, receipt_data.client_id)
            bill.client_id = client.id
            bill.apply_client_info(client)

        if receipt_data.given is not None:
            self._apply_given(bill, receipt_data.given)
        if receipt_data.received is not None:
            self._apply_received(bill, receipt_data.received)
        self._refresh_status(bill)

        try:
            await db.flush()
            await db.refresh(bill)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy aggiornamento ricevuta admin: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante l'aggiornamento della ricevuta admin")

        logger.info("Aggiornata ricevuta admin: %s (stato: %s)", bill.id, bill.status)
        return bill

    async def delete(
        self,
        db: AsyncSession,
        receipt_id: Union[str, uuid.UUID],
    ) -> uuid.UUID:
        """
        Elimina fisicamente una ricevuta admin.

        Raises:
            NotFoundError: Se la ricevuta non esiste
            StorageError: Se il database genera un errore
        """
        bill = await self.get_by_id(db, receipt_id)
        deleted_id = bill.id

        try:
            await db.delete(bill)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy eliminazione ricevuta admin: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante l'eliminazione della ricevuta admin")

        logger.info("Eliminata ricevuta admin: %s", deleted_id)
        return deleted_id

    # -------------------------------------------------------------------
    # Helper
    # -------------------------------------------------------------------

    def _apply_given(self, bill: AdminBill, ledger: GivenLedgerInput) -> None:
        items, totals = build_given_items(ledger)
        if items and ledger.date is None:
            raise BusinessValidationError(
                "La data della sezione 'dato' è obbligatoria",
                extra={"field": "given.date"},
            )
        bill.given_date = ledger.date
        bill.given_items = items
        bill.given_totals = totals

    def _apply_received(self, bill: AdminBill, ledger: ReceivedLedgerInput) -> None:
        items, totals = build_received_items(ledger)
        if items and ledger.date is None:
            raise BusinessValidationError(
                "La data della sezione 'ricevuto' è obbligatoria",
                extra={"field": "received.date"},
            )
        bill.received_date = ledger.date
        bill.received_items = items
        bill.received_totals = totals

    def _refresh_status(self, bill: AdminBill) -> None:
        bill.status = admin_status(len(bill.given_items or []), len(bill.received_items or []))

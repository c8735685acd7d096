"""
Service Layer per le ricevute cliente
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Gestisce il ciclo di vita delle ricevute (ClientBill):
- Righe vuote scartate, campi derivati e totali ricalcolati a ogni salvataggio
- Dati cliente copiati sulla ricevuta al momento della scrittura
- Ricerca per cliente, metallo e intervallo di date
"""

import logging
import uuid
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from goldsmith.core.exceptions import BusinessValidationError, NotFoundError, StorageError
from goldsmith.models import AdminBill, Client, ClientBill
from goldsmith.schemas.receipt import (
    RECEIPT_ITEM_INPUT_FIELDS,
    ReceiptCreate,
    ReceiptItemInput,
    ReceiptUpdate,
)
from goldsmith.services.calculations import (
    CalculationError,
    is_blank_item,
    receipt_line,
    receipt_totals,
    to_json_numbers,
)
from goldsmith.services.client_service import ClientService
from goldsmith.services.filters import (
    between_days,
    contains,
    parse_date_bound,
    parse_day,
    parse_uuid,
)

# Logger per questo modulo
logger = logging.getLogger(__name__)


def build_receipt_items(
    items: list[ReceiptItemInput],
) -> tuple[list[dict], dict[str, float]]:
    """
    Prepara gli articoli da salvare e i relativi totali.

    Le righe con tutti i campi vuoti vengono scartate; per le altre i
    valori numerici vengono arrotondati e netWt/finalWt calcolati.

    Returns:
        Tuple di (articoli con chiavi camelCase, totali)

    Raises:
        BusinessValidationError: Se un valore calcolato è fuori intervallo
    """
    stored_items = []
    lines = []
    try:
        for item in items:
            raw = item.model_dump(by_alias=True)
            if is_blank_item(raw, RECEIPT_ITEM_INPUT_FIELDS):
                continue
            line = receipt_line(raw)
            lines.append(line)
            stored_items.append(
                {
                    "itemName": item.item_name.strip(),
                    "tag": item.tag.strip(),
                    **to_json_numbers(line),
                }
            )
        totals = receipt_totals(lines)
    except CalculationError as e:
        raise BusinessValidationError(str(e), extra={"field": "items"}) from e
    return stored_items, to_json_numbers(totals)


class ReceiptService:
    """
    Service per la gestione delle ricevute cliente.

    I totali non vengono mai accettati dal chiamante: sono sempre la somma
    degli articoli correnti.
    """

    def __init__(self, client_service: Optional[ClientService] = None) -> None:
        self.client_service = client_service or ClientService()

    async def search(
        self,
        db: AsyncSession,
        client_id: Optional[str] = None,
        client_name: Optional[str] = None,
        shop_name: Optional[str] = None,
        phone_number: Optional[str] = None,
        metal_type: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        issue_date: Optional[str] = None,
        newest_created_first: bool = False,
    ) -> list[ClientBill]:
        """
        Recupera le ricevute che corrispondono ai filtri.

        Args:
            db: Sessione database
            client_id: UUID del cliente (corrispondenza esatta)
            client_name / shop_name / phone_number / metal_type: sottostringhe case-insensitive
            from_date / to_date: estremi inclusivi sulla data di emissione
            issue_date: singolo giorno di emissione
            newest_created_first: ordina per data di creazione invece che di emissione

        Returns:
            Lista di ClientBill, dalla più recente

        Raises:
            BusinessValidationError: Se un ID o una data non sono validi
        """
        conditions = [
            condition
            for condition in (
                contains(ClientBill.client_name, client_name),
                contains(ClientBill.shop_name, shop_name),
                contains(ClientBill.phone_number, phone_number),
                contains(ClientBill.metal_type, metal_type),
            )
            if condition is not None
        ]

        if client_id:
            conditions.append(ClientBill.client_id == parse_uuid(client_id, "ID cliente"))

        start = parse_date_bound(from_date, label="fromDate")
        if start is not None:
            conditions.append(ClientBill.issue_date >= start)
        end = parse_date_bound(to_date, end=True, label="toDate")
        if end is not None:
            conditions.append(ClientBill.issue_date <= end)

        day = parse_day(issue_date, label="issueDate")
        if day is not None:
            conditions.append(between_days(ClientBill.issue_date, day))

        if newest_created_first:
            ordering = (ClientBill.created_at.desc(), ClientBill.issue_date.desc())
        else:
            ordering = (ClientBill.issue_date.desc(), ClientBill.created_at.desc())

        query = select(ClientBill).order_by(*ordering)
        if conditions:
            query = query.where(*conditions)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy ricerca ricevute: %s - %s", e.__class__.__name__, e)
            raise StorageError("Errore del database durante la ricerca delle ricevute")

        bills = list(result.scalars().all())
        logger.info("Recuperate %s ricevute", len(bills))
        return bills

    async def get_by_id(
        self,
        db: AsyncSession,
        receipt_id: Union[str, uuid.UUID],
    ) -> ClientBill:
        """
        Recupera una ricevuta tramite ID.

        Una ricevuta il cui cliente è stato eliminato resta leggibile
        con il nome cliente memorizzato.

        Raises:
            BusinessValidationError: Se l'ID non è un UUID valido
            NotFoundError: Se la ricevuta non esiste
        """
        receipt_uuid = parse_uuid(receipt_id, "ID ricevuta")

        try:
            result = await db.execute(select(ClientBill).where(ClientBill.id == receipt_uuid))
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy lettura ricevuta %s: %s", receipt_uuid, e)
            raise StorageError("Errore del database durante la lettura della ricevuta")

        bill = result.scalar_one_or_none()
        if bill is None:
            logger.warning("Ricevuta non trovata: %s", receipt_uuid)
            raise NotFoundError(f"Ricevuta con ID {receipt_uuid} non trovata")

        return bill

    async def create(
        self,
        db: AsyncSession,
        receipt_data: ReceiptCreate,
    ) -> ClientBill:
        """
        Crea una nuova ricevuta.

        Raises:
            BusinessValidationError: Cliente inesistente o nessun articolo compilato
            StorageError: Se il database genera un errore
        """
        client = await self.client_service.get_reference(db, receipt_data.client_id)

        items, totals = build_receipt_items(receipt_data.items)
        if not items:
            raise BusinessValidationError(
                "La ricevuta deve contenere almeno un articolo",
                extra={"field": "items"},
            )

        bill = ClientBill(
            client_id=client.id,
            metal_type=receipt_data.metal_type.strip(),
            issue_date=receipt_data.issue_date,
            items=items,
            totals=totals,
        )
        bill.apply_client_info(client)

        try:
            db.add(bill)
            await db.flush()
            await db.refresh(bill)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy creazione ricevuta: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante la creazione della ricevuta")

        logger.info(
            "Creata ricevuta: %s - cliente %s, %s articoli, peso finale %s",
            bill.id, bill.client_name, len(items), totals["finalWt"],
        )
        return bill

    async def update(
        self,
        db: AsyncSession,
        receipt_id: Union[str, uuid.UUID],
        receipt_data: ReceiptUpdate,
    ) -> ClientBill:
        """
        Aggiorna una ricevuta (solo i campi inviati).

        Se vengono inviati gli articoli, articoli e totali vengono
        ricalcolati da zero.

        Raises:
            NotFoundError: Se la ricevuta non esiste
            BusinessValidationError: Cliente inesistente o nessun articolo compilato
            StorageError: Se il database genera un errore
        """
        bill = await self.get_by_id(db, receipt_id)

        if receipt_data.client_id is not None:
            client = await self.client_service.get_reference(db, receipt_data.client_id)
            bill.client_id = client.id
            bill.apply_client_info(client)

        if receipt_data.metal_type is not None:
            bill.metal_type = receipt_data.metal_type.strip()

        if receipt_data.issue_date is not None:
            bill.issue_date = receipt_data.issue_date

        if receipt_data.items is not None:
            items, totals = build_receipt_items(receipt_data.items)
            if not items:
                raise BusinessValidationError(
                    "La ricevuta deve contenere almeno un articolo",
                    extra={"field": "items"},
                )
            bill.items = items
            bill.totals = totals

        try:
            await db.flush()
            await db.refresh(bill)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy aggiornamento ricevuta: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante l'aggiornamento della ricevuta")

        logger.info("Aggiornata ricevuta: %s", bill.id)
        return bill

    async def delete(
        self,
        db: AsyncSession,
        receipt_id: Union[str, uuid.UUID],
    ) -> uuid.UUID:
        """
        Elimina fisicamente una ricevuta.

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
            logger.error("Errore SQLAlchemy eliminazione ricevuta: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante l'eliminazione della ricevuta")

        logger.info("Eliminata ricevuta: %s", deleted_id)
        return deleted_id

    async def sync_client_info(self, db: AsyncSession) -> int:
        """
        Riallinea i dati cliente memorizzati su tutte le ricevute.

        Operazione di manutenzione: per ogni ricevuta (cliente e admin) che
        referenzia ancora un cliente, ricopia nome, negozio e telefono.
        Le ricevute orfane mantengono i dati memorizzati.

        Returns:
            Numero di ricevute modificate
        """
        updated = 0
        try:
            for model in (ClientBill, AdminBill):
                result = await db.execute(
                    select(model, Client).join(Client, model.client_id == Client.id)
                )
                for bill, client in result.all():
                    if bill.client_info != {
                        "clientName": client.client_name,
                        "shopName": client.shop_name or "",
                        "phoneNumber": client.phone_number or "",
                    }:
                        bill.apply_client_info(client)
                        updated += 1
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy sincronizzazione dati cliente: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante la sincronizzazione dei dati cliente")

        logger.info("Sincronizzazione dati cliente completata: %s ricevute aggiornate", updated)
        return updated

"""
Router FastAPI per le ricevute cliente
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Definisce gli endpoint API per creare, consultare, aggiornare ed
eliminare le ricevute. Totali e pesi derivati sono calcolati dal server.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from goldsmith.core.database import get_db
from goldsmith.schemas.common import DeleteResponse
from goldsmith.schemas.receipt import ReceiptCreate, ReceiptRead, ReceiptUpdate
from goldsmith.services.receipt_service import ReceiptService

# Logger per questo modulo
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/receipts",
    tags=["Ricevute"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_receipt_service() -> ReceiptService:
    """Dependency per ottenere un'istanza del ReceiptService."""
    return ReceiptService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "",
    name="ricevute_lista",
    summary="Lista ricevute",
    description="Ricerca ricevute per cliente, metallo e intervallo di date di emissione.",
    response_model=list[ReceiptRead],
    status_code=status.HTTP_200_OK,
)
async def get_receipts(
    client_id: Optional[str] = Query(None, alias="clientId", description="UUID cliente"),
    client_name: Optional[str] = Query(None, alias="clientName", description="Filtro nome cliente"),
    metal_type: Optional[str] = Query(None, alias="metalType", description="Filtro tipo metallo"),
    from_date: Optional[str] = Query(None, alias="fromDate", description="Data emissione minima (ISO-8601)"),
    to_date: Optional[str] = Query(None, alias="toDate", description="Data emissione massima (ISO-8601)"),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> list[ReceiptRead]:
    """
    Recupera le ricevute filtrate, dalla data di emissione più recente.

    Una data semplice in ``toDate`` include l'intero giorno.
    """
    bills = await service.search(
        db=db,
        client_id=client_id,
        client_name=client_name,
        metal_type=metal_type,
        from_date=from_date,
        to_date=to_date,
    )
    return [ReceiptRead.model_validate(b) for b in bills]


@router.get(
    "/{receipt_id}",
    name="ricevuta_dettaglio",
    summary="Dettaglio ricevuta",
    response_model=ReceiptRead,
    status_code=status.HTTP_200_OK,
)
async def get_receipt(
    receipt_id: str,
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> ReceiptRead:
    bill = await service.get_by_id(db=db, receipt_id=receipt_id)
    return ReceiptRead.model_validate(bill)


@router.post(
    "",
    name="ricevuta_crea",
    summary="Crea ricevuta",
    description="Crea una ricevuta. Le righe vuote vengono scartate; serve almeno un articolo.",
    response_model=ReceiptRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_receipt(
    receipt_data: ReceiptCreate,
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> ReceiptRead:
    """
    Crea una nuova ricevuta.

    Raises:
        BusinessValidationError: Cliente inesistente o nessun articolo compilato
    """
    bill = await service.create(db=db, receipt_data=receipt_data)
    await db.commit()
    return ReceiptRead.model_validate(bill)


@router.put(
    "/{receipt_id}",
    name="ricevuta_aggiorna",
    summary="Aggiorna ricevuta",
    description="Aggiorna una ricevuta; articoli e totali vengono ricalcolati.",
    response_model=ReceiptRead,
    status_code=status.HTTP_200_OK,
)
async def update_receipt(
    receipt_id: str,
    receipt_data: ReceiptUpdate,
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> ReceiptRead:
    bill = await service.update(db=db, receipt_id=receipt_id, receipt_data=receipt_data)
    await db.commit()
    return ReceiptRead.model_validate(bill)


@router.delete(
    "/{receipt_id}",
    name="ricevuta_elimina",
    summary="Elimina ricevuta",
    response_model=DeleteResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_receipt(
    receipt_id: str,
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> DeleteResponse:
    deleted_id = await service.delete(db=db, receipt_id=receipt_id)
    await db.commit()
    return DeleteResponse(id=deleted_id)

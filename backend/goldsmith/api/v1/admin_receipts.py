"""
Router FastAPI per le ricevute admin
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Registro dato/ricevuto con l'orafo. Le due sezioni possono essere
salvate separatamente: un aggiornamento con la sola sezione "given"
non modifica la sezione "received" e viceversa.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from goldsmith.core.database import get_db
from goldsmith.models import AdminBillStatus
from goldsmith.schemas.admin_receipt import (
    AdminReceiptCreate,
    AdminReceiptRead,
    AdminReceiptUpdate,
)
from goldsmith.schemas.common import DeleteResponse
from goldsmith.services.admin_receipt_service import AdminReceiptService

# Logger per questo modulo
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin-receipts",
    tags=["Ricevute Admin"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_admin_receipt_service() -> AdminReceiptService:
    """Dependency per ottenere un'istanza dell'AdminReceiptService."""
    return AdminReceiptService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "",
    name="ricevute_admin_lista",
    summary="Lista ricevute admin",
    description="Ricerca ricevute admin per cliente e stato.",
    response_model=list[AdminReceiptRead],
    status_code=status.HTTP_200_OK,
)
async def get_admin_receipts(
    client_id: Optional[str] = Query(None, alias="clientId", description="UUID cliente"),
    client_name: Optional[str] = Query(None, alias="clientName", description="Filtro nome cliente"),
    status_filter: Optional[AdminBillStatus] = Query(None, alias="status", description="Stato"),
    db: AsyncSession = Depends(get_db),
    service: AdminReceiptService = Depends(get_admin_receipt_service),
) -> list[AdminReceiptRead]:
    bills = await service.search(
        db=db,
        client_id=client_id,
        client_name=client_name,
        status=status_filter,
    )
    return [AdminReceiptRead.model_validate(b) for b in bills]


@router.get(
    "/{receipt_id}",
    name="ricevuta_admin_dettaglio",
    summary="Dettaglio ricevuta admin",
    response_model=AdminReceiptRead,
    status_code=status.HTTP_200_OK,
)
async def get_admin_receipt(
    receipt_id: str,
    db: AsyncSession = Depends(get_db),
    service: AdminReceiptService = Depends(get_admin_receipt_service),
) -> AdminReceiptRead:
    bill = await service.get_by_id(db=db, receipt_id=receipt_id)
    return AdminReceiptRead.model_validate(bill)


@router.post(
    "",
    name="ricevuta_admin_crea",
    summary="Crea ricevuta admin",
    description="Crea una ricevuta admin per un cliente esistente; le sezioni sono opzionali.",
    response_model=AdminReceiptRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_admin_receipt(
    receipt_data: AdminReceiptCreate,
    db: AsyncSession = Depends(get_db),
    service: AdminReceiptService = Depends(get_admin_receipt_service),
) -> AdminReceiptRead:
    """
    Crea una nuova ricevuta admin.

    Raises:
        BusinessValidationError: Cliente inesistente o sezione con articoli senza data
    """
    bill = await service.create(db=db, receipt_data=receipt_data)
    await db.commit()
    return AdminReceiptRead.model_validate(bill)


@router.put(
    "/{receipt_id}",
    name="ricevuta_admin_aggiorna",
    summary="Aggiorna ricevuta admin",
    description="Sostituisce solo le sezioni inviate; lo stato viene ricalcolato.",
    response_model=AdminReceiptRead,
    status_code=status.HTTP_200_OK,
)
async def update_admin_receipt(
    receipt_id: str,
    receipt_data: AdminReceiptUpdate,
    db: AsyncSession = Depends(get_db),
    service: AdminReceiptService = Depends(get_admin_receipt_service),
) -> AdminReceiptRead:
    bill = await service.update(db=db, receipt_id=receipt_id, receipt_data=receipt_data)
    await db.commit()
    return AdminReceiptRead.model_validate(bill)


@router.delete(
    "/{receipt_id}",
    name="ricevuta_admin_elimina",
    summary="Elimina ricevuta admin",
    response_model=DeleteResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_admin_receipt(
    receipt_id: str,
    db: AsyncSession = Depends(get_db),
    service: AdminReceiptService = Depends(get_admin_receipt_service),
) -> DeleteResponse:
    deleted_id = await service.delete(db=db, receipt_id=receipt_id)
    await db.commit()
    return DeleteResponse(id=deleted_id)

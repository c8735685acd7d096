"""
Router FastAPI per la vista "admin-bills"
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Elenco delle ricevute admin per la schermata di consultazione.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from goldsmith.core.database import get_db
from goldsmith.schemas.admin_receipt import AdminReceiptRead
from goldsmith.schemas.common import DeleteResponse
from goldsmith.services.admin_receipt_service import AdminReceiptService

# Logger per questo modulo
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin-bills",
    tags=["Ricevute Admin"],
)


def get_admin_receipt_service() -> AdminReceiptService:
    """Dependency per ottenere un'istanza dell'AdminReceiptService."""
    return AdminReceiptService()


@router.get(
    "",
    name="admin_bills_lista",
    summary="Elenco ricevute admin",
    description=(
        "Elenco ricevute admin dall'ultima aggiornata; date seleziona le ricevute "
        "con data dato, ricevuto, creazione o aggiornamento nel giorno indicato."
    ),
    response_model=list[AdminReceiptRead],
    status_code=status.HTTP_200_OK,
)
async def get_admin_bills(
    client_name: Optional[str] = Query(None, alias="clientName", description="Filtro nome cliente"),
    client_id: Optional[str] = Query(None, alias="clientId", description="UUID cliente"),
    date: Optional[str] = Query(None, description="Giorno (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
    service: AdminReceiptService = Depends(get_admin_receipt_service),
) -> list[AdminReceiptRead]:
    bills = await service.search(
        db=db,
        client_id=client_id,
        client_name=client_name,
        date=date,
    )
    return [AdminReceiptRead.model_validate(b) for b in bills]


@router.delete(
    "/{bill_id}",
    name="admin_bill_elimina",
    summary="Elimina ricevuta admin",
    response_model=DeleteResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_admin_bill(
    bill_id: str,
    db: AsyncSession = Depends(get_db),
    service: AdminReceiptService = Depends(get_admin_receipt_service),
) -> DeleteResponse:
    deleted_id = await service.delete(db=db, receipt_id=bill_id)
    await db.commit()
    return DeleteResponse(id=deleted_id)

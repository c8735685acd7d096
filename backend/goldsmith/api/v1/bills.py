"""
Router FastAPI per la vista "bills" delle ricevute cliente
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Elenco ricevute per la schermata di consultazione, cancellazione
e download del PDF.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from goldsmith.core.database import get_db
from goldsmith.schemas.common import DeleteResponse
from goldsmith.schemas.receipt import ReceiptRead
from goldsmith.services.pdf_service import PdfService
from goldsmith.services.receipt_service import ReceiptService

# Logger per questo modulo
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bills",
    tags=["Ricevute"],
)


def get_receipt_service() -> ReceiptService:
    """Dependency per ottenere un'istanza del ReceiptService."""
    return ReceiptService()


def get_pdf_service() -> PdfService:
    """Dependency per ottenere un'istanza del PdfService."""
    return PdfService()


@router.get(
    "",
    name="bills_lista",
    summary="Elenco ricevute",
    description=(
        "Elenco ricevute dalla più recente per data di creazione; "
        "issueDate seleziona un singolo giorno di emissione."
    ),
    response_model=list[ReceiptRead],
    status_code=status.HTTP_200_OK,
)
async def get_bills(
    shop_name: Optional[str] = Query(None, alias="shopName", description="Filtro nome negozio"),
    client_name: Optional[str] = Query(None, alias="clientName", description="Filtro nome cliente"),
    phone_number: Optional[str] = Query(None, alias="phoneNumber", description="Filtro telefono"),
    client_id: Optional[str] = Query(None, alias="clientId", description="UUID cliente"),
    issue_date: Optional[str] = Query(None, alias="issueDate", description="Giorno di emissione (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> list[ReceiptRead]:
    bills = await service.search(
        db=db,
        shop_name=shop_name,
        client_name=client_name,
        phone_number=phone_number,
        client_id=client_id,
        issue_date=issue_date,
        newest_created_first=True,
    )
    return [ReceiptRead.model_validate(b) for b in bills]


@router.delete(
    "/{bill_id}",
    name="bill_elimina",
    summary="Elimina ricevuta",
    response_model=DeleteResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_bill(
    bill_id: str,
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
) -> DeleteResponse:
    deleted_id = await service.delete(db=db, receipt_id=bill_id)
    await db.commit()
    return DeleteResponse(id=deleted_id)


@router.get(
    "/{bill_id}/download",
    name="bill_pdf",
    summary="Scarica PDF ricevuta",
    description="Genera il PDF della ricevuta e lo restituisce come allegato.",
    response_class=Response,
    status_code=status.HTTP_200_OK,
)
async def download_bill(
    bill_id: str,
    db: AsyncSession = Depends(get_db),
    service: ReceiptService = Depends(get_receipt_service),
    pdf_service: PdfService = Depends(get_pdf_service),
) -> Response:
    """
    Scarica il PDF di una ricevuta.

    Il rendering WeasyPrint è sincrono e gira nel threadpool.

    Raises:
        BusinessValidationError: Se l'ID non è valido
        NotFoundError: Se la ricevuta non esiste
    """
    bill = await service.get_by_id(db=db, receipt_id=bill_id)
    pdf_bytes = await run_in_threadpool(pdf_service.generate_receipt_pdf, bill)

    filename = f"receipt_{bill.id}.pdf"
    logger.info("Download PDF ricevuta %s", bill.id)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

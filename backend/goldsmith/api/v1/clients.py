"""
Router FastAPI per l'entità Client
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Definisce gli endpoint API per la gestione dei clienti.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from goldsmith.core.database import get_db
from goldsmith.schemas.client import ClientCreate, ClientRead, ClientUpdate
from goldsmith.schemas.common import DeleteResponse
from goldsmith.services.client_service import ClientService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/clients",
    tags=["Clienti"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_client_service() -> ClientService:
    """
    Dependency per ottenere un'istanza del ClientService.

    Questo permette di iniettare il service nei router senza
    usare istanze globali, facilitando i test e la manutenzione.
    """
    return ClientService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "",
    name="clienti_lista",
    summary="Lista clienti",
    description="Recupera i clienti filtrando per negozio, nome e telefono (case-insensitive).",
    response_model=list[ClientRead],
    status_code=status.HTTP_200_OK,
)
async def get_clients(
    shop_name: Optional[str] = Query(None, alias="shopName", description="Filtro nome negozio"),
    client_name: Optional[str] = Query(None, alias="clientName", description="Filtro nome cliente"),
    phone_number: Optional[str] = Query(None, alias="phoneNumber", description="Filtro telefono"),
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> list[ClientRead]:
    """
    Recupera la lista dei clienti.

    Args:
        shop_name: Sottostringa del nome negozio
        client_name: Sottostringa del nome cliente
        phone_number: Sottostringa del telefono
        db: Sessione database
        service: Istanza del ClientService (iniettata automaticamente)

    Returns:
        list[ClientRead]: Clienti dall'ultimo aggiornato
    """
    clients = await service.search(
        db=db,
        shop_name=shop_name,
        client_name=client_name,
        phone_number=phone_number,
    )
    return [ClientRead.model_validate(c) for c in clients]


@router.get(
    "/{client_id}",
    name="cliente_dettaglio",
    summary="Dettaglio cliente",
    description="Recupera i dettagli di un cliente specifico.",
    response_model=ClientRead,
    status_code=status.HTTP_200_OK,
)
async def get_client(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """
    Recupera i dettagli di un cliente.

    Raises:
        BusinessValidationError: Se l'ID non è un UUID valido
        NotFoundError: Se il cliente non esiste
    """
    client = await service.get_by_id(db=db, client_id=client_id)
    return ClientRead.model_validate(client)


@router.post(
    "",
    name="cliente_crea",
    summary="Crea cliente",
    description="Crea un nuovo cliente.",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_client(
    client_data: ClientCreate,
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """
    Crea un nuovo cliente.

    Args:
        client_data: Dati del cliente da creare
        db: Sessione database
        service: Istanza del ClientService (iniettata automaticamente)

    Returns:
        ClientRead: Dettagli del cliente creato
    """
    client = await service.create(db=db, client_data=client_data)
    await db.commit()
    return ClientRead.model_validate(client)


@router.put(
    "/{client_id}",
    name="cliente_aggiorna",
    summary="Aggiorna cliente",
    description="Aggiorna i dati di un cliente esistente e li riallinea sulle sue ricevute.",
    response_model=ClientRead,
    status_code=status.HTTP_200_OK,
)
async def update_client(
    client_id: str,
    client_data: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """
    Aggiorna un cliente esistente.

    Raises:
        NotFoundError: Se il cliente non esiste
    """
    client = await service.update(
        db=db,
        client_id=client_id,
        client_data=client_data,
    )
    await db.commit()
    return ClientRead.model_validate(client)


@router.delete(
    "/{client_id}",
    name="cliente_elimina",
    summary="Elimina cliente",
    description="Elimina un cliente. Le sue ricevute restano consultabili.",
    response_model=DeleteResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_client(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    service: ClientService = Depends(get_client_service),
) -> DeleteResponse:
    """
    Elimina fisicamente un cliente.

    Raises:
        NotFoundError: Se il cliente non esiste
    """
    deleted_id = await service.delete(db=db, client_id=client_id)
    await db.commit()
    return DeleteResponse(id=deleted_id)

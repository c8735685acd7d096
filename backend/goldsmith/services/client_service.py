"""
Service Layer per l'entità Client
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Definisce la logica di business per la gestione dei clienti:
- Ricerca case-insensitive su negozio, nome e telefono
- Propagazione dei dati anagrafici sulle ricevute collegate
- Cancellazione fisica che non elimina mai le ricevute
"""

import datetime
import logging
import uuid
from typing import Optional, Union

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from goldsmith.core.exceptions import BusinessValidationError, NotFoundError, StorageError
from goldsmith.models import AdminBill, Client, ClientBill
from goldsmith.schemas.client import ClientCreate, ClientUpdate
from goldsmith.services.filters import contains, parse_uuid

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Campi anagrafici copiati sulle ricevute
CLIENT_INFO_FIELDS = ("client_name", "shop_name", "phone_number")


class ClientService:
    """
    Service per la gestione delle operazioni CRUD sui clienti.

    Fornisce metodi asincroni per interagire con il database
    in modo centralizzato, senza dipendenze da FastAPI.

    Usage with Dependency Injection:
        from goldsmith.services.client_service import ClientService

        @app.get("/clients")
        async def get_clients(service: ClientService = Depends(get_client_service)):
            return await service.search(db)
    """

    async def search(
        self,
        db: AsyncSession,
        shop_name: Optional[str] = None,
        client_name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> list[Client]:
        """
        Recupera i clienti che corrispondono ai filtri.

        Ogni filtro è una sottostringa case-insensitive; i filtri vuoti
        vengono ignorati. Ordinamento: ultimo aggiornamento decrescente.

        Args:
            db: Sessione database
            shop_name: Filtro sul nome negozio
            client_name: Filtro sul nome cliente
            phone_number: Filtro sul telefono

        Returns:
            Lista di Client
        """
        conditions = [
            condition
            for condition in (
                contains(Client.shop_name, shop_name),
                contains(Client.client_name, client_name),
                contains(Client.phone_number, phone_number),
            )
            if condition is not None
        ]

        query = select(Client).order_by(Client.updated_at.desc(), Client.created_at.desc())
        if conditions:
            query = query.where(*conditions)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy ricerca clienti: %s - %s", e.__class__.__name__, e)
            raise StorageError("Errore del database durante la ricerca dei clienti")

        clients = list(result.scalars().all())
        logger.info("Recuperati %s clienti", len(clients))
        return clients

    async def get_by_id(
        self,
        db: AsyncSession,
        client_id: Union[str, uuid.UUID],
    ) -> Client:
        """
        Recupera un cliente tramite ID.

        Raises:
            BusinessValidationError: Se l'ID non è un UUID valido
            NotFoundError: Se il cliente non esiste
        """
        client_uuid = parse_uuid(client_id, "ID cliente")

        try:
            result = await db.execute(select(Client).where(Client.id == client_uuid))
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy lettura cliente %s: %s", client_uuid, e)
            raise StorageError("Errore del database durante la lettura del cliente")

        client = result.scalar_one_or_none()
        if client is None:
            logger.warning("Cliente non trovato: %s", client_uuid)
            raise NotFoundError(f"Cliente con ID {client_uuid} non trovato")

        logger.debug("Recuperato cliente: %s - %s", client.id, client.client_name)
        return client

    async def get_reference(
        self,
        db: AsyncSession,
        client_id: Union[str, uuid.UUID],
    ) -> Client:
        """
        Recupera il cliente referenziato da una ricevuta in scrittura.

        A differenza di get_by_id, un cliente inesistente è un errore di
        validazione dei dati inviati (400) e non una risorsa mancante.
        """
        try:
            return await self.get_by_id(db, client_id)
        except NotFoundError:
            raise BusinessValidationError(
                f"Cliente di riferimento inesistente: {client_id}",
                extra={"field": "clientId"},
            )

    async def create(
        self,
        db: AsyncSession,
        client_data: ClientCreate,
    ) -> Client:
        """
        Crea un nuovo cliente.

        Args:
            db: Sessione database
            client_data: Dati del cliente da creare

        Returns:
            Oggetto Client appena creato

        Raises:
            StorageError: Se il database genera un errore
        """
        client = Client(**client_data.model_dump())

        try:
            db.add(client)
            await db.flush()
            await db.refresh(client)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy creazione cliente: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante la creazione del cliente")

        logger.info("Creato nuovo cliente: %s - %s (%s)", client.id, client.client_name, client.shop_name)
        return client

    async def update(
        self,
        db: AsyncSession,
        client_id: Union[str, uuid.UUID],
        client_data: ClientUpdate,
    ) -> Client:
        """
        Aggiorna un cliente esistente (solo i campi inviati).

        Se cambiano nome, negozio o telefono, i dati visualizzati sulle
        ricevute collegate vengono riallineati.

        Raises:
            NotFoundError: Se il cliente non esiste
            StorageError: Se il database genera un errore
        """
        client = await self.get_by_id(db, client_id)

        # Estrai solo i campi inviati nel payload (None non sovrascrive i campi obbligatori)
        update_data = {
            field: value
            for field, value in client_data.model_dump(exclude_unset=True).items()
            if value is not None or field == "address"
        }

        for field, value in update_data.items():
            setattr(client, field, value)

        info_changed = any(field in update_data for field in CLIENT_INFO_FIELDS)

        try:
            await db.flush()
            if info_changed:
                await self._propagate_client_info(db, client)
            await db.refresh(client)
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy aggiornamento cliente: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante l'aggiornamento del cliente")

        logger.info("Aggiornato cliente: %s - %s", client.id, client.client_name)
        return client

    async def delete(
        self,
        db: AsyncSession,
        client_id: Union[str, uuid.UUID],
    ) -> uuid.UUID:
        """
        Elimina fisicamente un cliente.

        Le ricevute collegate restano: il riferimento viene azzerato e il
        nome cliente memorizzato sulla ricevuta continua a essere mostrato.

        Returns:
            UUID del cliente eliminato

        Raises:
            NotFoundError: Se il cliente non esiste
            StorageError: Se il database genera un errore
        """
        client = await self.get_by_id(db, client_id)
        deleted_id = client.id

        try:
            for model in (ClientBill, AdminBill):
                await db.execute(
                    update(model)
                    .where(model.client_id == deleted_id)
                    .values(client_id=None)
                )
            await db.delete(client)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Errore SQLAlchemy eliminazione cliente: %s - %s", e.__class__.__name__, e)
            await db.rollback()
            raise StorageError("Errore del database durante l'eliminazione del cliente")

        logger.info("Eliminato cliente: %s", deleted_id)
        return deleted_id

    async def _propagate_client_info(self, db: AsyncSession, client: Client) -> None:
        """
        Copia nome, negozio e telefono del cliente sulle sue ricevute.

        L'UPDATE massivo non passa dal listener before_flush:
        updated_at va impostato qui.
        """
        values = {
            "client_name": client.client_name,
            "shop_name": client.shop_name or "",
            "phone_number": client.phone_number or "",
            "updated_at": datetime.datetime.now(datetime.timezone.utc),
        }
        for model in (ClientBill, AdminBill):
            await db.execute(
                update(model)
                .where(model.client_id == client.id)
                .values(**values)
            )
        logger.debug("Dati cliente %s propagati sulle ricevute", client.id)

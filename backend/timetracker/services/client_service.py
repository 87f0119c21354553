"""
TimeTracker Backend - Client Service
=====================================

What:  CRUD operations on clients.
Who:   Called by the /api/v{version}/clients route handlers.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.exceptions import NotFoundError
from timetracker.models.client import Client
from timetracker.schemas.client import ClientInputModel, ClientModel
from timetracker.schemas.common import PagedList
from timetracker.services.base import paginate, translate_db_errors

logger = logging.getLogger(__name__)


class ClientService:
    """Business logic layer for client operations."""

    @translate_db_errors("listing clients")
    async def list_clients(self, db: AsyncSession, page: int = 1, size: int = 5) -> PagedList[ClientModel]:
        logger.debug("Getting page %d of clients with page size %d", page, size)
        clients, total_count = await paginate(db, select(Client), Client, page, size)
        return PagedList[ClientModel](
            items=[ClientModel.model_validate(client) for client in clients],
            page=page,
            page_size=size,
            total_count=total_count,
        )

    @translate_db_errors("fetching the client")
    async def get_client(self, db: AsyncSession, client_id: int) -> ClientModel:
        logger.debug("Getting a client with id %d", client_id)
        client = await self._find(db, client_id)
        return ClientModel.model_validate(client)

    @translate_db_errors("creating the client")
    async def create_client(self, db: AsyncSession, model: ClientInputModel) -> ClientModel:
        logger.debug("Creating a new client with name %s", model.name)
        client = Client(name=model.name)
        db.add(client)
        await db.flush()
        logger.info("Client %d created", client.id)
        return ClientModel.model_validate(client)

    @translate_db_errors("updating the client")
    async def update_client(self, db: AsyncSession, client_id: int, model: ClientInputModel) -> ClientModel:
        logger.debug("Updating a client with id %d", client_id)
        client = await self._find(db, client_id)
        client.name = model.name
        await db.flush()
        return ClientModel.model_validate(client)

    @translate_db_errors("deleting the client")
    async def delete_client(self, db: AsyncSession, client_id: int) -> None:
        """Deletes the client; its projects and their time entries go with it."""
        logger.debug("Deleting a client with id %d", client_id)
        client = await self._find(db, client_id)
        await db.delete(client)
        await db.flush()
        logger.info("Client %d deleted", client_id)

    async def _find(self, db: AsyncSession, client_id: int) -> Client:
        client = await db.get(Client, client_id)
        if client is None:
            raise NotFoundError(resource="client", resource_id=client_id)
        return client


client_service = ClientService()

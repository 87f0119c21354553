"""
TimeTracker Backend - Client Route Handlers
============================================

What:  CRUD endpoints for clients under /api/v{version}/clients.
How:   Authenticated via the demo principal; writes need the Admin role.
       Deleting a client removes its projects and their time entries.
"""

import logging

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.database import get_db_session
from timetracker.schemas.client import ClientInputModel, ClientModel
from timetracker.schemas.common import ErrorResponse, PagedList
from timetracker.security import get_current_principal, require_admin
from timetracker.services.client_service import client_service
from timetracker.versioning import API_PREFIX, api_version, resource_location

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(
    prefix=API_PREFIX,
    tags=["Clients"],
    dependencies=[Depends(api_version), Depends(get_current_principal)],
    responses={
        400: {"description": "Invalid input or API version", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
)

_NOT_FOUND = {404: {"description": "Client not found", "model": ErrorResponse}}
_FORBIDDEN = {403: {"description": "Admin role required", "model": ErrorResponse}}


@router.get("/clients", response_model=PagedList[ClientModel], summary="List clients")
async def list_clients(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    size: int = Query(default=5, ge=1, description="Items per page"),
    db: AsyncSession = Depends(get_db_session),
) -> PagedList[ClientModel]:
    return await client_service.list_clients(db, page=page, size=size)


@router.get(
    "/clients/{client_id}",
    response_model=ClientModel,
    responses=_NOT_FOUND,
    summary="Get a client",
)
async def get_client(
    client_id: int = Path(description="Client id"),
    db: AsyncSession = Depends(get_db_session),
) -> ClientModel:
    return await client_service.get_client(db, client_id)


@router.post(
    "/clients",
    response_model=ClientModel,
    status_code=201,
    dependencies=[Depends(require_admin)],
    responses=_FORBIDDEN,
    summary="Create a client",
)
async def create_client(
    model: ClientInputModel,
    response: Response,
    version: int = Depends(api_version),
    db: AsyncSession = Depends(get_db_session),
) -> ClientModel:
    client = await client_service.create_client(db, model)
    response.headers["Location"] = resource_location(version, "clients", client.id)
    return client


@router.put(
    "/clients/{client_id}",
    response_model=ClientModel,
    dependencies=[Depends(require_admin)],
    responses={**_NOT_FOUND, **_FORBIDDEN},
    summary="Update a client",
)
async def update_client(
    model: ClientInputModel,
    client_id: int = Path(description="Client id"),
    db: AsyncSession = Depends(get_db_session),
) -> ClientModel:
    return await client_service.update_client(db, client_id, model)


@router.delete(
    "/clients/{client_id}",
    dependencies=[Depends(require_admin)],
    responses={200: {"description": "Deleted, empty body"}, **_NOT_FOUND, **_FORBIDDEN},
    summary="Delete a client with its projects and their time entries",
)
async def delete_client(
    client_id: int = Path(description="Client id"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await client_service.delete_client(db, client_id)
    return Response(status_code=200)

"""
TimeTracker Backend - User Route Handlers
==========================================

What:  CRUD endpoints for users under /api/v{version}/users.
How:   Authenticated via the demo principal; writes need the Admin role.
       Uses the "users" rate-limit policy, which never throttles.
"""

import logging

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.database import get_db_session
from timetracker.rate_limiting import rate_limit
from timetracker.schemas.common import ErrorResponse, PagedList
from timetracker.schemas.user import UserInputModel, UserModel
from timetracker.security import get_current_principal, require_admin
from timetracker.services.user_service import user_service
from timetracker.versioning import API_PREFIX, api_version, resource_location

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(
    prefix=API_PREFIX,
    tags=["Users"],
    dependencies=[
        Depends(api_version),
        Depends(get_current_principal),
        Depends(rate_limit("users")),
    ],
    responses={
        400: {"description": "Invalid input or API version", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
)

_NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}
_FORBIDDEN = {403: {"description": "Admin role required", "model": ErrorResponse}}


@router.get("/users", response_model=PagedList[UserModel], summary="List users")
async def list_users(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    size: int = Query(default=5, ge=1, description="Items per page"),
    db: AsyncSession = Depends(get_db_session),
) -> PagedList[UserModel]:
    return await user_service.list_users(db, page=page, size=size)


@router.get(
    "/users/{user_id}",
    response_model=UserModel,
    responses=_NOT_FOUND,
    summary="Get a user",
)
async def get_user(
    user_id: int = Path(description="User id"),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    return await user_service.get_user(db, user_id)


@router.post(
    "/users",
    response_model=UserModel,
    status_code=201,
    dependencies=[Depends(require_admin)],
    responses=_FORBIDDEN,
    summary="Create a user",
)
async def create_user(
    model: UserInputModel,
    response: Response,
    version: int = Depends(api_version),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    user = await user_service.create_user(db, model)
    response.headers["Location"] = resource_location(version, "users", user.id)
    return user


@router.put(
    "/users/{user_id}",
    response_model=UserModel,
    dependencies=[Depends(require_admin)],
    responses={**_NOT_FOUND, **_FORBIDDEN},
    summary="Update a user",
    description="Replaces name and hour rate. Existing time entries keep their rate.",
)
async def update_user(
    model: UserInputModel,
    user_id: int = Path(description="User id"),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    return await user_service.update_user(db, user_id, model)


@router.delete(
    "/users/{user_id}",
    dependencies=[Depends(require_admin)],
    responses={200: {"description": "Deleted, empty body"}, **_NOT_FOUND, **_FORBIDDEN},
    summary="Delete a user and their time entries",
)
async def delete_user(
    user_id: int = Path(description="User id"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await user_service.delete_user(db, user_id)
    return Response(status_code=200)

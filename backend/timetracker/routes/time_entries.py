"""
TimeTracker Backend - Time Entry Route Handlers
================================================

What:  CRUD endpoints for time entries under /api/v{version}/time-entries,
       plus the monthly listing for one user.
How:   Authenticated via the demo principal; writes need the Admin role.

Rate limits:
    GET routes                 "get" policy (concurrency limiter)
    POST / PUT / DELETE        "modify" policy (fixed window, or token bucket
                               when the request carries a `token` header)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.database import get_db_session
from timetracker.rate_limiting import rate_limit
from timetracker.schemas.common import ErrorResponse, PagedList
from timetracker.schemas.time_entry import TimeEntryInputModel, TimeEntryModel
from timetracker.security import get_current_principal, require_admin
from timetracker.services.time_entry_service import time_entry_service
from timetracker.versioning import API_PREFIX, api_version, resource_location

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(
    prefix=API_PREFIX,
    tags=["Time Entries"],
    dependencies=[Depends(api_version), Depends(get_current_principal)],
    responses={
        400: {"description": "Invalid input or API version", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    },
)

_NOT_FOUND = {404: {"description": "Time entry, user or project not found", "model": ErrorResponse}}
_FORBIDDEN = {403: {"description": "Admin role required", "model": ErrorResponse}}

_READ = [Depends(rate_limit("get"))]
_WRITE = [Depends(require_admin), Depends(rate_limit("modify"))]


@router.get(
    "/time-entries",
    response_model=PagedList[TimeEntryModel],
    dependencies=_READ,
    summary="List time entries",
)
async def list_time_entries(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    size: int = Query(default=5, ge=1, description="Items per page"),
    db: AsyncSession = Depends(get_db_session),
) -> PagedList[TimeEntryModel]:
    return await time_entry_service.list_time_entries(db, page=page, size=size)


@router.get(
    "/time-entries/{user_id}/{year}/{month}",
    response_model=List[TimeEntryModel],
    dependencies=_READ,
    summary="List a user's time entries for one month",
    description=(
        "Every entry of the user dated within the given calendar month, oldest first. "
        "An unknown user yields an empty list."
    ),
)
async def list_time_entries_for_user_month(
    user_id: int = Path(description="User id"),
    year: int = Path(ge=1, le=9999, description="Calendar year"),
    month: int = Path(ge=1, le=12, description="Calendar month, 1-12"),
    db: AsyncSession = Depends(get_db_session),
) -> List[TimeEntryModel]:
    return await time_entry_service.list_for_user_month(db, user_id, year, month)


@router.get(
    "/time-entries/{entry_id}",
    response_model=TimeEntryModel,
    dependencies=_READ,
    responses=_NOT_FOUND,
    summary="Get a time entry",
)
async def get_time_entry(
    entry_id: int = Path(description="Time entry id"),
    db: AsyncSession = Depends(get_db_session),
) -> TimeEntryModel:
    return await time_entry_service.get_time_entry(db, entry_id)


@router.post(
    "/time-entries",
    response_model=TimeEntryModel,
    status_code=201,
    dependencies=_WRITE,
    responses={**_NOT_FOUND, **_FORBIDDEN},
    summary="Create a time entry",
    description="The entry captures the user's current hour rate.",
)
async def create_time_entry(
    model: TimeEntryInputModel,
    response: Response,
    version: int = Depends(api_version),
    db: AsyncSession = Depends(get_db_session),
) -> TimeEntryModel:
    entry = await time_entry_service.create_time_entry(db, model)
    response.headers["Location"] = resource_location(version, "time-entries", entry.id)
    return entry


@router.put(
    "/time-entries/{entry_id}",
    response_model=TimeEntryModel,
    dependencies=_WRITE,
    responses={**_NOT_FOUND, **_FORBIDDEN},
    summary="Update a time entry",
    description="Replaces user, project, date, hours and description. The hour rate is kept.",
)
async def update_time_entry(
    model: TimeEntryInputModel,
    entry_id: int = Path(description="Time entry id"),
    db: AsyncSession = Depends(get_db_session),
) -> TimeEntryModel:
    return await time_entry_service.update_time_entry(db, entry_id, model)


@router.delete(
    "/time-entries/{entry_id}",
    dependencies=_WRITE,
    responses={200: {"description": "Deleted, empty body"}, **_NOT_FOUND, **_FORBIDDEN},
    summary="Delete a time entry",
)
async def delete_time_entry(
    entry_id: int = Path(description="Time entry id"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await time_entry_service.delete_time_entry(db, entry_id)
    return Response(status_code=200)

"""
TimeTracker Backend - Project Route Handlers
=============================================

What:  CRUD endpoints for projects under /api/v{version}/projects.
How:   Authenticated via the demo principal; writes need the Admin role.
       Create and update return 404 when clientId does not resolve.
"""

import logging

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.database import get_db_session
from timetracker.schemas.common import ErrorResponse, PagedList
from timetracker.schemas.project import ProjectInputModel, ProjectModel
from timetracker.security import get_current_principal, require_admin
from timetracker.services.project_service import project_service
from timetracker.versioning import API_PREFIX, api_version, resource_location

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(
    prefix=API_PREFIX,
    tags=["Projects"],
    dependencies=[Depends(api_version), Depends(get_current_principal)],
    responses={
        400: {"description": "Invalid input or API version", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
)

_NOT_FOUND = {404: {"description": "Project or client not found", "model": ErrorResponse}}
_FORBIDDEN = {403: {"description": "Admin role required", "model": ErrorResponse}}


@router.get("/projects", response_model=PagedList[ProjectModel], summary="List projects")
async def list_projects(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    size: int = Query(default=5, ge=1, description="Items per page"),
    db: AsyncSession = Depends(get_db_session),
) -> PagedList[ProjectModel]:
    return await project_service.list_projects(db, page=page, size=size)


@router.get(
    "/projects/{project_id}",
    response_model=ProjectModel,
    responses=_NOT_FOUND,
    summary="Get a project",
)
async def get_project(
    project_id: int = Path(description="Project id"),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectModel:
    return await project_service.get_project(db, project_id)


@router.post(
    "/projects",
    response_model=ProjectModel,
    status_code=201,
    dependencies=[Depends(require_admin)],
    responses={**_NOT_FOUND, **_FORBIDDEN},
    summary="Create a project for an existing client",
)
async def create_project(
    model: ProjectInputModel,
    response: Response,
    version: int = Depends(api_version),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectModel:
    project = await project_service.create_project(db, model)
    response.headers["Location"] = resource_location(version, "projects", project.id)
    return project


@router.put(
    "/projects/{project_id}",
    response_model=ProjectModel,
    dependencies=[Depends(require_admin)],
    responses={**_NOT_FOUND, **_FORBIDDEN},
    summary="Update a project",
)
async def update_project(
    model: ProjectInputModel,
    project_id: int = Path(description="Project id"),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectModel:
    return await project_service.update_project(db, project_id, model)


@router.delete(
    "/projects/{project_id}",
    dependencies=[Depends(require_admin)],
    responses={200: {"description": "Deleted, empty body"}, **_NOT_FOUND, **_FORBIDDEN},
    summary="Delete a project and its time entries",
)
async def delete_project(
    project_id: int = Path(description="Project id"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await project_service.delete_project(db, project_id)
    return Response(status_code=200)

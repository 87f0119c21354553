"""
TimeTracker Backend - Project Service
======================================

What:  CRUD operations on projects.
Who:   Called by the /api/v{version}/projects route handlers.

Every project response carries its client's name, so reads load the
client relationship eagerly (selectinload). Lazy loading is not available
on an AsyncSession.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from timetracker.exceptions import NotFoundError
from timetracker.models.client import Client
from timetracker.models.project import Project
from timetracker.schemas.common import PagedList
from timetracker.schemas.project import ProjectInputModel, ProjectModel
from timetracker.services.base import paginate, translate_db_errors

logger = logging.getLogger(__name__)


class ProjectService:
    """Business logic layer for project operations."""

    @translate_db_errors("listing projects")
    async def list_projects(
        self, db: AsyncSession, page: int = 1, size: int = 5
    ) -> PagedList[ProjectModel]:
        logger.debug("Getting page %d of projects with page size %d", page, size)
        query = select(Project).options(selectinload(Project.client))
        projects, total_count = await paginate(db, query, Project, page, size)
        return PagedList[ProjectModel](
            items=[ProjectModel.from_project(project) for project in projects],
            page=page,
            page_size=size,
            total_count=total_count,
        )

    @translate_db_errors("fetching the project")
    async def get_project(self, db: AsyncSession, project_id: int) -> ProjectModel:
        logger.debug("Getting a project with id %d", project_id)
        return ProjectModel.from_project(await self._find(db, project_id))

    @translate_db_errors("creating the project")
    async def create_project(self, db: AsyncSession, model: ProjectInputModel) -> ProjectModel:
        """
        Creates a project under an existing client.

        Raises:
            NotFoundError: clientId does not reference a client (→ 404)
        """
        logger.debug("Creating a new project with name %s", model.name)
        client = await self._find_client(db, model.client_id)

        project = Project(name=model.name, client=client)
        db.add(project)
        await db.flush()
        logger.info("Project %d created for client %d", project.id, client.id)
        return ProjectModel.from_project(project)

    @translate_db_errors("updating the project")
    async def update_project(
        self, db: AsyncSession, project_id: int, model: ProjectInputModel
    ) -> ProjectModel:
        """
        Replaces name and client of a project.

        Raises:
            NotFoundError: the project or the referenced client does not exist (→ 404)
        """
        logger.debug("Updating a project with id %d", project_id)
        project = await self._find(db, project_id)
        client = await self._find_client(db, model.client_id)

        project.name = model.name
        project.client = client
        await db.flush()
        return ProjectModel.from_project(project)

    @translate_db_errors("deleting the project")
    async def delete_project(self, db: AsyncSession, project_id: int) -> None:
        """Deletes the project together with its time entries."""
        logger.debug("Deleting a project with id %d", project_id)
        project = await db.get(Project, project_id)
        if project is None:
            raise NotFoundError(resource="project", resource_id=project_id)
        await db.delete(project)
        await db.flush()
        logger.info("Project %d deleted", project_id)

    async def _find(self, db: AsyncSession, project_id: int) -> Project:
        result = await db.execute(
            select(Project)
            .options(selectinload(Project.client))
            .where(Project.id == project_id)
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError(resource="project", resource_id=project_id)
        return project

    async def _find_client(self, db: AsyncSession, client_id: int) -> Client:
        client = await db.get(Client, client_id)
        if client is None:
            raise NotFoundError(resource="client", resource_id=client_id)
        return client


project_service = ProjectService()

"""
TimeTracker Backend - Time Entry Service
=========================================

What:  CRUD operations on time entries plus the monthly listing per user.
Who:   Called by the /api/v{version}/time-entries route handlers.

Hour rate capture:
    create_time_entry() copies User.hour_rate onto the new entry. Nothing
    writes TimeEntry.hour_rate afterwards: neither a later user update nor
    update_time_entry() (even when it moves the entry to another user).

Loading:
    Responses include user, project and client names, so every read uses
    selectinload for TimeEntry.user and TimeEntry.project -> Project.client.
"""

import logging
from datetime import MAXYEAR, date
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from timetracker.exceptions import NotFoundError
from timetracker.models.project import Project
from timetracker.models.time_entry import TimeEntry
from timetracker.models.user import User
from timetracker.schemas.common import PagedList
from timetracker.schemas.time_entry import TimeEntryInputModel, TimeEntryModel
from timetracker.services.base import paginate, translate_db_errors

logger = logging.getLogger(__name__)

_WITH_RELATIONS = (
    selectinload(TimeEntry.user),
    selectinload(TimeEntry.project).selectinload(Project.client),
)


def month_bounds(year: int, month: int) -> Tuple[date, Optional[date]]:
    """
    Returns [start, end) for a calendar month.

    `end` is the first day of the following month, or None for December of
    the last representable year.
    """
    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1) if year < MAXYEAR else None
    else:
        end = date(year, month + 1, 1)
    return start, end


class TimeEntryService:
    """Business logic layer for time entry operations."""

    @translate_db_errors("listing time entries")
    async def list_time_entries(
        self, db: AsyncSession, page: int = 1, size: int = 5
    ) -> PagedList[TimeEntryModel]:
        logger.debug("Getting page %d of time entries with page size %d", page, size)
        query = select(TimeEntry).options(*_WITH_RELATIONS)
        entries, total_count = await paginate(db, query, TimeEntry, page, size)
        return PagedList[TimeEntryModel](
            items=[TimeEntryModel.from_time_entry(entry) for entry in entries],
            page=page,
            page_size=size,
            total_count=total_count,
        )

    @translate_db_errors("listing the user's time entries")
    async def list_for_user_month(
        self, db: AsyncSession, user_id: int, year: int, month: int
    ) -> List[TimeEntryModel]:
        """
        All entries of one user dated within the given month, oldest first.

        An unknown user is not an error: the result is simply empty.
        """
        logger.debug(
            "Getting all time entries for month %d-%02d for user with id %d", year, month, user_id
        )
        start, end = month_bounds(year, month)

        query = (
            select(TimeEntry)
            .options(*_WITH_RELATIONS)
            .where(TimeEntry.user_id == user_id, TimeEntry.entry_date >= start)
        )
        if end is not None:
            query = query.where(TimeEntry.entry_date < end)
        query = query.order_by(TimeEntry.entry_date, TimeEntry.id)

        result = await db.execute(query)
        return [TimeEntryModel.from_time_entry(entry) for entry in result.scalars().all()]

    @translate_db_errors("fetching the time entry")
    async def get_time_entry(self, db: AsyncSession, entry_id: int) -> TimeEntryModel:
        logger.debug("Getting a time entry with id %d", entry_id)
        return TimeEntryModel.from_time_entry(await self._find(db, entry_id))

    @translate_db_errors("creating the time entry")
    async def create_time_entry(
        self, db: AsyncSession, model: TimeEntryInputModel
    ) -> TimeEntryModel:
        """
        Books hours for a user on a project at the user's current rate.

        Raises:
            NotFoundError: userId or projectId does not resolve (→ 404)
        """
        logger.debug(
            "Creating a new time entry for user %d, project %d and date %s",
            model.user_id,
            model.project_id,
            model.entry_date,
        )
        user = await self._find_user(db, model.user_id)
        project = await self._find_project(db, model.project_id)

        entry = TimeEntry(
            user=user,
            project=project,
            hour_rate=user.hour_rate,
            entry_date=model.entry_date,
            hours=model.hours,
            description=model.description,
        )
        db.add(entry)
        await db.flush()
        logger.info("Time entry %d created at rate %.2f", entry.id, entry.hour_rate)
        return TimeEntryModel.from_time_entry(entry)

    @translate_db_errors("updating the time entry")
    async def update_time_entry(
        self, db: AsyncSession, entry_id: int, model: TimeEntryInputModel
    ) -> TimeEntryModel:
        """
        Replaces user, project, date, hours and description of an entry.

        The captured hour rate is kept as is.

        Raises:
            NotFoundError: the entry, the user or the project does not exist (→ 404)
        """
        logger.debug("Updating a time entry with id %d", entry_id)
        entry = await self._find(db, entry_id)
        user = await self._find_user(db, model.user_id)
        project = await self._find_project(db, model.project_id)

        entry.user = user
        entry.project = project
        entry.entry_date = model.entry_date
        entry.hours = model.hours
        entry.description = model.description
        await db.flush()
        return TimeEntryModel.from_time_entry(entry)

    @translate_db_errors("deleting the time entry")
    async def delete_time_entry(self, db: AsyncSession, entry_id: int) -> None:
        logger.debug("Deleting a time entry with id %d", entry_id)
        entry = await db.get(TimeEntry, entry_id)
        if entry is None:
            raise NotFoundError(resource="time entry", resource_id=entry_id)
        await db.delete(entry)
        await db.flush()
        logger.info("Time entry %d deleted", entry_id)

    async def _find(self, db: AsyncSession, entry_id: int) -> TimeEntry:
        result = await db.execute(
            select(TimeEntry).options(*_WITH_RELATIONS).where(TimeEntry.id == entry_id)
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError(resource="time entry", resource_id=entry_id)
        return entry

    async def _find_user(self, db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

    async def _find_project(self, db: AsyncSession, project_id: int) -> Project:
        result = await db.execute(
            select(Project)
            .options(selectinload(Project.client))
            .where(Project.id == project_id)
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError(resource="project", resource_id=project_id)
        return project


time_entry_service = TimeEntryService()

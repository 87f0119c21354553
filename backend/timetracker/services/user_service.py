"""
TimeTracker Backend - User Service
===================================

What:  CRUD operations on users.
Who:   Called by the /api/v{version}/users route handlers.

Updating a user's hour rate affects only time entries created afterwards;
existing entries keep the rate they captured.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.exceptions import NotFoundError
from timetracker.models.user import User
from timetracker.schemas.common import PagedList
from timetracker.schemas.user import UserInputModel, UserModel
from timetracker.services.base import paginate, translate_db_errors

logger = logging.getLogger(__name__)


class UserService:
    """Business logic layer for user operations."""

    @translate_db_errors("listing users")
    async def list_users(self, db: AsyncSession, page: int = 1, size: int = 5) -> PagedList[UserModel]:
        logger.debug("Getting page %d of users with page size %d", page, size)
        users, total_count = await paginate(db, select(User), User, page, size)
        return PagedList[UserModel](
            items=[UserModel.model_validate(user) for user in users],
            page=page,
            page_size=size,
            total_count=total_count,
        )

    @translate_db_errors("fetching the user")
    async def get_user(self, db: AsyncSession, user_id: int) -> UserModel:
        logger.debug("Getting a user with id %d", user_id)
        return UserModel.model_validate(await self._find(db, user_id))

    @translate_db_errors("creating the user")
    async def create_user(self, db: AsyncSession, model: UserInputModel) -> UserModel:
        logger.debug("Creating a new user with name %s", model.name)
        user = User(name=model.name, hour_rate=float(model.hour_rate))
        db.add(user)
        await db.flush()
        logger.info("User %d created", user.id)
        return UserModel.model_validate(user)

    @translate_db_errors("updating the user")
    async def update_user(self, db: AsyncSession, user_id: int, model: UserInputModel) -> UserModel:
        logger.debug("Updating a user with id %d", user_id)
        user = await self._find(db, user_id)
        user.name = model.name
        user.hour_rate = float(model.hour_rate)
        await db.flush()
        return UserModel.model_validate(user)

    @translate_db_errors("deleting the user")
    async def delete_user(self, db: AsyncSession, user_id: int) -> None:
        """Deletes the user together with all of their time entries."""
        logger.debug("Deleting a user with id %d", user_id)
        user = await self._find(db, user_id)
        await db.delete(user)
        await db.flush()
        logger.info("User %d deleted", user_id)

    async def _find(self, db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user


user_service = UserService()

"""
TimeTracker Backend - Service Unit Tests
=========================================

What:  Tests for the resource services in isolation.
How:   Uses the mock DB session from conftest (no real database) for
       not-found and error translation paths; month bounds are pure.

What we test:
    ✅ Missing rows raise NotFoundError before anything is written
    ✅ Create copies the user's hour rate onto the time entry
    ✅ SQLAlchemy failures surface as DatabaseError
    ✅ Month bounds, including December and the last representable year
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from timetracker.exceptions import DatabaseError, NotFoundError
from timetracker.models import Client, Project, User
from timetracker.schemas.client import ClientInputModel
from timetracker.schemas.project import ProjectInputModel
from timetracker.schemas.time_entry import TimeEntryInputModel
from timetracker.schemas.user import UserInputModel
from timetracker.services.client_service import ClientService
from timetracker.services.project_service import ProjectService
from timetracker.services.time_entry_service import TimeEntryService, month_bounds
from timetracker.services.user_service import UserService


def _scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestUserService:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_get_missing_user_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_user(mock_db_session, 42)

        assert exc_info.value.context["resource_id"] == "42"

    @pytest.mark.asyncio
    async def test_update_overwrites_fields(self, mock_db_session):
        user = User(id=7, name="Old", hour_rate=20)
        mock_db_session.get.return_value = user

        result = await self.service.update_user(
            mock_db_session, 7, UserInputModel(name="New", hour_rate=35)
        )

        assert result.name == "New"
        assert result.hour_rate == 35
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing_user_does_not_delete(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.delete_user(mock_db_session, 1)

        mock_db_session.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_database_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.get.side_effect = OperationalError("SELECT", {}, Exception("locked"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.get_user(mock_db_session, 1)

        assert exc_info.value.context["error_type"] == "OperationalError"


class TestClientService:

    @pytest.mark.asyncio
    async def test_create_adds_and_flushes(self, mock_db_session):
        async def assign_id():
            mock_db_session.add.call_args.args[0].id = 3

        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        result = await ClientService().create_client(mock_db_session, ClientInputModel(name="Acme"))

        assert result.id == 3
        assert result.name == "Acme"
        mock_db_session.add.assert_called_once()


class TestProjectService:

    @pytest.mark.asyncio
    async def test_create_for_missing_client_adds_nothing(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await ProjectService().create_project(
                mock_db_session, ProjectInputModel(name="Site", client_id=9)
            )

        assert exc_info.value.context["resource"] == "client"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_missing_project_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _scalar_result(None)

        with pytest.raises(NotFoundError) as exc_info:
            await ProjectService().update_project(
                mock_db_session, 5, ProjectInputModel(name="Site", client_id=1)
            )

        assert exc_info.value.context["resource"] == "project"


class TestTimeEntryService:

    def setup_method(self):
        self.service = TimeEntryService()
        self.model = TimeEntryInputModel(
            user_id=1,
            project_id=2,
            entry_date=date(2022, 9, 1),
            hours=5,
            description="Work",
        )

    @pytest.mark.asyncio
    async def test_create_copies_user_hour_rate(self, mock_db_session):
        user = User(id=1, name="John Doe", hour_rate=25)
        project = Project(id=2, name="Project 1", client=Client(id=1, name="Client 1"))
        mock_db_session.get.return_value = user
        mock_db_session.execute.return_value = _scalar_result(project)

        async def assign_id():
            mock_db_session.add.call_args.args[0].id = 11

        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        result = await self.service.create_time_entry(mock_db_session, self.model)

        assert result.id == 11
        assert result.hour_rate == 25
        assert result.user_name == "John Doe"
        assert result.client_name == "Client 1"

    @pytest.mark.asyncio
    async def test_create_for_missing_user_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.create_time_entry(mock_db_session, self.model)

        assert exc_info.value.context["resource"] == "user"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_for_missing_project_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = User(id=1, name="John Doe", hour_rate=25)
        mock_db_session.execute.return_value = _scalar_result(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.create_time_entry(mock_db_session, self.model)

        assert exc_info.value.context["resource"] == "project"


class TestMonthBounds:

    @pytest.mark.parametrize(
        "year, month, expected",
        [
            (2022, 9, (date(2022, 9, 1), date(2022, 10, 1))),
            (2022, 12, (date(2022, 12, 1), date(2023, 1, 1))),
            (2024, 2, (date(2024, 2, 1), date(2024, 3, 1))),
            (9999, 12, (date(9999, 12, 1), None)),
        ],
    )
    def test_bounds(self, year, month, expected):
        assert month_bounds(year, month) == expected

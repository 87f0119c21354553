"""Time entry request/response schemas."""

from datetime import date

from pydantic import Field

from timetracker.models.time_entry import TimeEntry
from timetracker.schemas.common import ApiModel, Description, InputModel

MAX_HOURS_PER_ENTRY = 24


class TimeEntryModel(ApiModel):
    id: int = Field(description="Time entry id")
    user_id: int
    user_name: str
    project_id: int
    project_name: str
    client_name: str
    entry_date: date = Field(description="Day the hours were worked")
    hours: int
    hour_rate: float = Field(description="User's hourly rate when the entry was created")
    description: str

    @classmethod
    def from_time_entry(cls, entry: TimeEntry) -> "TimeEntryModel":
        """Requires `entry.user`, `entry.project` and `entry.project.client` to be loaded."""
        return cls(
            id=entry.id,
            user_id=entry.user.id,
            user_name=entry.user.name,
            project_id=entry.project.id,
            project_name=entry.project.name,
            client_name=entry.project.client.name,
            entry_date=entry.entry_date,
            hours=entry.hours,
            hour_rate=entry.hour_rate,
            description=entry.description,
        )


class TimeEntryInputModel(InputModel):
    """
    A time entry to add or modify.

    The hourly rate is not part of the input: it is copied from the user
    when the entry is created.
    """

    user_id: int = Field(gt=0, description="Id of an existing user")
    project_id: int = Field(gt=0, description="Id of an existing project")
    entry_date: date = Field(description="Day the hours were worked (ISO 8601 date)")
    hours: int = Field(gt=0, le=MAX_HOURS_PER_ENTRY, description="Hours worked, 1-24")
    description: Description = Field(description="What was done (1-1000 characters)")

"""
TimeTracker Backend - Project Model
====================================

What:  ORM model for the `projects` table.
How:   Belongs to exactly one client (`client_id`, indexed). Removed
       together with its client; removes its own time entries in turn.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timetracker.database import Base, IdType

if TYPE_CHECKING:
    from timetracker.models.client import Client
    from timetracker.models.time_entry import TimeEntry


class Project(Base):
    """A piece of work for a client that hours are booked against."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    client_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    client: Mapped["Client"] = relationship(back_populates="projects")
    time_entries: Mapped[List["TimeEntry"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}', client_id={self.client_id})>"

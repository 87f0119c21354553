"""
TimeTracker Backend - Time Entry Model
=======================================

What:  ORM model for the `time_entries` table.
How:   References a user and a project; deleted with either of them.

Columns worth noting:
    hour_rate: snapshot of User.hour_rate taken when the entry is created.
               It is never recomputed, so invoices for past months stay
               stable after a rate change.
    entry_date: the day the hours were worked. Indexed together with
               user_id for the "entries of a user in a month" query.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timetracker.database import Base, IdType

if TYPE_CHECKING:
    from timetracker.models.project import Project
    from timetracker.models.user import User


class TimeEntry(Base):
    """Hours a user worked on a project on one day."""

    __tablename__ = "time_entries"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    project_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours: Mapped[int] = mapped_column(Integer, nullable=False)
    hour_rate: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)

    user: Mapped["User"] = relationship(back_populates="time_entries")
    project: Mapped["Project"] = relationship(back_populates="time_entries")

    __table_args__ = (
        Index("idx_time_entries_user_date", "user_id", "entry_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<TimeEntry(id={self.id}, user_id={self.user_id}, "
            f"project_id={self.project_id}, entry_date='{self.entry_date}', hours={self.hours})>"
        )

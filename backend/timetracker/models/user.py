"""
TimeTracker Backend - User Model
=================================

What:  ORM model for the `users` table.
How:   `hour_rate` is the user's current rate. Time entries copy it when
       they are created, so changing it later does not touch past entries.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timetracker.database import Base, IdType

if TYPE_CHECKING:
    from timetracker.models.time_entry import TimeEntry


class User(Base):
    """A person who books hours."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    hour_rate: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    time_entries: Mapped[List["TimeEntry"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}', hour_rate={self.hour_rate})>"

"""
TimeTracker Backend - Client Model
===================================

What:  ORM model for the `clients` table.
How:   A client owns projects. Deleting a client deletes its projects (and,
       through them, their time entries) via ON DELETE CASCADE.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timetracker.database import Base, IdType

if TYPE_CHECKING:
    from timetracker.models.project import Project


class Client(Base):
    """A customer that projects are billed to."""

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # passive_deletes: the database removes child rows, the ORM never loads them
    projects: Mapped[List["Project"]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.name}')>"

"""
Demo data inserted on startup when the store is empty.

Three projects under two clients, two users and four time entries on
2022-09-01. Entry rates are copied from the users, the same way
TimeEntryService.create_time_entry() captures them.
"""

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.models import Client, Project, TimeEntry, User

logger = logging.getLogger(__name__)

SEED_DATE = date(2022, 9, 1)


async def seed_demo_data(db: AsyncSession) -> bool:
    """
    Inserts the demo rows unless any client already exists.

    Returns True when rows were inserted. The caller commits.
    """
    existing = await db.scalar(select(func.count()).select_from(Client))
    if existing:
        logger.info("Store already has %d clients, skipping demo data", existing)
        return False

    client_1 = Client(name="Client 1")
    client_2 = Client(name="Client 2")

    john = User(name="John Doe", hour_rate=25)
    joan = User(name="Joan Doe", hour_rate=30)

    project_1 = Project(name="Project 1", client=client_1)
    project_2 = Project(name="Project 2", client=client_1)
    project_3 = Project(name="Project 3", client=client_2)

    bookings = [
        (john, project_1, 5),
        (john, project_2, 2),
        (john, project_3, 1),
        (joan, project_3, 8),
    ]
    entries = [
        TimeEntry(
            user=user,
            project=project,
            entry_date=SEED_DATE,
            hours=hours,
            hour_rate=user.hour_rate,
            description=f"Time entry description {number}",
        )
        for number, (user, project, hours) in enumerate(bookings, start=1)
    ]

    db.add_all([client_1, client_2, john, joan, project_1, project_2, project_3, *entries])
    await db.flush()
    logger.info("Inserted demo data: 2 clients, 2 users, 3 projects, %d time entries", len(entries))
    return True

"""
Shared plumbing for the resource services: offset pagination and
translation of SQLAlchemy failures into DatabaseError.
"""

import functools
import logging
from typing import Any, Awaitable, Callable, List, Tuple, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.exceptions import DatabaseError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def translate_db_errors(action: str) -> Callable[[F], F]:
    """
    Wraps an async service method so SQLAlchemy errors surface as DatabaseError.

    Application exceptions (NotFoundError and friends) pass through untouched.
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await method(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error("Database error while %s: %s", action, str(e), exc_info=True)
                raise DatabaseError(
                    message=f"Could not complete {action}. Please try again.",
                    context={"error_type": type(e).__name__},
                ) from e

        return wrapper  # type: ignore[return-value]

    return decorator


async def paginate(
    db: AsyncSession,
    query: Select,
    model: type,
    page: int,
    size: int,
) -> Tuple[List[Any], int]:
    """
    Runs `query` for one page and counts every row of `model`.

    Offset is (page - 1) * size; rows are ordered by primary key so pages do
    not overlap. Returns (rows, total_count).
    """
    rows = await db.execute(
        query.order_by(model.id).offset((page - 1) * size).limit(size)
    )
    total_count = await db.scalar(select(func.count()).select_from(model))
    return list(rows.scalars().all()), total_count or 0

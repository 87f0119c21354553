"""User request/response schemas."""

from decimal import Decimal

from pydantic import Field

from timetracker.schemas.common import ApiModel, InputModel, Name


class UserModel(ApiModel):
    id: int = Field(description="User id")
    name: str = Field(description="User name")
    hour_rate: float = Field(description="Current hourly rate")


class UserInputModel(InputModel):
    """A user to add or modify."""

    name: Name = Field(description="User name (1-100 characters)")
    # At most two decimals: the column is NUMERIC(10, 2)
    hour_rate: Decimal = Field(
        gt=0,
        lt=1000,
        decimal_places=2,
        description="Hourly rate, greater than 0 and less than 1000, at most 2 decimals",
    )

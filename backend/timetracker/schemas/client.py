"""Client request/response schemas."""

from pydantic import Field

from timetracker.schemas.common import ApiModel, InputModel, Name


class ClientModel(ApiModel):
    id: int = Field(description="Client id")
    name: str = Field(description="Client name")


class ClientInputModel(InputModel):
    """A client to add or modify."""

    name: Name = Field(description="Client name (1-100 characters)")

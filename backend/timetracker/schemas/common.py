"""
TimeTracker Backend - Shared Schema Building Blocks
====================================================

What:  Base classes and field types shared by every resource schema, plus
       the pagination wrapper and the error/health envelopes.

Wire format:
    Responses use camelCase keys (`hourRate`, `pageSize`, `totalCount`).
    Request bodies are matched case-insensitively against the field names,
    so `{"Name": ..., "HourRate": ...}`, `{"name": ..., "hourRate": ...}`
    and `{"name": ..., "hour_rate": ...}` all bind to the same model.
"""

from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000


class ApiModel(BaseModel):
    """Base for every schema: camelCase aliases, buildable from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class InputModel(ApiModel):
    """Base for request bodies: unknown key casing is folded onto field aliases."""

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        lookup: Dict[str, str] = {}
        for name, field in cls.model_fields.items():
            alias = field.alias or name
            lookup[name.lower()] = alias
            lookup[alias.lower()] = alias
        return {
            (lookup.get(key.lower(), key) if isinstance(key, str) else key): value
            for key, value in data.items()
        }


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


# Non-empty, 1-100 characters, not just whitespace
Name = Annotated[str, Field(min_length=1, max_length=NAME_MAX_LENGTH), AfterValidator(_not_blank)]

Description = Annotated[
    str, Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH), AfterValidator(_not_blank)
]

T = TypeVar("T")


class PagedList(ApiModel, Generic[T]):
    """
    One page of a resource collection.

    `items` holds at most `pageSize` entries: fewer on the last page, none
    past the end. `totalCount` is the size of the whole collection.
    """

    items: List[T] = Field(description="Items on this page")
    page: int = Field(description="1-based page number")
    page_size: int = Field(description="Requested page size")
    total_count: int = Field(description="Total number of items across all pages")


class ErrorResponse(ApiModel):
    """
    Error envelope returned by every exception handler.

    Example (validation failure):
        {
            "error": "validation_error",
            "message": "One or more validation errors occurred.",
            "details": {"errors": {"name": ["String should have at least 1 character"]}},
            "requestId": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(ApiModel):
    """Health check payload for load balancers and monitoring."""

    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

"""Project request/response schemas."""

from pydantic import Field

from timetracker.models.project import Project
from timetracker.schemas.common import ApiModel, InputModel, Name


class ProjectModel(ApiModel):
    id: int = Field(description="Project id")
    name: str = Field(description="Project name")
    client_id: int = Field(description="Id of the client the project belongs to")
    client_name: str = Field(description="Name of the client the project belongs to")

    @classmethod
    def from_project(cls, project: Project) -> "ProjectModel":
        """Requires `project.client` to be loaded."""
        return cls(
            id=project.id,
            name=project.name,
            client_id=project.client.id,
            client_name=project.client.name,
        )


class ProjectInputModel(InputModel):
    """A project to add or modify."""

    name: Name = Field(description="Project name (1-100 characters)")
    client_id: int = Field(gt=0, description="Id of an existing client")

"""
TimeTracker Backend - Demo Authentication
==========================================

What:  FastAPI dependencies that resolve the calling principal and check
       its roles.
How:   There is no identity provider. Every request is signed in as the
       configured demo principal (settings.demo_user_name, with
       settings.demo_user_roles). A bearer token, when sent, is recorded on
       the principal but never validated.

Usage:
    router = APIRouter(dependencies=[Depends(get_current_principal)])

    @router.post("/clients", dependencies=[Depends(require_admin)])
    async def create_client(...): ...

Outcomes:
    - auth_require_token set and no bearer header → 401 (AuthenticationError)
    - principal holds none of the required roles   → 403 (AuthorizationError)
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from timetracker.config import settings
from timetracker.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

ADMIN_ROLE = "Admin"

# auto_error=False: a missing header is decided below, not by FastAPI
bearer_scheme = HTTPBearer(auto_error=False, description="Any value is accepted")


@dataclass(frozen=True)
class Principal:
    """The identity a request runs as."""

    name: str
    roles: List[str] = field(default_factory=list)
    token: Optional[str] = None

    def has_any_role(self, roles: List[str]) -> bool:
        return any(role in self.roles for role in roles)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    Resolves the principal for the current request.

    Raises:
        AuthenticationError: a bearer token is required and none was sent
    """
    token = credentials.credentials if credentials else None
    if token is None and settings.auth_require_token:
        raise AuthenticationError()

    return Principal(
        name=settings.demo_user_name,
        roles=settings.demo_user_roles_list,
        token=token,
    )


class RoleChecker:
    """
    Dependency factory for checking principal roles.

    Usage: Depends(RoleChecker(["Admin", "Manager"]))
    """

    def __init__(self, allowed_roles: List[str]):
        self.allowed_roles = allowed_roles

    def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_any_role(self.allowed_roles):
            logger.warning(
                "Principal %s denied: requires one of %s", principal.name, self.allowed_roles
            )
            raise AuthorizationError(required_roles=self.allowed_roles)
        return principal


require_admin = RoleChecker([ADMIN_ROLE])

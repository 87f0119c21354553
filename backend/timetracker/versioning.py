"""
URL-segment API versioning.

Routers are mounted under /api/v{version}. Versions 1 and 2 are served by
the same handlers; the `api_version` dependency rejects anything else.
"""

from typing import Tuple

from fastapi import Path

from timetracker.exceptions import UnsupportedApiVersionError

SUPPORTED_API_VERSIONS: Tuple[int, ...] = (1, 2)

# Value of the api-supported-versions response header
SUPPORTED_VERSIONS_HEADER = ", ".join(f"{v}.0" for v in SUPPORTED_API_VERSIONS)

API_PREFIX = "/api/v{version}"


def parse_api_version(raw: str) -> int:
    """
    Accepts "1", "2", "1.0" and "2.0".

    Raises:
        UnsupportedApiVersionError: anything else
    """
    major, _, minor = raw.partition(".")
    if major.isdigit() and (minor == "" or minor == "0"):
        version = int(major)
        if version in SUPPORTED_API_VERSIONS:
            return version
    raise UnsupportedApiVersionError(
        requested=raw, supported=[f"{v}.0" for v in SUPPORTED_API_VERSIONS]
    )


async def api_version(
    version: str = Path(description="API version, 1 or 2"),
) -> int:
    """Path dependency shared by every versioned router."""
    return parse_api_version(version)


def resource_location(version: int, resource: str, resource_id: int) -> str:
    """Builds the Location header value for a newly created resource."""
    return f"/api/v{version}/{resource}/{resource_id}"

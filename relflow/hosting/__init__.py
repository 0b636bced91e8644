"""Hosting providers (GitHub, Gitee) behind one HostingProvider protocol."""

from __future__ import annotations

from relflow.core.result import Err, Ok, Result
from relflow.hosting.base import (
    PLATFORMS,
    HostingError,
    HostingProvider,
    HostOrganization,
    HostRepository,
    HostUser,
    Platform,
)
from relflow.hosting.gitee import GiteeProvider
from relflow.hosting.github import GitHubProvider
from relflow.hosting.http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    "PLATFORMS",
    "GitHubProvider",
    "GiteeProvider",
    "HostOrganization",
    "HostRepository",
    "HostUser",
    "HostingError",
    "HostingProvider",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "Platform",
    "RealHttpClient",
    "create_provider",
]


def create_provider(
    platform: str, *, token: str, http: HttpClient
) -> Result[HostingProvider, HostingError]:
    """Instantiate the provider named by a persisted platform choice."""
    match platform:
        case "github":
            return Ok(GitHubProvider(token=token, http=http))
        case "gitee":
            return Ok(GiteeProvider(token=token, http=http))
        case _:
            return Err(
                HostingError(
                    provider=platform,
                    message=f"unknown hosting platform: {platform!r}",
                    hint=f"expected one of: {', '.join(PLATFORMS)}",
                )
            )

"""Hosting provider contract and shared payload handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from relflow.core.result import Err, Ok, Result
from relflow.core.structured import as_obj_list, as_str_dict, get_str
from relflow.hosting.http import HttpError

Platform = Literal["github", "gitee"]
PLATFORMS: tuple[Platform, ...] = ("github", "gitee")


@dataclass(frozen=True, slots=True)
class HostingError:
    provider: str
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class HostUser:
    login: str


@dataclass(frozen=True, slots=True)
class HostOrganization:
    login: str


@dataclass(frozen=True, slots=True)
class HostRepository:
    owner: str
    name: str
    ssh_url: str | None = None


@runtime_checkable
class HostingProvider(Protocol):
    """Remote hosting service where the project repository lives."""

    @property
    def platform(self) -> Platform: ...

    def token_url(self) -> str:
        """Page where the user can generate an API token."""
        ...

    def get_user(self) -> Result[HostUser, HostingError]: ...

    def get_organizations(
        self, user: HostUser
    ) -> Result[tuple[HostOrganization, ...], HostingError]: ...

    def get_repository(self, owner: str, name: str) -> Result[HostRepository | None, HostingError]:
        """Ok(None) when the repository does not exist."""
        ...

    def create_repository(self, name: str) -> Result[HostRepository, HostingError]: ...

    def create_organization_repository(
        self, name: str, owner: str
    ) -> Result[HostRepository, HostingError]: ...

    def clone_url(self, owner: str, name: str) -> str: ...


def http_failure(provider: str, action: str, error: HttpError) -> HostingError:
    hint = None
    if error.status in (401, 403):
        hint = "token rejected; rerun with --refresh-token"
    return HostingError(provider=provider, message=f"{action} failed: {error}", hint=hint)


def parse_user(provider: str, payload: object) -> Result[HostUser, HostingError]:
    data = as_str_dict(payload)
    login = get_str(data, "login") if data is not None else None
    if login is None:
        return Err(HostingError(provider=provider, message="user payload has no login"))
    return Ok(HostUser(login=login))


def parse_organizations(
    provider: str, payload: object
) -> Result[tuple[HostOrganization, ...], HostingError]:
    items = as_obj_list(payload)
    if items is None:
        return Err(HostingError(provider=provider, message="organizations payload is not a list"))
    orgs: list[HostOrganization] = []
    for item in items:
        d = as_str_dict(item)
        if d is None:
            continue
        login = get_str(d, "login")
        if login is not None:
            orgs.append(HostOrganization(login=login))
    return Ok(tuple(orgs))


def parse_repository(
    provider: str, payload: object, *, owner: str, name: str
) -> Result[HostRepository, HostingError]:
    data = as_str_dict(payload)
    if data is None:
        message = f"unexpected repository payload: {owner}/{name}"
        return Err(HostingError(provider=provider, message=message))
    owner_table = as_str_dict(data.get("owner"))
    return Ok(
        HostRepository(
            owner=(get_str(owner_table, "login") if owner_table else None) or owner,
            name=get_str(data, "name") or name,
            ssh_url=get_str(data, "ssh_url"),
        )
    )

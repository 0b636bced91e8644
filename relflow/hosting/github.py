"""GitHub REST API provider."""

from __future__ import annotations

from relflow.core.result import Err, Ok, Result
from relflow.hosting.base import (
    HostingError,
    HostOrganization,
    HostRepository,
    HostUser,
    Platform,
    http_failure,
    parse_organizations,
    parse_repository,
    parse_user,
)
from relflow.hosting.http import HttpClient

GITHUB_API = "https://api.github.com"


class GitHubProvider:
    """Talks to api.github.com with a personal access token."""

    def __init__(self, *, token: str, http: HttpClient, api_url: str = GITHUB_API) -> None:
        self._token = token
        self._http = http
        self._api = api_url.rstrip("/")

    @property
    def platform(self) -> Platform:
        return "github"

    def token_url(self) -> str:
        return "https://github.com/settings/tokens"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self._token}",
            "Accept": "application/vnd.github+json",
        }

    def get_user(self) -> Result[HostUser, HostingError]:
        url = f"{self._api}/user"
        result = self._http.request_json("GET", url, headers=self._headers())
        if isinstance(result, Err):
            return Err(http_failure("github", "get user", result.error))
        return parse_user("github", result.value)

    def get_organizations(
        self, user: HostUser
    ) -> Result[tuple[HostOrganization, ...], HostingError]:
        url = f"{self._api}/user/orgs"
        result = self._http.request_json("GET", url, headers=self._headers())
        if isinstance(result, Err):
            return Err(http_failure("github", f"list organizations of {user.login}", result.error))
        return parse_organizations("github", result.value)

    def get_repository(self, owner: str, name: str) -> Result[HostRepository | None, HostingError]:
        url = f"{self._api}/repos/{owner}/{name}"
        result = self._http.request_json("GET", url, headers=self._headers())
        if isinstance(result, Err):
            if result.error.is_not_found:
                return Ok(None)
            return Err(http_failure("github", f"get repository {owner}/{name}", result.error))
        return parse_repository("github", result.value, owner=owner, name=name)

    def create_repository(self, name: str) -> Result[HostRepository, HostingError]:
        user = self.get_user()
        if isinstance(user, Err):
            return user
        url = f"{self._api}/user/repos"
        result = self._http.request_json("POST", url, headers=self._headers(), body={"name": name})
        if isinstance(result, Err):
            return Err(http_failure("github", f"create repository {name}", result.error))
        return parse_repository("github", result.value, owner=user.value.login, name=name)

    def create_organization_repository(
        self, name: str, owner: str
    ) -> Result[HostRepository, HostingError]:
        url = f"{self._api}/orgs/{owner}/repos"
        result = self._http.request_json("POST", url, headers=self._headers(), body={"name": name})
        if isinstance(result, Err):
            return Err(http_failure("github", f"create repository {owner}/{name}", result.error))
        return parse_repository("github", result.value, owner=owner, name=name)

    def clone_url(self, owner: str, name: str) -> str:
        return f"git@github.com:{owner}/{name}.git"

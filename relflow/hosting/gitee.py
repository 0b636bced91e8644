"""Gitee v5 API provider.

Gitee takes the token as an ``access_token`` parameter rather than a header,
and lists organizations per user login.
"""

from __future__ import annotations

from urllib.parse import urlencode

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

GITEE_API = "https://gitee.com/api/v5"


class GiteeProvider:
    def __init__(self, *, token: str, http: HttpClient, api_url: str = GITEE_API) -> None:
        self._token = token
        self._http = http
        self._api = api_url.rstrip("/")

    @property
    def platform(self) -> Platform:
        return "gitee"

    def token_url(self) -> str:
        return "https://gitee.com/personal_access_tokens"

    def _url(self, path: str, **params: str) -> str:
        query = urlencode({"access_token": self._token, **params})
        return f"{self._api}{path}?{query}"

    def get_user(self) -> Result[HostUser, HostingError]:
        result = self._http.request_json("GET", self._url("/user"))
        if isinstance(result, Err):
            return Err(http_failure("gitee", "get user", result.error))
        return parse_user("gitee", result.value)

    def get_organizations(
        self, user: HostUser
    ) -> Result[tuple[HostOrganization, ...], HostingError]:
        url = self._url(f"/users/{user.login}/orgs", page="1", per_page="100")
        result = self._http.request_json("GET", url)
        if isinstance(result, Err):
            return Err(http_failure("gitee", f"list organizations of {user.login}", result.error))
        return parse_organizations("gitee", result.value)

    def get_repository(self, owner: str, name: str) -> Result[HostRepository | None, HostingError]:
        result = self._http.request_json("GET", self._url(f"/repos/{owner}/{name}"))
        if isinstance(result, Err):
            if result.error.is_not_found:
                return Ok(None)
            return Err(http_failure("gitee", f"get repository {owner}/{name}", result.error))
        return parse_repository("gitee", result.value, owner=owner, name=name)

    def create_repository(self, name: str) -> Result[HostRepository, HostingError]:
        user = self.get_user()
        if isinstance(user, Err):
            return user
        result = self._http.request_json("POST", self._url("/user/repos"), body={"name": name})
        if isinstance(result, Err):
            return Err(http_failure("gitee", f"create repository {name}", result.error))
        return parse_repository("gitee", result.value, owner=user.value.login, name=name)

    def create_organization_repository(
        self, name: str, owner: str
    ) -> Result[HostRepository, HostingError]:
        url = self._url(f"/orgs/{owner}/repos")
        result = self._http.request_json("POST", url, body={"name": name})
        if isinstance(result, Err):
            return Err(http_failure("gitee", f"create repository {owner}/{name}", result.error))
        return parse_repository("gitee", result.value, owner=owner, name=name)

    def clone_url(self, owner: str, name: str) -> str:
        return f"git@gitee.com:{owner}/{name}.git"

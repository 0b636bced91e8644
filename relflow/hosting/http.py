"""HTTP client abstraction for hosting provider APIs.

- HttpClient: protocol for JSON requests (injectable for tests)
- RealHttpClient: implementation using urllib
- MockHttpClient: canned responses keyed by (method, url)
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from relflow.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


@runtime_checkable
class HttpClient(Protocol):
    def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, object] | None = None,
    ) -> Result[object, HttpError]:
        """Send a request and decode the JSON response body.

        Returns:
            Ok with the decoded payload (None for an empty body), or Err
        """
        ...


class RealHttpClient:
    """HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 5.0, user_agent: str = "relflow") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, object] | None = None,
    ) -> Result[object, HttpError]:
        all_headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        all_headers.update(headers or {})
        data: bytes | None = None
        if body is not None:
            data = json.dumps(dict(body)).encode("utf-8")
            all_headers["Content-Type"] = "application/json"

        try:
            req = urllib.request.Request(url, data=data, headers=all_headers, method=method)
            with urllib.request.urlopen(
                req, timeout=self.timeout, context=self._ssl_context
            ) as response:
                raw: bytes = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not raw.strip():
            return Ok(None)
        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))


class MockHttpClient:
    """HTTP client returning canned responses.

    Usage:
        client = MockHttpClient()
        client.set_response("GET", "https://api.github.com/user", {"login": "me"})
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], object | HttpError] = {}
        self.calls: list[tuple[str, str, dict[str, str], dict[str, object] | None]] = []

    def set_response(self, method: str, url: str, response: object | HttpError) -> None:
        self._responses[(method.upper(), url)] = response

    def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Mapping[str, object] | None = None,
    ) -> Result[object, HttpError]:
        self.calls.append(
            (method.upper(), url, dict(headers or {}), dict(body) if body is not None else None)
        )
        key = (method.upper(), url)
        if key not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not Found (mock)"))
        response = self._responses[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

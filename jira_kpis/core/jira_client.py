"""Jira API client wrapper (REST v2 search, total-count only)."""

from __future__ import annotations

from typing import Any

import requests
from jira import JIRA, JIRAError
from jira.resilientsession import ResilientSession

from .config import REQUEST_TIMEOUT_SECONDS, SEARCH_PATH
from .errors import DecodeError, TransportError
from .models import ServerEndpoint


class JiraAPI:
    def __init__(
        self,
        server: str,
        username: str = "",
        password: str = "",
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.server = server.rstrip("/")
        self.username = username
        self._password = password
        self.timeout = timeout
        # Built lazily so constructing a client never touches the network
        self._session = session
        self.client: JIRA | None = None

    @classmethod
    def from_endpoint(cls, endpoint: ServerEndpoint, **kwargs: Any) -> JiraAPI:
        return cls(endpoint.url, endpoint.username, endpoint.password, **kwargs)

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            basic_auth = (self.username, self._password) if self.username else None
            try:
                self.client = JIRA(
                    server=self.server,
                    basic_auth=basic_auth,
                    options={"rest_api_version": "2"},
                    get_server_info=False,
                    max_retries=0,
                    timeout=self.timeout,
                )
            except JIRAError as exc:
                raise TransportError(f"Failed to connect to {self.server}: {exc}") from exc
            self._session = self.client._session
        return self._session

    def search_url(self) -> str:
        return f"{self.server}{SEARCH_PATH}"

    def request_options(self, session: requests.Session) -> dict[str, Any]:
        # ResilientSession applies the timeout given to JIRA(...) on every request
        if isinstance(session, ResilientSession):
            return {}
        return {"timeout": self.timeout}

    def fetch_json(self, params: dict[str, Any]) -> Any:
        """GET the search endpoint and return the decoded JSON body."""
        session = self.session
        try:
            resp = session.get(self.search_url(), params=params, **self.request_options(session))
        except JIRAError as exc:
            raise TransportError(f"Search failed on {self.server}: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"Search request to {self.server} failed: {exc}") from exc
        if not 200 <= resp.status_code < 300:
            raise TransportError(f"Search failed {resp.status_code}: {resp.text[:200]}")
        try:
            return resp.json()
        except ValueError as exc:
            raise DecodeError(f"Search response from {self.server} is not JSON: {exc}") from exc

    def count(self, jql: str) -> int:
        """Run ``jql`` and return the server-reported ``total`` (no pagination, no retry)."""
        data = self.fetch_json({"jql": jql, "maxResults": 0})
        return extract_total(data)


def extract_total(data: Any) -> int:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
    if "total" not in data:
        raise DecodeError(f"Response has no 'total' field (keys: {sorted(data)[:10]})")
    total = data["total"]
    # bool is an int subclass; reject it explicitly
    if isinstance(total, bool) or not isinstance(total, (int, float)):
        raise DecodeError(f"'total' is not numeric: {total!r}")
    if isinstance(total, float) and not total.is_integer():
        raise DecodeError(f"'total' is not a whole number: {total!r}")
    if total < 0:
        raise DecodeError(f"'total' is negative: {total!r}")
    return int(total)

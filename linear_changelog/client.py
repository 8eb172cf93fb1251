"""Linear GraphQL API client.

Usage:
    client = LinearClient(url="https://api.linear.app/graphql", api_key="lin_api_xxx")
    data   = client.execute(build_query(start, end))
"""

from typing import Any

import requests

from linear_changelog.query import QuerySpec

DEFAULT_URL = "https://api.linear.app/graphql"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class LinearClientError(Exception):
    """Base exception for all client errors."""


class AuthenticationError(LinearClientError):
    """Raised on HTTP 401/403 - invalid or revoked API key."""


class NetworkError(LinearClientError):
    """Raised on connection timeout or unreachable server."""


class QueryError(LinearClientError):
    """Raised when the GraphQL response carries a non-empty ``errors`` list."""

    def __init__(self, errors: list) -> None:
        self.errors = errors
        super().__init__("; ".join(_error_message(e) for e in errors))


def _error_message(error: Any) -> str:
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return str(error)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class LinearClient:
    """Thin wrapper around the Linear GraphQL endpoint."""

    def __init__(self, url: str = DEFAULT_URL, api_key: str = "", timeout: int = 30) -> None:
        self.url = url
        self._timeout = timeout
        self._session = requests.Session()
        # Linear personal API keys go into the header as-is, without "Bearer"
        self._session.headers.update({
            "Authorization":   api_key,
            "Accept-Encoding": "gzip",
            "Content-Type":    "application/json",
        })

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def execute(self, query: QuerySpec) -> dict:
        """Run *query* and return the ``data`` object of the response.

        Raises:
            AuthenticationError: HTTP 401 / 403
            QueryError:          the response lists GraphQL errors
            LinearClientError:   any other non-2xx response or a body
                                 that is not a GraphQL result
            NetworkError:        timeout or connection failure
        """
        body = self._request(query.payload())

        errors = body.get("errors")
        if errors:
            raise QueryError(errors)

        data = body.get("data")
        if data is None:
            raise LinearClientError(f"Response from {self.url} contains no data")
        return data

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _request(self, payload: dict[str, Any]) -> dict:
        try:
            response = self._session.post(self.url, json=payload, timeout=self._timeout)
        except requests.exceptions.Timeout as exc:
            raise NetworkError(
                f"Request timed out after {self._timeout}s while contacting '{self.url}'"
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise NetworkError(f"Unable to reach Linear API at '{self.url}'") from exc

        if response.status_code in (401, 403):
            raise AuthenticationError(
                "Authentication failed - check that your Linear API key is valid."
            )
        # Linear reports GraphQL errors with a 400 status and a JSON body
        if not response.ok and response.status_code != 400:
            raise LinearClientError(
                f"Unexpected response {response.status_code} from {self.url}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise LinearClientError(
                f"Response {response.status_code} from {self.url} is not JSON: {response.text[:200]}"
            ) from exc

        if not isinstance(body, dict):
            raise LinearClientError(f"Unexpected response body from {self.url}: {body!r}")
        if response.status_code == 400 and not body.get("errors"):
            raise LinearClientError(
                f"Unexpected response 400 from {self.url}: {response.text[:200]}"
            )
        return body

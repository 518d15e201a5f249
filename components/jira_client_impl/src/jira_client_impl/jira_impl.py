"""
Authentication
--------------
The client supports two credential modes:

1. When get_client(interactive = True)
    User is prompted for the three values below at runtime if any are missing from the environment.
2. When get_client(interactive = False) - Default
        JIRA_BASE_URL   https://myorg.atlassian.net
        JIRA_USER_EMAIL me@example.com
        JIRA_API_TOKEN  <token from https://id.atlassian.com/manage-profile/security/api-tokens>

Dependencies:
    uv add requests

"""
#to avoid having to consider forward declarations, the below line must be first line in the file
from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from getpass import getpass
from typing import Any

import requests
from requests.auth import HTTPBasicAuth

from jira_client_impl.jira_issue import JiraIssue, get_issue as _make_issue
from work_mgmt_client_interface.client import MAX_PAGE_SIZE, IssueTrackerClient, IssueTrackerError, SearchResult

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

class JiraError(IssueTrackerError):
    """Raised when the Jira API cannot be reached or returns an unexpected response."""


def normalize_base_url(base_url: str) -> str:
    """Return base_url without trailing slashes, adding https:// to a bare host name."""
    base_url = base_url.strip().rstrip("/")
    if base_url and "://" not in base_url:
        base_url = f"https://{base_url}"
    return base_url


def quote_jql_value(value: str) -> str:
    """Return value as a double-quoted JQL string literal."""
    #inside quotes only the backslash and the quote itself need escaping
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'

# ---------------------------------------------------------------------------
# Client implementation
# ---------------------------------------------------------------------------

class JiraClient(IssueTrackerClient):
    """
    Args:
        base_url:   Jira instance root URL (e.g. 'https://myorg.atlassian.net')
        user_email: Email associated with the Jira account
        api_token:  API token generated from Atlassian account settings
        timeout:    Seconds to wait for Jira before giving up; None waits forever
    """

    _API_PREFIX = "/rest/api/3"

    def __init__(self, base_url: str, user_email: str, api_token: str, *, timeout: float | None = None) -> None:
        self._base_url = normalize_base_url(base_url)
        self._timeout = timeout
        self._auth = HTTPBasicAuth(user_email, api_token)
        self._session = requests.Session()
        self._session.auth = self._auth
        self._session.headers.update({"Accept": "application/json"})

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Internal HTTP helpers
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._base_url}{self._API_PREFIX}{path}"

    def _get(self, path: str, params: dict | None = None) -> Any:
        try:
            response = self._session.get(self._url(path), params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            raise JiraError(f"Could not reach Jira at {self._base_url}: {exc}") from exc
        self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as exc:
            raise JiraError(f"Jira returned a non-JSON response from {response.url}") from exc

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        if not response.ok:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            raise JiraError(f"Jira API error {response.status_code}: {detail}")

    def _build_issue(self, issue: Any) -> JiraIssue:
        #every record must carry its key and a fields object
        key = issue.get("key") if isinstance(issue, dict) else None
        if not key or not isinstance(key, str):
            raise JiraError(f"Jira returned an issue without a key: {issue!r}")
        fields = issue.get("fields") or {}
        if not isinstance(fields, dict):
            raise JiraError(f"Jira returned unreadable fields for {key}: {fields!r}")
        return _make_issue(key, fields, self._base_url)

    # ------------------------------------------------------------------
    # IssueTrackerClient contract
    # ------------------------------------------------------------------

    def search_issues(
        self,
        jql: str,
        *,
        max_results: int = MAX_PAGE_SIZE,
        expand: Sequence[str] = ("names", "schema"),
        fields: str = "*all",
        ) -> SearchResult:
        """
        Sends one GET /search/jql request and builds a JiraIssue per returned record, in Jira's order.
        Matches beyond max_results are not fetched; the result is flagged as truncated instead.
        """
        page_size = max(0, min(max_results, MAX_PAGE_SIZE)) #Jira's maximum is 100
        logger.debug("Searching Jira: %s (maxResults=%d)", jql, page_size)

        params: dict[str, Any] = {"jql": jql, "maxResults": page_size, "fields": fields}
        if expand:
            params["expand"] = ",".join(expand)
        data = self._get("/search/jql", params=params)
        if not isinstance(data, dict):
            raise JiraError(f"Unexpected search response from Jira: {data!r}")

        raw_issues = data.get("issues") or []
        issues = [self._build_issue(i) for i in raw_issues]
        logger.debug("Jira returned %d issues", len(issues))

        return SearchResult(issues, truncated=_more_available(data, len(issues)))


def _more_available(data: dict, returned: int) -> bool:
    #/search/jql reports isLast, the older /search endpoint reports total
    if data.get("isLast") is False or data.get("nextPageToken"):
        return True
    total = data.get("total")
    return isinstance(total, int) and total > returned


# ---------------------------------------------------------------------------
# Get client
# ---------------------------------------------------------------------------

def get_client(
    *,
    interactive: bool = False,
    timeout: float | None = None,
    base_url: str = "",
    user_email: str = "",
    api_token: str = "",
    ) -> JiraClient:
    """Return a configured JiraClient.

    Credentials passed in are used as-is; any left empty are read from environment
    variables. If "interactive = True" and a value is still missing, the user will be prompted.

    Environment variables:
        JIRA_BASE_URL:    Base URL of the Jira instance.
        JIRA_USER_EMAIL:  Atlassian account email.
        JIRA_API_TOKEN:   API token from Atlassian account settings.
    """
    base_url, user_email, api_token = read_credentials(
        interactive=interactive, base_url=base_url, user_email=user_email, api_token=api_token,
    )
    return JiraClient(base_url, user_email, api_token, timeout=timeout)


def read_credentials(
    *,
    interactive: bool = False,
    base_url: str = "",
    user_email: str = "",
    api_token: str = "",
    ) -> tuple[str, str, str]:
    """Return (base_url, user_email, api_token), filling gaps from the environment and prompting if allowed."""
    base_url = base_url or os.environ.get("JIRA_BASE_URL", "")
    user_email = user_email or os.environ.get("JIRA_USER_EMAIL", "")
    api_token = api_token or os.environ.get("JIRA_API_TOKEN", "")

    if interactive:
        if not base_url:
            base_url = input("Jira base URL (e.g. https://myorg.atlassian.net): ").strip()
        if not user_email:
            user_email = input("Jira user email: ").strip()
        if not api_token:
            api_token = getpass("Jira API token: ")
    else:
        #collects the missing fields and raises an error alerting to the missing values
        missing = [name for name, val in [
            ("JIRA_BASE_URL", base_url),
            ("JIRA_USER_EMAIL", user_email),
            ("JIRA_API_TOKEN", api_token),
        ] if not val]
        if missing:
            raise EnvironmentError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Set them or call get_client(interactive=True)."
            )

    return base_url, user_email, api_token

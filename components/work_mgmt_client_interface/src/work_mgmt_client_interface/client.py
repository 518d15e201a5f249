"""Core client contract definitions."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from work_mgmt_client_interface.issue import Issue

__all__ = ["MAX_PAGE_SIZE", "IssueTrackerClient", "IssueTrackerError", "SearchResult"]

#Most trackers (Jira included) refuse pages larger than this
MAX_PAGE_SIZE = 100


class IssueTrackerError(Exception):
    """Base exception for any failure talking to the issue tracker.

    Authentication, network and query-syntax failures are not distinguished;
    the message carries the detail.
    """


class SearchResult(list):
    """Ordered list of issues returned by one search request.

    ``truncated`` is True when the tracker reported more matches than were returned.
    """

    def __init__(self, issues: Sequence[Issue] = (), *, truncated: bool = False) -> None:
        super().__init__(issues)
        self.truncated = truncated


class IssueTrackerClient(ABC):
    """Searches issues."""

    @abstractmethod
    def search_issues(
        self,
        jql: str,
        *, # asterisk indicates that all calls to this method must specify the argument name
        max_results: int = MAX_PAGE_SIZE,
        expand: Sequence[str] = ("names", "schema"),
        ) -> SearchResult:
        """Run a single search request."""
        """Args:
            jql:         The filter expression in the tracker's query language
            max_results: Maximum number of issues to return, capped at MAX_PAGE_SIZE
            expand:      Extra metadata the tracker should include; informational only

        Notes on usage:
            Exactly one request is sent. Matches beyond max_results are not fetched; the
            returned SearchResult is flagged as truncated instead.
            Issues are returned in the order the tracker sent them, never re-sorted.

        Returns:
            A SearchResult of Issue instances

        Raises:
            IssueTrackerError: On authentication, network or query failures

        """
        raise NotImplementedError

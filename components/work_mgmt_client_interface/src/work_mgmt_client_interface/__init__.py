"""Tracker-agnostic issue and client contracts."""

from work_mgmt_client_interface.client import IssueTrackerClient, IssueTrackerError, SearchResult
from work_mgmt_client_interface.issue import Issue

__all__ = ["Issue", "IssueTrackerClient", "IssueTrackerError", "SearchResult"]

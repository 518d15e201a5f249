"""Jira Cloud implementation of the work_mgmt_client_interface contracts."""

from jira_client_impl.jira_impl import JiraClient, JiraError, get_client
from jira_client_impl.jira_issue import JiraIssue

__all__ = ["JiraClient", "JiraError", "JiraIssue", "get_client"]

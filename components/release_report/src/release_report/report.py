"""Fetch the tickets of one release and render them for the console.

fetch_release_tickets() is the only function here that talks to the tracker;
the render_* functions are pure and return text.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from jira_client_impl.jira_impl import quote_jql_value
from release_report.config import EXTENSION_FIELDS, ReportConfig
from work_mgmt_client_interface.client import IssueTrackerClient, SearchResult
from work_mgmt_client_interface.issue import Issue

logger = logging.getLogger(__name__)

UNDEFINED = "undefined"
NO_LABELS = "None"
INDENT = "   "

# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------

def build_release_jql(project_key: str, fix_version: str, order_by: str = "created", ascending: bool = True) -> str:
    """Return the JQL matching every issue of project_key whose fixVersion is fix_version."""
    direction = "ASC" if ascending else "DESC"
    return (
        f"project = {quote_jql_value(project_key)} "
        f"AND fixVersion = {quote_jql_value(fix_version)} "
        f"ORDER BY {order_by} {direction}"
    )


def fetch_release_tickets(client: IssueTrackerClient, config: ReportConfig) -> SearchResult:
    """Run the single release search and return the tickets in the order Jira sent them.

    Raises:
        IssueTrackerError: Whatever the client raises; nothing is retried.
    """
    jql = build_release_jql(config.project_key, config.fix_version, config.order_by, config.ascending)
    tickets = client.search_issues(jql, max_results=config.max_results)

    if tickets.truncated:
        logger.warning(
            "More than %d issues match version %r; only the first %d are shown",
            len(tickets), config.fix_version, len(tickets),
        )

    seen: set[str] = set()
    for ticket in tickets:
        if ticket.key in seen:
            logger.warning("Issue %s was returned more than once", ticket.key)
        seen.add(ticket.key)
    return tickets

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _format_scalar(value: Any) -> str:
    #JSON spelling: true/false, and whole floats without the trailing .0
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_extension_value(value: Any) -> str:
    """Render a custom field value the way a person would read it in Jira."""
    if value is None:
        return UNDEFINED
    if isinstance(value, dict):
        #select lists, users and versions are objects with one of these keys
        for attr in ("value", "name", "displayName"):
            if value.get(attr) is not None:
                return _format_scalar(value[attr])
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return ", ".join(format_extension_value(item) for item in value)
    return _format_scalar(value)


def format_labels(labels: Sequence[str]) -> str:
    return ", ".join(labels) or NO_LABELS


def render_ticket(index: int, ticket: Issue, extension_fields: Mapping[str, str] = EXTENSION_FIELDS) -> list[str]:
    """Return the lines of one ticket block, index being 1-based. The block ends with a blank line."""
    lines = [
        f"{index}. [{ticket.type}] {ticket.key} - {ticket.summary}",
        f"{INDENT}Status: {ticket.status}",
        f"{INDENT}Priority: {ticket.priority}",
        f"{INDENT}Assignee: {ticket.assignee}",
        f"{INDENT}Reporter: {ticket.reporter}",
        f"{INDENT}Created: {ticket.created}",
        f"{INDENT}Updated: {ticket.updated}",
        f"{INDENT}Labels: {format_labels(ticket.labels)}",
    ]
    for name, field_id in extension_fields.items():
        lines.append(f"{INDENT}[{name}]: {format_extension_value(ticket.extension_value(field_id))}")
    lines.append(f"{INDENT}{ticket.url}")
    lines.append("")
    return lines


def render_report(
    tickets: Sequence[Issue],
    fix_version: str,
    extension_fields: Mapping[str, str] = EXTENSION_FIELDS,
    ) -> list[str]:
    """Return the header line followed by one block per ticket, in input order."""
    lines = [f'Total {len(tickets)} issues in version "{fix_version}":', ""]
    for index, ticket in enumerate(tickets, start=1):
        lines.extend(render_ticket(index, ticket, extension_fields))
    return lines


def render_json(
    tickets: Sequence[Issue],
    fix_version: str,
    extension_fields: Mapping[str, str] = EXTENSION_FIELDS,
    ) -> str:
    """Return the tickets as a JSON document, for feeding other tools."""
    document = {
        "fixVersion": fix_version,
        "total": len(tickets),
        "issues": [ticket.to_dict(extension_fields) for ticket in tickets],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)

"""Unit tests for the release query and the ticket rendering."""

import json
import logging
from unittest.mock import MagicMock

import pytest

from jira_client_impl.jira_impl import JiraClient, JiraError
from jira_client_impl.jira_issue import get_issue
from release_report.config import EXTENSION_FIELDS, ReportConfig
from release_report.report import (
    build_release_jql,
    fetch_release_tickets,
    format_extension_value,
    render_json,
    render_report,
    render_ticket,
)
from work_mgmt_client_interface.client import SearchResult

BASE_URL = "https://test.atlassian.net"


def make_ticket(key, **fields):
    """Build a JiraIssue from keyword fields, the way a search record would carry them."""
    return get_issue(key, fields, BASE_URL)


@pytest.fixture
def config():
    return ReportConfig(
        base_url=BASE_URL,
        user_email="test@example.com",
        api_token="dummy_token",
        project_key="VSFT",
        fix_version="1.38.1",
    )


@pytest.fixture
def crash_ticket():
    """The ticket from the release notes example: no priority, no assignee."""
    return make_ticket(
        "VSFT-42",
        issuetype={"name": "Bug"},
        status={"name": "Open"},
        summary="Crash on load",
        labels=["regression"],
    )

#-------------------------- tests for the query --------------------------

def test_build_release_jql():
    assert build_release_jql("VSFT", "1.38.1") == (
        'project = "VSFT" AND fixVersion = "1.38.1" ORDER BY created ASC'
    )


def test_build_release_jql_descending_and_quoted():
    jql = build_release_jql("VSFT", 'v"2"', order_by="updated", ascending=False)

    assert jql == 'project = "VSFT" AND fixVersion = "v\\"2\\"" ORDER BY updated DESC'


def test_fetch_release_tickets_runs_one_search(config):
    # Setup: a client whose search returns two tickets
    client = MagicMock()
    client.search_issues.return_value = SearchResult([make_ticket("VSFT-1"), make_ticket("VSFT-2")])

    # Act
    tickets = fetch_release_tickets(client, config)

    # Assert: one search with the release JQL and the configured cap
    client.search_issues.assert_called_once_with(
        'project = "VSFT" AND fixVersion = "1.38.1" ORDER BY created ASC', max_results=100
    )
    assert [t.key for t in tickets] == ["VSFT-1", "VSFT-2"]


def test_fetch_release_tickets_through_jira_client(config):
    # Setup: a real JiraClient with only its HTTP helper mocked
    client = JiraClient(BASE_URL, "test@example.com", "dummy_token")
    client._get = MagicMock(return_value={
        "issues": [
            {"key": "VSFT-9", "fields": {"summary": "first"}},
            {"key": "VSFT-3", "fields": {"summary": "second"}},
        ],
        "isLast": True,
    })

    tickets = fetch_release_tickets(client, config)

    assert [t.summary for t in tickets] == ["first", "second"]
    assert tickets[0].url == "https://test.atlassian.net/browse/VSFT-9"


def test_fetch_release_tickets_warns_when_truncated(config, caplog):
    client = MagicMock()
    client.search_issues.return_value = SearchResult([make_ticket("VSFT-1")], truncated=True)

    with caplog.at_level(logging.WARNING, logger="release_report.report"):
        tickets = fetch_release_tickets(client, config)

    # Assert: the tickets that were returned are still all there
    assert len(tickets) == 1
    assert "only the first 1 are shown" in caplog.text


def test_fetch_release_tickets_warns_on_duplicate_keys(config, caplog):
    client = MagicMock()
    client.search_issues.return_value = SearchResult([make_ticket("VSFT-1"), make_ticket("VSFT-1")])

    with caplog.at_level(logging.WARNING, logger="release_report.report"):
        tickets = fetch_release_tickets(client, config)

    assert len(tickets) == 2
    assert "VSFT-1 was returned more than once" in caplog.text


def test_fetch_release_tickets_propagates_tracker_errors(config):
    client = MagicMock()
    client.search_issues.side_effect = JiraError("Jira API error 401: Unauthorized")

    with pytest.raises(JiraError):
        fetch_release_tickets(client, config)

#-------------------------- tests for rendering --------------------------

def test_render_report_with_no_tickets():
    lines = render_report([], "1.38.1")

    assert lines == ['Total 0 issues in version "1.38.1":', ""]


def test_render_ticket_end_to_end(crash_ticket):
    lines = render_ticket(1, crash_ticket)

    assert lines[0] == "1. [Bug] VSFT-42 - Crash on load"
    assert "   Status: Open" in lines
    assert "   Priority: N/A" in lines
    assert "   Assignee: Unassigned" in lines
    assert "   Reporter: Unknown" in lines
    assert "   Labels: regression" in lines
    assert lines[-2].endswith("VSFT-42")
    assert lines[-2] == "   https://test.atlassian.net/browse/VSFT-42"
    # Assert: blocks are separated by a blank line
    assert lines[-1] == ""


def test_render_ticket_full_layout():
    ticket = make_ticket(
        "VSFT-7",
        issuetype={"name": "Story"},
        status={"name": "Done"},
        summary="Add export",
        priority={"name": "High"},
        assignee={"displayName": "Ada Lovelace"},
        reporter={"displayName": "Grace Hopper"},
        created="2025-01-02T10:00:00.000+0000",
        updated="2025-01-03T11:30:00.000+0000",
        labels=[],
        customfield_11210={"value": "Desktop"},
        customfield_11211=[{"value": "Staging"}, {"value": "Prod"}],
        customfield_11179="1.38.1-rc2",
    )

    lines = render_ticket(3, ticket)

    assert lines == [
        "3. [Story] VSFT-7 - Add export",
        "   Status: Done",
        "   Priority: High",
        "   Assignee: Ada Lovelace",
        "   Reporter: Grace Hopper",
        "   Created: 2025-01-02T10:00:00.000+0000",
        "   Updated: 2025-01-03T11:30:00.000+0000",
        "   Labels: None",
        "   [Product Item]: Desktop",
        "   [Environment]: Staging, Prod",
        "   [Feature]: undefined",
        "   [Testing version]: 1.38.1-rc2",
        "   https://test.atlassian.net/browse/VSFT-7",
        "",
    ]


@pytest.mark.parametrize("labels, expected", [
    ([], "   Labels: None"),
    (["a", "b"], "   Labels: a, b"),
])
def test_render_ticket_labels(labels, expected):
    lines = render_ticket(1, make_ticket("VSFT-1", labels=labels))

    assert expected in lines


def test_render_report_preserves_input_order():
    # Setup: keys deliberately out of alphabetical and numeric order
    tickets = [make_ticket("VSFT-30", summary="c"), make_ticket("VSFT-4", summary="a"), make_ticket("VSFT-100", summary="b")]

    lines = render_report(tickets, "1.38.1")

    # Assert: header, then one block per ticket in the same order, numbered from 1
    assert lines[0] == 'Total 3 issues in version "1.38.1":'
    headings = [line for line in lines if line[:1].isdigit()]
    assert headings == [
        "1. [] VSFT-30 - c",
        "2. [] VSFT-4 - a",
        "3. [] VSFT-100 - b",
    ]


def test_render_ticket_uses_custom_extension_table():
    ticket = make_ticket("VSFT-1", customfield_1={"name": "Team Rocket"})

    lines = render_ticket(1, ticket, {"Team": "customfield_1"})

    assert "   [Team]: Team Rocket" in lines
    assert not any("[Product Item]" in line for line in lines)


def test_default_extension_table_order():
    assert list(EXTENSION_FIELDS) == ["Product Item", "Environment", "Feature", "Testing version"]


@pytest.mark.parametrize("value, expected", [
    (None, "undefined"),
    ("plain", "plain"),
    (3.5, "3.5"),
    (True, "true"),
    (False, "false"),
    (3.0, "3"),
    (7, "7"),
    ({"value": True}, "true"),
    ([1.0, 2.5], "1, 2.5"),
    ({"value": "Web"}, "Web"),
    ({"displayName": "Ada"}, "Ada"),
    ({"id": "1"}, '{"id": "1"}'),
    (["x", {"name": "y"}], "x, y"),
])
def test_format_extension_value(value, expected):
    assert format_extension_value(value) == expected


def test_render_json(crash_ticket):
    document = json.loads(render_json([crash_ticket], "1.38.1"))

    assert document["fixVersion"] == "1.38.1"
    assert document["total"] == 1
    issue = document["issues"][0]
    assert issue["key"] == "VSFT-42"
    assert issue["priority"] == "N/A"
    assert issue["labels"] == ["regression"]
    assert issue["extensionFields"]["Product Item"] is None

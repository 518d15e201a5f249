"""Jira Issue implementation."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from work_mgmt_client_interface.issue import NOT_APPLICABLE, UNASSIGNED, UNKNOWN_REPORTER, Issue

# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _nested(fields: Mapping[str, Any], name: str, attr: str) -> str | None:
    """Return fields[name][attr] when fields[name] is a Jira object, else None."""
    value = fields.get(name)
    if not isinstance(value, dict):
        return None
    return value.get(attr) or None


def browse_url(base_url: str) -> str:
    """Return the prefix every issue key is appended to, e.g. 'https://myorg.atlassian.net/browse/'."""
    return f"{base_url.rstrip('/')}/browse/"

# ------------------------------------------------------------------
# Issue implementation
# ------------------------------------------------------------------
class JiraIssue(Issue):
    """Concrete Issue backed by one record of a Jira search response.

    Construct via the module-level ``get_issue()`` factory rather than
    instantiating directly. Every property is derived once, here, so the
    projection cannot drift from the record it came from.

    Args:
        issue_key: The Jira issue key (e.g. 'PROJ-42').
        raw_data:  The ``fields``-level dict from the Jira REST API response.
        base_url:  The base URL of the Jira instance (e.g. 'https://myorg.atlassian.net').

    """

    def __init__(self, issue_key: str, raw_data: dict, base_url: str) -> None:
        """Initialize JiraIssue."""
        raw = dict(raw_data or {})
        self._key = issue_key
        self._url = f"{browse_url(base_url)}{issue_key}"
        self._type = _nested(raw, "issuetype", "name") or ""
        self._status = _nested(raw, "status", "name") or ""
        self._summary = raw.get("summary") or ""
        self._priority = _nested(raw, "priority", "name") or NOT_APPLICABLE
        self._description = _description_text(raw.get("description"))
        self._assignee = _nested(raw, "assignee", "displayName") or UNASSIGNED
        self._reporter = _nested(raw, "reporter", "displayName") or UNKNOWN_REPORTER
        self._created = raw.get("created") or ""
        self._updated = raw.get("updated") or ""
        self._labels = tuple(str(label) for label in raw.get("labels") or ())
        self._raw = MappingProxyType(raw)

    @property
    def key(self) -> str:
        """Return key."""
        return self._key

    @property
    def url(self) -> str:
        return self._url

    @property
    def type(self) -> str:
        #Jira calls this "issuetype"
        return self._type

    @property
    def status(self) -> str:
        return self._status

    @property
    def summary(self) -> str:
        return self._summary

    @property
    def priority(self) -> str:
        return self._priority

    @property
    def description(self) -> str:
        return self._description

    @property
    def assignee(self) -> str:
        return self._assignee

    @property
    def reporter(self) -> str:
        return self._reporter

    @property
    def created(self) -> str:
        return self._created

    @property
    def updated(self) -> str:
        return self._updated

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    @property
    def extension_fields(self) -> Mapping[str, Any]:
        """Return the read-only raw field-set, custom fields included."""
        return self._raw


# ---------------------------------------------------------------------------
# Extract data from ADF format which Jira stores description in
# ---------------------------------------------------------------------------

def _description_text(desc: Any) -> str:
    # Jira Cloud returns description as Atlassian Document Format (ADF),
    # older instances and API v2 return a plain string
    if desc is None:
        return ""
    if isinstance(desc, str):
        return desc
    return _extract_adf_text(desc)


#ADF nodes that start on their own line; everything else is inline and runs together
_ADF_BLOCK_TYPES = frozenset({
    "paragraph", "heading", "blockquote", "codeBlock", "panel", "rule",
    "bulletList", "orderedList", "listItem",
    "table", "tableRow", "tableHeader", "tableCell",
    "mediaSingle", "mediaGroup", "expand", "nestedExpand",
})


def _extract_adf_text(node: dict) -> str:
    """Recursively extract plain text from an ADF document node.

    Block nodes are separated by newlines, inline runs (text, mentions, emoji)
    inside one block are joined as written.
    """
    if not isinstance(node, dict):
        return ""
    node_type = node.get("type")
    if node_type == "text":
        return node.get("text", "")
    if node_type == "hardBreak":
        return "\n"
    if node_type in ("mention", "emoji"):
        return (node.get("attrs") or {}).get("text", "")
    if node_type == "inlineCard":
        return (node.get("attrs") or {}).get("url", "")

    children = [child for child in node.get("content") or [] if isinstance(child, dict)]
    if any(child.get("type") in _ADF_BLOCK_TYPES for child in children):
        parts = [_extract_adf_text(child) for child in children]
        return "\n".join(filter(None, parts))
    return "".join(_extract_adf_text(child) for child in children)


# ---------------------------------------------------------------------------
# Get issue
# ---------------------------------------------------------------------------

def get_issue(issue_key: str, raw_data: dict, base_url: str = "") -> JiraIssue:
    """Return a JiraIssue from a Jira REST API issue response.

    Args:
        issue_key: The Jira issue key (e.g. 'PROJ-42').
        raw_data:  The ``fields`` dict from the Jira issue payload.
        base_url:  The Jira instance base URL (e.g. 'https://myorg.atlassian.net').

    Returns:
        A JiraIssue instance conforming to the Issue contract.

    """
    return JiraIssue(issue_key, raw_data, base_url)

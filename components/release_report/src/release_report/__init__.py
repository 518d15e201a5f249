"""Release ticket report built on the Jira client."""

from release_report.config import EXTENSION_FIELDS, ReportConfig, load_config
from release_report.report import build_release_jql, fetch_release_tickets, render_json, render_report, render_ticket

__all__ = [
    "EXTENSION_FIELDS",
    "ReportConfig",
    "build_release_jql",
    "fetch_release_tickets",
    "load_config",
    "render_json",
    "render_report",
    "render_ticket",
]

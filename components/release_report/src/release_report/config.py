"""Report configuration.

Values come from environment variables (credentials shared with
``jira_client_impl.get_client``) and can be overridden by keyword arguments,
which is how the command line options are applied.

    JIRA_PROJECT_KEY  project whose tickets are reported (default VSFT)
    JIRA_FIX_VERSION  release label matched against fixVersion (default 1.38.1)
    JIRA_MAX_RESULTS  result cap, at most 100 (default 100)
    JIRA_TIMEOUT      request timeout in seconds (default: none)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from jira_client_impl.jira_impl import normalize_base_url, read_credentials
from jira_client_impl.jira_issue import browse_url as _browse_url
from work_mgmt_client_interface.client import MAX_PAGE_SIZE

DEFAULT_PROJECT_KEY = "VSFT"
DEFAULT_FIX_VERSION = "1.38.1"

#display name -> Jira custom field id, in the order they are printed
EXTENSION_FIELDS: Mapping[str, str] = MappingProxyType({
    "Product Item":    "customfield_11210",
    "Environment":     "customfield_11211",
    "Feature":         "customfield_11215",
    "Testing version": "customfield_11179",
})


@dataclass(frozen=True)
class ReportConfig:
    """Everything one report run needs."""

    base_url: str
    user_email: str
    api_token: str
    project_key: str = DEFAULT_PROJECT_KEY
    fix_version: str = DEFAULT_FIX_VERSION
    max_results: int = MAX_PAGE_SIZE
    order_by: str = "created"
    ascending: bool = True
    timeout: float | None = None
    extension_fields: Mapping[str, str] = field(default_factory=lambda: EXTENSION_FIELDS, hash=False, compare=False)

    def __post_init__(self) -> None:
        #frozen dataclass, so normalize through object.__setattr__
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))

    @property
    def browse_url(self) -> str:
        return _browse_url(self.base_url)

    def with_overrides(self, **overrides: Any) -> ReportConfig:
        """Return a copy with every non-None override applied."""
        changes = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _env_number(name: str, cast: type) -> Any:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_config(*, interactive: bool = False, **overrides: Any) -> ReportConfig:
    """Build a ReportConfig from the environment, then apply keyword overrides.

    Raises:
        EnvironmentError: When credentials are missing and interactive is False.
        ValueError:       When a numeric variable cannot be parsed.
    """
    base_url, user_email, api_token = read_credentials(interactive=interactive)
    config = ReportConfig(
        base_url=base_url,
        user_email=user_email,
        api_token=api_token,
        project_key=os.environ.get("JIRA_PROJECT_KEY") or DEFAULT_PROJECT_KEY,
        fix_version=os.environ.get("JIRA_FIX_VERSION") or DEFAULT_FIX_VERSION,
    )
    config = config.with_overrides(
        max_results=_env_number("JIRA_MAX_RESULTS", int),
        timeout=_env_number("JIRA_TIMEOUT", float),
    )
    return config.with_overrides(**overrides)

"""Issue contract - Core issue representation."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

#placeholders used when the tracker omits an optional field
NOT_APPLICABLE = "N/A"
UNASSIGNED = "Unassigned"
UNKNOWN_REPORTER = "Unknown"


class Issue(ABC):
    """Abstract base class representing a read-only, display-ready issue.

    Implementations project one raw tracker record into these properties once,
    applying the placeholder values above for missing optional fields.
    """

    @property
    @abstractmethod
    def key(self) -> str:
        """Return the unique key of the issue (e.g. 'PROJ-42')."""
        raise NotImplementedError

    @property
    def id(self) -> str:
        """Return the unique identifier of the issue"""
        return self.key

    @property
    @abstractmethod
    def url(self) -> str:
        """Return the browser URL of the issue."""
        raise NotImplementedError

    @property
    @abstractmethod
    def type(self) -> str:
        """Return the issue type name (e.g. 'Bug')."""
        raise NotImplementedError

    @property
    @abstractmethod
    def status(self) -> str:
        """Return the tracker's status name, unchanged."""
        raise NotImplementedError

    @property
    @abstractmethod
    def summary(self) -> str:
        """Return the one-line summary (title) of the issue."""
        raise NotImplementedError

    @property
    @abstractmethod
    def priority(self) -> str:
        """Return the priority name, or NOT_APPLICABLE."""
        raise NotImplementedError

    @property
    @abstractmethod
    def description(self) -> str:
        """Return the description as plain text, or an empty string."""
        raise NotImplementedError

    @property
    @abstractmethod
    def assignee(self) -> str:
        """Return the assignee display name, or UNASSIGNED."""
        raise NotImplementedError

    @property
    @abstractmethod
    def reporter(self) -> str:
        """Return the reporter display name, or UNKNOWN_REPORTER."""
        raise NotImplementedError

    @property
    @abstractmethod
    def created(self) -> str:
        """Return the creation timestamp as sent by the tracker."""
        raise NotImplementedError

    @property
    @abstractmethod
    def updated(self) -> str:
        """Return the last-update timestamp as sent by the tracker."""
        raise NotImplementedError

    @property
    @abstractmethod
    def labels(self) -> tuple[str, ...]:
        """Return the labels in tracker order, possibly empty."""
        raise NotImplementedError

    @property
    @abstractmethod
    def extension_fields(self) -> Mapping[str, Any]:
        """Return the full raw field-set for non-standard attributes."""
        raise NotImplementedError

    def extension_value(self, field_id: str) -> Any:
        """Return the raw value of a tracker-specific field, or None if absent."""
        return self.extension_fields.get(field_id)

    def to_dict(self, extension_fields: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Return a JSON-ready dict of the projected fields.

        Args:
            extension_fields: Optional mapping of display name -> field id whose raw
                              values are included under "extensionFields".
        """
        data: dict[str, Any] = {
            "key": self.key,
            "url": self.url,
            "type": self.type,
            "status": self.status,
            "summary": self.summary,
            "priority": self.priority,
            "description": self.description,
            "assignee": self.assignee,
            "reporter": self.reporter,
            "created": self.created,
            "updated": self.updated,
            "labels": list(self.labels),
        }
        if extension_fields:
            data["extensionFields"] = {
                name: self.extension_value(field_id) for name, field_id in extension_fields.items()
            }
        return data

    #equivalent to Javas .toString()
    def __repr__(self) -> str:
        return f"<Issue key={self.key!r} type={self.type!r} status={self.status!r}>"

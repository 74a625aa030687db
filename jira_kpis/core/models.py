"""Domain data models for window kinds, date ranges, queries, endpoints and metric records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class WindowKind(Enum):
    """Calendar aggregation period; the value is the output series name."""

    WEEKLY = "jira_weekly"
    BIWEEKLY = "jira_biweekly"
    MONTHLY = "jira_monthly"
    QUARTERLY = "jira_quarterly"
    YEARLY = "jira_yearly"

    @property
    def series(self) -> str:
        return self.value

    @property
    def flag(self) -> str:
        """Name of the config flag enabling this window (e.g. ``gather_weekly``)."""
        return f"gather_{self.name.lower()}"


class StatusClass(Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    @property
    def epoch(self) -> str:
        return f"{self.start.isoformat()}-{self.end.isoformat()}"

    @property
    def days(self) -> int:
        """Inclusive length in days."""
        return (self.end - self.start).days + 1


@dataclass(frozen=True, slots=True)
class ServerEndpoint:
    url: str
    username: str = ""
    password: str = field(default="", repr=False)


@dataclass(frozen=True, slots=True)
class MetricRecord:
    series: str
    tags: dict[str, str]
    fields: dict[str, int]

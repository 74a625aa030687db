"""JQL classification queries (open / closed status class per date window)."""

from __future__ import annotations

from dataclasses import dataclass

from jira_kpis.core.config import STATUS_CLASSES
from jira_kpis.core.models import DateRange, StatusClass


@dataclass(frozen=True, slots=True)
class ClassificationQuery:
    project: str
    range: DateRange
    status_class: StatusClass

    @property
    def statuses(self) -> tuple[str, ...]:
        return tuple(STATUS_CLASSES[self.status_class])

    @property
    def jql(self) -> str:
        """Render the JQL filter.

        The project key is concatenated as-is (no quoting); callers must pass a
        plain project key.
        """
        status_list = ", ".join(f"'{s}'" for s in self.statuses)
        return (
            "project ="
            + self.project
            + " AND createdDate >="
            + self.range.start.isoformat()
            + " AND createdDate <="
            + self.range.end.isoformat()
            + f" AND status IN({status_list})"
        )


def build_query(project: str, date_range: DateRange, status_class: StatusClass) -> ClassificationQuery:
    return ClassificationQuery(project=project, range=date_range, status_class=status_class)


def build_query_pair(project: str, date_range: DateRange) -> tuple[ClassificationQuery, ClassificationQuery]:
    """Return ``(open_query, closed_query)`` for one window."""
    return (
        build_query(project, date_range, StatusClass.OPEN),
        build_query(project, date_range, StatusClass.CLOSED),
    )

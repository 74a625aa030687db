"""Central configuration: constants, status sets, and typed input settings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .models import ServerEndpoint, StatusClass, WindowKind

# =============================================================================
# Jira Connection Settings
# =============================================================================
# Used when no servers are configured (the old plugin fell back to "localhost")
DEFAULT_SERVER = "http://localhost:8080"
SEARCH_PATH = "/rest/api/2/search"
REQUEST_TIMEOUT_SECONDS = 10.0
TIMEZONE = "UTC"

# Environment fallbacks for credentials left empty in the YAML file
ENV_USERNAME = "JIRA_USERNAME"
ENV_PASSWORD = "JIRA_PASSWORD"
ENV_API_TOKEN = "JIRA_API_TOKEN"

DEFAULT_CRON_LOG = "/var/log/syslog"

# =============================================================================
# Status Classification
# =============================================================================
# Order matters: it is the literal order inside the JQL ``status IN(...)`` clause
OPEN_STATUSES: Sequence[str] = (
    "open",
    "in progress",
    "reopened",
    "waiting for customer",
    "waiting for assignment",
    "pending vendor",
)

CLOSED_STATUSES: Sequence[str] = (
    "resolved",
    "closed",
)

STATUS_CLASSES: dict[StatusClass, Sequence[str]] = {
    StatusClass.OPEN: OPEN_STATUSES,
    StatusClass.CLOSED: CLOSED_STATUSES,
}

# =============================================================================
# Output Schema
# =============================================================================
# Field keys are kept literal for downstream dashboards
FIELD_OPENED = "opened_jiras"
FIELD_CLOSED = "closed_jiras"
TAG_PROJECT = "project"
TAG_EPOCH = "epoch"

CRON_SERIES = "cron_kpis"
CRON_FIELD = "cron_count"
CRON_TAG_SERVER = "server"

# Gather order within one endpoint
WINDOW_ORDER: Sequence[WindowKind] = (
    WindowKind.WEEKLY,
    WindowKind.BIWEEKLY,
    WindowKind.MONTHLY,
    WindowKind.QUARTERLY,
    WindowKind.YEARLY,
)


@dataclass(slots=True)
class JiraKpisConfig:
    project: str
    servers: list[str] = field(default_factory=list)
    username: str = ""
    password: str = field(default="", repr=False)
    default_server: str = DEFAULT_SERVER
    timezone: str = TIMEZONE
    gather_weekly: bool = False
    gather_biweekly: bool = False
    gather_monthly: bool = False
    gather_quarterly: bool = False
    gather_yearly: bool = False

    def enabled_kinds(self) -> list[WindowKind]:
        return [kind for kind in WINDOW_ORDER if getattr(self, kind.flag)]

    def endpoints(self) -> list[ServerEndpoint]:
        return [ServerEndpoint(url, self.username, self.password) for url in self.servers]

    def default_endpoint(self) -> ServerEndpoint:
        return ServerEndpoint(self.default_server, self.username, self.password)


@dataclass(slots=True)
class CronKpisConfig:
    cron_job: str
    location: str = DEFAULT_CRON_LOG
    host: str = ""
    # One entry per weekday, Sunday first
    cron_count: list[int] = field(default_factory=lambda: [0] * 7)
    # None: the host's local time, which is what syslog stamps lines with
    timezone: str | None = None


@dataclass(slots=True)
class AppSettings:
    jira: JiraKpisConfig | None = None
    cron: CronKpisConfig | None = None

"""Jira KPI input: open/closed issue counts per calendar window."""

from __future__ import annotations

from jira_kpis.app import register_input
from jira_kpis.core.config import AppSettings
from jira_kpis.core.errors import ConfigurationError
from jira_kpis.core.service import KpiService
from jira_kpis.output.accumulator import Accumulator

SAMPLE_CONFIG = """\
jira_kpis:
  ## Jira servers to query, e.g. https://jira.example.com
  ## If no servers are listed, default_server is queried.
  servers:
    - https://jira.example.com
  # default_server: http://localhost:8080

  ## Jira project key
  project: OPS

  ## HTTP Basic Authentication. When empty, JIRA_USERNAME and
  ## JIRA_PASSWORD (or JIRA_API_TOKEN) are read from the environment.
  username: ""
  password: ""

  ## Timezone used to decide what "today" is
  timezone: UTC

  ## Windows to gather
  ## issues created in the previous Sunday..Saturday week
  gather_weekly: false
  ## issues created in the previous two weeks
  gather_biweekly: true
  ## issues created this calendar month
  gather_monthly: true
  ## issues created this calendar quarter
  gather_quarterly: false
  ## issues created this calendar year
  gather_yearly: false
"""


@register_input(
    "jira_kpis",
    section="jira",
    description="Read Jira servers and report open and closed issue counts for a project",
    sample_config=SAMPLE_CONFIG,
)
def gather(settings: AppSettings, accumulator: Accumulator) -> None:
    if settings.jira is None:
        raise ConfigurationError("jira_kpis section missing from config")
    # Per-endpoint failures are already handed to accumulator.add_error
    KpiService(settings.jira).gather(accumulator)

"""Cron job KPI input: scan a syslog-style file for today's run of a named job."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path

from jira_kpis.analytics.windows import sunday_weekday, today_in
from jira_kpis.app import register_input
from jira_kpis.core.config import CRON_FIELD, CRON_SERIES, CRON_TAG_SERVER, AppSettings, CronKpisConfig
from jira_kpis.core.errors import ConfigurationError, JiraKpisError
from jira_kpis.output.accumulator import Accumulator

logger = logging.getLogger(__name__)

SAMPLE_CONFIG = """\
cron_kpis:
  ## Location of the cron log file
  location: /var/log/syslog

  ## The name of the cron job to look for
  cron_job: WatchDogTimer.check

  ## Host where the cron jobs are running (emitted as the "server" tag)
  host: droozy-den-1p

  ## Expected count of unique jobs for each day, Sunday first.
  ## Jobs that run several times a day are still counted once.
  cron_count: [3, 4, 5, 6, 7, 0, 0]

  ## Timezone used to decide what "today" is. Leave unset to use the
  ## host's local time, which is what syslog stamps lines with.
  # timezone: Europe/Berlin
"""


def date_pattern(day: date) -> re.Pattern[str]:
    """Match a syslog line stamped on ``day``: ``"Oct 9 "`` or the padded ``"Oct  9 "`` at line start."""
    return re.compile(rf"^{day:%b} +{day.day} ")


def job_ran_on(path: str | Path, cron_job: str, day: date) -> bool:
    """True if a line stamped with ``day``'s syslog date mentions ``cron_job``."""
    stamped_today = date_pattern(day)
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            for line in fh:
                if cron_job in line and stamped_today.match(line):
                    return True
    except OSError as exc:
        raise JiraKpisError(f"Cannot read cron log {path}: {exc}") from exc
    return False


def cron_count_for(config: CronKpisConfig, day: date, ran: bool) -> int:
    if not ran:
        return 0
    return config.cron_count[sunday_weekday(day)]


def cron_today(config: CronKpisConfig, now: datetime | None = None) -> date:
    if config.timezone:
        return today_in(config.timezone, now)
    return (now or datetime.now()).date()


def gather_cron_status(
    config: CronKpisConfig, accumulator: Accumulator, now: datetime | None = None
) -> int:
    today = cron_today(config, now)
    ran = job_ran_on(config.location, config.cron_job, today)
    count = cron_count_for(config, today, ran)
    logger.debug("cron job %s on %s: ran=%s count=%s", config.cron_job, today, ran, count)
    accumulator.add_fields(CRON_SERIES, {CRON_FIELD: count}, {CRON_TAG_SERVER: config.host})
    return count


@register_input(
    "cron_kpis",
    section="cron",
    description="Create KPIs from cron job statuses",
    sample_config=SAMPLE_CONFIG,
)
def gather(settings: AppSettings, accumulator: Accumulator) -> None:
    if settings.cron is None:
        raise ConfigurationError("cron_kpis section missing from config")
    gather_cron_status(settings.cron, accumulator)

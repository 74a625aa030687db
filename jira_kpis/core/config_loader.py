"""Load and validate input settings from YAML (with environment fallbacks for credentials)."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import fields
from pathlib import Path
from typing import Any

import pytz
import yaml

from .config import (
    DEFAULT_CRON_LOG,
    ENV_API_TOKEN,
    ENV_PASSWORD,
    ENV_USERNAME,
    TIMEZONE,
    WINDOW_ORDER,
    AppSettings,
    CronKpisConfig,
    JiraKpisConfig,
)
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Project keys are concatenated into JQL unquoted, so only plain Jira keys are accepted
PROJECT_KEY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

JIRA_SECTION = "jira_kpis"
CRON_SECTION = "cron_kpis"


def load_settings(path: str | Path, env: Mapping[str, str] | None = None) -> AppSettings:
    """Read a YAML settings file and build typed configs for every section present.

    Parameters
    ----------
    path : str or Path
        YAML file with optional top-level ``jira_kpis`` and ``cron_kpis`` sections.
    env : mapping, optional
        Environment used for credential fallbacks (defaults to ``os.environ``).

    Raises
    ------
    ConfigurationError
        If the file is missing, unparsable, or any section fails validation.
    """
    yaml_path = Path(path)
    if not yaml_path.exists():
        raise ConfigurationError(f"Config file not found: {yaml_path}")
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {yaml_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{yaml_path}: top level must be a mapping")

    for key in data:
        if key not in (JIRA_SECTION, CRON_SECTION):
            logger.warning("Ignoring unknown config section %r", key)

    settings = AppSettings()
    if data.get(JIRA_SECTION) is not None:
        settings.jira = parse_jira_section(data[JIRA_SECTION], env=env)
    if data.get(CRON_SECTION) is not None:
        settings.cron = parse_cron_section(data[CRON_SECTION])
    return settings


def parse_jira_section(section: Any, env: Mapping[str, str] | None = None) -> JiraKpisConfig:
    section = _require_mapping(section, JIRA_SECTION)
    _warn_unknown(section, JiraKpisConfig, JIRA_SECTION)
    env = os.environ if env is None else env

    project = section.get("project")
    if not isinstance(project, str) or not project.strip():
        raise ConfigurationError(f"{JIRA_SECTION}.project is required")
    project = project.strip()
    if not PROJECT_KEY_RE.match(project):
        raise ConfigurationError(f"{JIRA_SECTION}.project {project!r} is not a plain Jira project key")

    raw_servers = section.get("servers") or []
    if isinstance(raw_servers, str):
        raw_servers = [raw_servers]
    if not isinstance(raw_servers, list) or not all(isinstance(s, str) and s.strip() for s in raw_servers):
        raise ConfigurationError(f"{JIRA_SECTION}.servers must be a list of non-empty URLs")
    servers = list(dict.fromkeys(s.strip().rstrip("/") for s in raw_servers))
    if len(servers) != len(raw_servers):
        logger.warning("%s.servers: duplicate entries ignored", JIRA_SECTION)

    timezone = _timezone(section.get("timezone", TIMEZONE), JIRA_SECTION)

    cfg = JiraKpisConfig(
        project=project,
        servers=servers,
        username=_optional_str(section, "username") or env.get(ENV_USERNAME, ""),
        password=_optional_str(section, "password")
        or env.get(ENV_PASSWORD, "")
        or env.get(ENV_API_TOKEN, ""),
        timezone=timezone,
    )
    default_server = _optional_str(section, "default_server")
    if default_server:
        cfg.default_server = default_server.rstrip("/")

    for kind in WINDOW_ORDER:
        flag = kind.flag
        value = section.get(flag, False)
        if not isinstance(value, bool):
            raise ConfigurationError(f"{JIRA_SECTION}.{flag} must be true or false, got {value!r}")
        setattr(cfg, flag, value)

    if not cfg.enabled_kinds():
        logger.warning("%s: no gather_* window enabled; nothing will be reported", JIRA_SECTION)
    return cfg


def parse_cron_section(section: Any) -> CronKpisConfig:
    section = _require_mapping(section, CRON_SECTION)
    _warn_unknown(section, CronKpisConfig, CRON_SECTION)

    cron_job = section.get("cron_job")
    if not isinstance(cron_job, str) or not cron_job.strip():
        raise ConfigurationError(f"{CRON_SECTION}.cron_job is required")

    raw_counts = section.get("cron_count", [0] * 7)
    if not isinstance(raw_counts, list) or len(raw_counts) != 7:
        raise ConfigurationError(f"{CRON_SECTION}.cron_count needs exactly 7 entries (Sunday first)")
    counts: list[int] = []
    for raw in raw_counts:
        try:
            value = int(str(raw).strip())
        except ValueError as exc:
            raise ConfigurationError(f"{CRON_SECTION}.cron_count entry {raw!r} is not an integer") from exc
        if value < 0:
            raise ConfigurationError(f"{CRON_SECTION}.cron_count entry {raw!r} is negative")
        counts.append(value)

    return CronKpisConfig(
        cron_job=cron_job.strip(),
        location=_optional_str(section, "location") or DEFAULT_CRON_LOG,
        host=_optional_str(section, "host"),
        cron_count=counts,
        timezone=_timezone(section["timezone"], CRON_SECTION) if section.get("timezone") else None,
    )


# ------------------ Internal Helpers ------------------
def _timezone(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{name}.timezone must be a string")
    try:
        pytz.timezone(value)
    except pytz.UnknownTimeZoneError as exc:
        raise ConfigurationError(f"{name}.timezone {value!r} is unknown") from exc
    return value


def _require_mapping(section: Any, name: str) -> dict[str, Any]:
    if not isinstance(section, dict):
        raise ConfigurationError(f"{name} section must be a mapping")
    return section


def _optional_str(section: Mapping[str, Any], key: str) -> str:
    value = section.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigurationError(f"{key} must be a string, got {type(value).__name__}")
    return value.strip()


def _warn_unknown(section: Mapping[str, Any], model: type, name: str) -> None:
    known = {f.name for f in fields(model)}
    for key in section:
        if key not in known:
            logger.warning("Ignoring unknown key %s.%s", name, key)

"""Exception taxonomy shared by the Jira client, the gather service and config loading."""

from __future__ import annotations


class JiraKpisError(RuntimeError):
    """Base class for every error raised by jira_kpis."""


class TransportError(JiraKpisError):
    """HTTP round trip failed: unreachable server, timeout, or non-2xx status."""


class DecodeError(JiraKpisError):
    """Response body was not JSON or did not carry a usable ``total`` count."""


class ConfigurationError(JiraKpisError):
    """A configuration value is missing or out of range (raised before any dispatch)."""

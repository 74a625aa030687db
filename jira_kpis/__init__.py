"""Periodic Jira and cron KPI gathering."""

__version__ = "0.1.0"

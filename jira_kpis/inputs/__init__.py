"""Gather inputs. Each module registers itself with ``jira_kpis.app.register_input``."""

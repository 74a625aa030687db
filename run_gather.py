"""Convenience launcher for one gather cycle.

Usage:
  python run_gather.py --config kpis.yaml [--format table]

Every module in ``jira_kpis/inputs`` registers itself through
``@register_input``; this script only forwards the command line.
"""

import sys

from jira_kpis.app import main

if __name__ == "__main__":
    sys.exit(main())

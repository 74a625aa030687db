import sys

from jira_kpis.app import main

sys.exit(main())

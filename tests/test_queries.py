from datetime import date

from jira_kpis.analytics.queries import build_query, build_query_pair
from jira_kpis.core.config import CLOSED_STATUSES, OPEN_STATUSES
from jira_kpis.core.models import DateRange, StatusClass

MARCH = DateRange(date(2024, 3, 1), date(2024, 3, 31))


def test_open_query_literal():
    q = build_query("X", MARCH, StatusClass.OPEN)
    assert q.jql == (
        "project =X AND createdDate >=2024-03-01 AND createdDate <=2024-03-31 AND status "
        "IN('open', 'in progress', 'reopened', 'waiting for customer', 'waiting for assignment', "
        "'pending vendor')"
    )


def test_closed_query_literal():
    q = build_query("X", MARCH, StatusClass.CLOSED)
    assert q.jql == (
        "project =X AND createdDate >=2024-03-01 AND createdDate <=2024-03-31 AND status IN('resolved', 'closed')"
    )


def test_open_query_status_membership():
    open_q, closed_q = build_query_pair("OPS", MARCH)
    assert open_q.status_class is StatusClass.OPEN
    assert closed_q.status_class is StatusClass.CLOSED
    for status in OPEN_STATUSES:
        assert f"'{status}'" in open_q.jql
    for status in CLOSED_STATUSES:
        assert f"'{status}'" not in open_q.jql
        assert f"'{status}'" in closed_q.jql
    assert len(OPEN_STATUSES) == 6


def test_project_is_not_quoted():
    q = build_query("OPS", MARCH, StatusClass.OPEN)
    assert q.jql.startswith("project =OPS AND")

from datetime import date

import pytest

from jira_kpis.core.mappers import map_report, records_to_dataframe
from jira_kpis.core.models import DateRange, WindowKind

RANGE = DateRange(date(2024, 3, 10), date(2024, 3, 16))


@pytest.mark.parametrize(
    "kind,series",
    [
        (WindowKind.WEEKLY, "jira_weekly"),
        (WindowKind.BIWEEKLY, "jira_biweekly"),
        (WindowKind.MONTHLY, "jira_monthly"),
        (WindowKind.QUARTERLY, "jira_quarterly"),
        (WindowKind.YEARLY, "jira_yearly"),
    ],
)
def test_series_per_window(kind, series):
    rec = map_report(4, 1, "OPS", kind, RANGE)
    assert rec.series == series
    assert rec.tags == {"project": "OPS", "epoch": "2024-03-10-2024-03-16"}
    assert rec.fields == {"opened_jiras": 4, "closed_jiras": 1}


def test_window_flags():
    assert [k.flag for k in WindowKind] == [
        "gather_weekly",
        "gather_biweekly",
        "gather_monthly",
        "gather_quarterly",
        "gather_yearly",
    ]


def test_records_to_dataframe():
    records = [
        map_report(4, 1, "OPS", WindowKind.WEEKLY, RANGE),
        map_report(9, 3, "OPS", WindowKind.MONTHLY, DateRange(date(2024, 3, 1), date(2024, 3, 31))),
    ]
    df = records_to_dataframe(records)
    assert list(df.columns) == ["series", "project", "epoch", "opened_jiras", "closed_jiras"]
    assert df["opened_jiras"].tolist() == [4, 9]
    assert records_to_dataframe([]).empty

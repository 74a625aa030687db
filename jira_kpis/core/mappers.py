"""Mapping window counts into MetricRecord instances and tabular views."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import pandas as pd

from .config import FIELD_CLOSED, FIELD_OPENED, TAG_EPOCH, TAG_PROJECT
from .models import DateRange, MetricRecord, WindowKind


def map_report(
    opened: int,
    closed: int,
    project: str,
    kind: WindowKind,
    date_range: DateRange,
) -> MetricRecord:
    return MetricRecord(
        series=kind.series,
        tags={TAG_PROJECT: project, TAG_EPOCH: date_range.epoch},
        fields={FIELD_OPENED: opened, FIELD_CLOSED: closed},
    )


def records_to_dataframe(
    records: Sequence[MetricRecord],
    times: Sequence[datetime] | None = None,
) -> pd.DataFrame:
    """Flatten records into one row each: ``series`` plus every tag and field as a column."""
    if not records:
        return pd.DataFrame(columns=["series"])
    rows = []
    for idx, rec in enumerate(records):
        row: dict = {"series": rec.series, **rec.tags, **rec.fields}
        if times is not None:
            row["time"] = times[idx]
        rows.append(row)
    return pd.DataFrame(rows)

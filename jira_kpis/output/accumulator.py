"""Metric sink: thread-safe in-memory accumulator with line-protocol rendering."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import pandas as pd
import pytz
from influxdb.line_protocol import make_line, make_lines

from jira_kpis.core.mappers import records_to_dataframe
from jira_kpis.core.models import MetricRecord


class Accumulator(Protocol):
    def add_fields(self, measurement: str, fields: Mapping[str, int], tags: Mapping[str, str]) -> None: ...

    def add_error(self, err: BaseException | None) -> None: ...


@dataclass(frozen=True, slots=True)
class StampedRecord:
    record: MetricRecord
    time: datetime


def _utcnow() -> datetime:
    return datetime.now(tz=pytz.UTC)


class MemoryAccumulator:
    """Collect records and errors from concurrent gather workers.

    ``add_fields`` and ``add_error`` may be called from any thread; appends are
    serialized by a single lock. Field order inside one record is preserved as
    given by the caller.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._lock = threading.Lock()
        self._clock = clock or _utcnow
        self._stamped: list[StampedRecord] = []
        self._errors: list[BaseException] = []

    def add_fields(self, measurement: str, fields: Mapping[str, int], tags: Mapping[str, str]) -> None:
        self.add_record(MetricRecord(series=measurement, tags=dict(tags), fields=dict(fields)))

    def add_record(self, record: MetricRecord) -> None:
        stamped = StampedRecord(record=record, time=self._clock())
        with self._lock:
            self._stamped.append(stamped)

    def add_error(self, err: BaseException | None) -> None:
        if err is None:
            return
        with self._lock:
            self._errors.append(err)

    @property
    def stamped(self) -> list[StampedRecord]:
        with self._lock:
            return list(self._stamped)

    @property
    def records(self) -> list[MetricRecord]:
        return [s.record for s in self.stamped]

    @property
    def errors(self) -> list[BaseException]:
        with self._lock:
            return list(self._errors)

    def has_measurement(self, series: str) -> bool:
        return any(rec.series == series for rec in self.records)

    def to_line_protocol(self) -> str:
        """Render every record as InfluxDB line protocol, one newline-terminated line per record."""
        stamped = self.stamped
        if not stamped:
            return ""
        return make_lines({"points": [_point(s.record, s.time) for s in stamped]})

    def to_dataframe(self) -> pd.DataFrame:
        stamped = self.stamped
        return records_to_dataframe([s.record for s in stamped], times=[s.time for s in stamped])


# ------------------ Line Protocol ------------------
def _nanoseconds(time: datetime) -> int:
    return int(time.timestamp() * 1_000_000) * 1_000


def _point(record: MetricRecord, time: datetime | None = None) -> dict:
    point = {"measurement": record.series, "tags": dict(record.tags), "fields": dict(record.fields)}
    if time is not None:
        point["time"] = _nanoseconds(time)
    return point


def format_line(record: MetricRecord, time: datetime | None = None) -> str:
    """Format one record. Tags and fields come out sorted by key; empty tag values are dropped."""
    point = _point(record, time)
    return make_line(point["measurement"], tags=point["tags"], fields=point["fields"], time=point.get("time"))

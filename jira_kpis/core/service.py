"""KpiService: orchestrates windowed open/closed counts across Jira servers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, datetime

from jira_kpis.analytics.queries import build_query_pair
from jira_kpis.analytics.windows import today_in, window_range
from jira_kpis.output.accumulator import Accumulator

from .config import JiraKpisConfig
from .errors import JiraKpisError
from .jira_client import JiraAPI
from .mappers import map_report
from .models import MetricRecord, ServerEndpoint, WindowKind

logger = logging.getLogger(__name__)

ApiFactory = Callable[[ServerEndpoint], JiraAPI]
Clock = Callable[[], datetime]


class KpiService:
    def __init__(
        self,
        config: JiraKpisConfig,
        *,
        api_factory: ApiFactory | None = None,
        clock: Clock | None = None,
    ):
        self.config = config
        self.api_factory = api_factory or JiraAPI.from_endpoint
        self._clock = clock

    def today(self) -> date:
        now = self._clock() if self._clock is not None else None
        return today_in(self.config.timezone, now)

    # ------------------ Per Window ------------------
    def aggregate_window(
        self, api: JiraAPI, kind: WindowKind, today: date, accumulator: Accumulator
    ) -> MetricRecord:
        """Count open then closed issues for one window and emit one record.

        Nothing is emitted unless both counts succeed; any client error
        propagates to the caller unchanged.
        """
        date_range = window_range(kind, today)
        open_query, closed_query = build_query_pair(self.config.project, date_range)
        opened = api.count(open_query.jql)
        closed = api.count(closed_query.jql)
        record = map_report(opened, closed, self.config.project, kind, date_range)
        accumulator.add_fields(record.series, record.fields, record.tags)
        logger.debug(
            "%s %s %s: opened=%s closed=%s", api.server, record.series, date_range.epoch, opened, closed
        )
        return record

    # ------------------ Per Endpoint ------------------
    def gather_endpoint(
        self,
        endpoint: ServerEndpoint,
        accumulator: Accumulator,
        today: date | None = None,
    ) -> list[MetricRecord]:
        """Run every enabled window against one endpoint, sequentially.

        The first failing window stops this endpoint's remaining windows;
        records already emitted stay in the accumulator.
        """
        api = self.api_factory(endpoint)
        today = today or self.today()
        return [self.aggregate_window(api, kind, today, accumulator) for kind in self.config.enabled_kinds()]

    # ------------------ Fan Out ------------------
    def gather(self, accumulator: Accumulator) -> dict[str, Exception]:
        """Gather every configured endpoint and return ``{endpoint_url: error}`` for failures.

        With no servers configured a single pass runs inline against
        ``config.default_server``. Otherwise each endpoint gets its own worker
        thread and this call returns only after all of them finished. Failures
        are isolated per endpoint and also passed to ``accumulator.add_error``.
        """
        today = self.today()
        errors: dict[str, Exception] = {}
        endpoints = self.config.endpoints()

        if not endpoints:
            endpoint = self.config.default_endpoint()
            try:
                self.gather_endpoint(endpoint, accumulator, today)
            except Exception as exc:
                self._record_failure(endpoint, exc, accumulator, errors)
            return errors

        with ThreadPoolExecutor(max_workers=len(endpoints), thread_name_prefix="jira-kpis") as pool:
            futures = {pool.submit(self.gather_endpoint, ep, accumulator, today): ep for ep in endpoints}
            for fut in as_completed(futures):
                try:
                    fut.result()
                except Exception as exc:
                    self._record_failure(futures[fut], exc, accumulator, errors)
        return errors

    @staticmethod
    def raise_for_errors(errors: dict[str, Exception]) -> None:
        """Raise the single endpoint error, or an aggregate when several endpoints failed."""
        if not errors:
            return
        if len(errors) == 1:
            raise next(iter(errors.values()))
        summary = "; ".join(f"{url}: {exc}" for url, exc in errors.items())
        raise JiraKpisError(f"{len(errors)} endpoints failed: {summary}") from next(iter(errors.values()))

    def _record_failure(
        self,
        endpoint: ServerEndpoint,
        exc: Exception,
        accumulator: Accumulator,
        errors: dict[str, Exception],
    ) -> None:
        # Unexpected exception types get a traceback in the log
        logger.warning(
            "Gather failed for %s (project %s): %s",
            endpoint.url,
            self.config.project,
            exc,
            exc_info=not isinstance(exc, JiraKpisError),
        )
        accumulator.add_error(exc)
        errors[endpoint.url] = exc

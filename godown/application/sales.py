"""Sales analytics: merge spreadsheet sources, filter and report."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Sequence

from godown.core.csv_records import parse_records
from godown.core.sales_filters import SalesFilters, apply_filters
from godown.core.sales_report import DEFAULT_TOP_N, assemble_sales_report, empty_sales_report
from godown.core.schema import DataSourceCreate, SalesReport
from godown.domain import DataSource, SalesRecord
from godown.infrastructure import EntityStore, SheetFetcher, SourceError, get_sheet_client

logger = logging.getLogger(__name__)

NO_SOURCES_MESSAGE = "No active data sources. Add and import a data source first."
NO_RECORDS_MESSAGE = "No records found in the active data sources."


class SourceImportError(RuntimeError):
    """Raised when a single data source cannot be imported."""


def records_from_text(text: str) -> list[SalesRecord]:
    return [SalesRecord.from_row(row) for row in parse_records(text)]


@dataclass(slots=True)
class MergeResult:
    records: list[SalesRecord] = field(default_factory=list)
    failures: dict[int, str] = field(default_factory=dict)
    source_count: int = 0
    no_sources: bool = False


class SourceMerger:
    """Fetch every source concurrently and concatenate what could be read."""

    def __init__(self, fetcher: SheetFetcher) -> None:
        self._fetcher = fetcher

    async def _load(self, source: DataSource) -> list[SalesRecord] | SourceError:
        result = await self._fetcher.fetch(source.sheet_url)
        if isinstance(result, SourceError):
            return result
        return records_from_text(result.text)

    async def merge(self, sources: Sequence[DataSource]) -> MergeResult:
        if not sources:
            return MergeResult(no_sources=True)

        outcomes = await asyncio.gather(*(self._load(source) for source in sources), return_exceptions=True)

        merged = MergeResult(source_count=len(sources))
        for source, outcome in zip(sources, outcomes):
            if isinstance(outcome, SourceError):
                logger.warning("Skipping data source %s (%s): %s", source.id, source.name, outcome.reason)
                merged.failures[source.id] = outcome.reason
            elif isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error("Unexpected failure loading data source %s (%s)", source.id, source.name, exc_info=outcome)
                merged.failures[source.id] = f"{type(outcome).__name__}: {outcome}"
            else:
                merged.records.extend(outcome)
        return merged


class SalesService:
    """Coordinates data-source registry and sales analysis use cases."""

    def __init__(
        self,
        store: EntityStore,
        *,
        fetcher: SheetFetcher | None = None,
        fetch_timeout: float = 15.0,
        top_n: int = DEFAULT_TOP_N,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._fetch_timeout = fetch_timeout
        self._top_n = top_n

    def _resolve_fetcher(self) -> SheetFetcher:
        return self._fetcher or get_sheet_client(self._fetch_timeout)

    # ------------------------------------------------------------------
    # registry
    # ------------------------------------------------------------------
    def list_sources(self) -> list[DataSource]:
        return self._store.list_data_sources()

    def create_source(self, payload: DataSourceCreate) -> DataSource:
        return self._store.add_data_source(payload.name, payload.sheet_url)

    def delete_source(self, source_id: int) -> None:
        self._store.delete_data_source(source_id)

    async def import_source(self, source_id: int) -> DataSource:
        source = self._store.get_data_source(source_id)
        result = await self._resolve_fetcher().fetch(source.sheet_url)
        if isinstance(result, SourceError):
            self._store.mark_source_error(source_id, result.reason)
            logger.warning("Import of data source %s failed: %s", source_id, result.reason)
            raise SourceImportError(result.reason)

        records = records_from_text(result.text)
        dates = [date for date in (record.parsed_order_date for record in records) if date is not None]
        updated = self._store.mark_source_imported(
            source_id,
            record_count=len(records),
            date_range_start=min(dates) if dates else None,
            date_range_end=max(dates) if dates else None,
        )
        logger.info("Imported %d records from data source %s", len(records), source_id)
        return updated

    # ------------------------------------------------------------------
    # analysis
    # ------------------------------------------------------------------
    async def load_records(self) -> MergeResult:
        sources = self._store.list_data_sources(active_only=True)
        return await SourceMerger(self._resolve_fetcher()).merge(sources)

    async def analyse(self, filters: SalesFilters | None = None) -> SalesReport:
        merged = await self.load_records()
        meta = {
            "sources": merged.source_count,
            "failedSources": {str(key): reason for key, reason in merged.failures.items()},
        }
        if merged.no_sources:
            return empty_sales_report(NO_SOURCES_MESSAGE, meta)
        if not merged.records:
            return empty_sales_report(NO_RECORDS_MESSAGE, meta)

        filtered = apply_filters(merged.records, filters)
        logger.debug("sales analysis: %d merged, %d after filters", len(merged.records), len(filtered))
        return assemble_sales_report(merged.records, filtered, top_n=self._top_n, meta=meta)


__all__ = [
    "MergeResult",
    "NO_RECORDS_MESSAGE",
    "NO_SOURCES_MESSAGE",
    "SalesService",
    "SourceImportError",
    "SourceMerger",
    "records_from_text",
]

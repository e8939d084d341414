"""
Report listing and aggregation
Fetches every report, partitions by submitter category, counts statuses
"""

import logging
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Iterable, Mapping, Tuple, Dict, List

from pawtrack.core.exceptions import FetchError, StoreError
from pawtrack.reports.models import (
    Report,
    ReportStatus,
    SubmitterCategory,
    ListingSnapshot,
)

logger = logging.getLogger(__name__)


def partition_by_category(
    reports: Iterable[Report]
) -> Mapping[str, Tuple[Report, ...]]:
    """
    Split reports into the community and rescuer sequences.

    Order is preserved within each partition. Reports with an unrecognized
    category land in neither.
    """
    partitions: Dict[str, List[Report]] = {c.value: [] for c in SubmitterCategory}

    for report in reports:
        bucket = partitions.get(report.submitter_category)
        if bucket is not None:
            bucket.append(report)

    return MappingProxyType({k: tuple(v) for k, v in partitions.items()})


def count_statuses(statuses: Iterable[str]) -> Mapping[str, int]:
    """Count each recognized status value. Other values are ignored."""
    counts = Counter(statuses)
    return MappingProxyType({s.value: counts.get(s.value, 0) for s in ReportStatus})


def build_snapshot(reports: Iterable[Report]) -> ListingSnapshot:
    """Build an immutable snapshot from fetched reports."""
    all_reports = tuple(reports)
    return ListingSnapshot(
        all_reports=all_reports,
        by_category=partition_by_category(all_reports),
        status_counts=count_statuses(r.status for r in all_reports),
    )


@dataclass(frozen=True)
class ListingResult:
    """
    Result of a refresh.

    `snapshot` is always the snapshot to display: the new one on success,
    the previous one when `error` is set.
    """
    snapshot: ListingSnapshot
    error: Optional[FetchError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ReportListing:
    """
    Materializes the current view of all reports.

    Holds the last good snapshot; a failed refresh leaves it in place.
    """

    def __init__(self, store):
        """
        Initialize listing.

        Args:
            store: Report store (insert / list_all / list_statuses)
        """
        self.store = store
        self._snapshot = ListingSnapshot()

    @property
    def snapshot(self) -> ListingSnapshot:
        return self._snapshot

    def visible(self, category: str) -> Tuple[Report, ...]:
        """Reports of the given category from the held snapshot."""
        return self._snapshot.for_category(category)

    def refresh(self) -> ListingResult:
        """
        Fetch all reports newest first and replace the held snapshot.

        Returns:
            ListingResult with the snapshot to display
        """
        try:
            rows = self.store.list_all(order_by="created_at", descending=True)
            reports = [Report.from_row(row) for row in rows]
        except StoreError as e:
            logger.error(f"Report fetch failed, keeping previous snapshot: {e}")
            return ListingResult(
                snapshot=self._snapshot,
                error=FetchError(f"Could not load reports: {e.message}"),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed report row, keeping previous snapshot: {e}")
            return ListingResult(
                snapshot=self._snapshot,
                error=FetchError(f"Could not read reports: {e}"),
            )

        self._snapshot = build_snapshot(reports)
        logger.info(f"Fetched {len(reports)} reports")

        return ListingResult(snapshot=self._snapshot)

    def fetch_status_counts(self) -> Mapping[str, int]:
        """
        Count statuses using the store's status-only projection.

        Raises:
            FetchError: store request failed
        """
        try:
            statuses = self.store.list_statuses()
        except StoreError as e:
            raise FetchError(f"Could not load report statistics: {e.message}") from e

        return count_statuses(statuses)

"""Status transition and cycle time analysis."""

from datetime import datetime

from ..models.constants import CREATED_STATUS
from ..models.insights import CycleTimeMetrics, StatusTransition
from ..models.ticket import ChangeHistoryEntry, ChangeItem, TicketDetails
from ..utils.date import to_millis
from .base import AnalyzerBase


class TransitionsMixin(AnalyzerBase):
    """Mixin for reconstructing the status timeline of a ticket."""

    def analyze_status_transitions(
        self, details: TicketDetails
    ) -> tuple[tuple[StatusTransition, ...], CycleTimeMetrics]:
        """
        Rebuild the ordered status transitions and decompose cycle time.

        The walk starts from a synthetic 'Created' status at the creation
        timestamp. Each status change records how long the ticket sat in the
        status it left, so the durations add up to the time between creation
        and the last transition.

        Args:
            details: The extracted ticket

        Returns:
            Tuple of (transitions, cycle time metrics)
        """
        status_changes: list[tuple[datetime, ChangeHistoryEntry, ChangeItem]] = []
        for entry in details.change_history:
            item = entry.find_item("status")
            if item is None or not item.to_string or entry.created is None:
                continue
            status_changes.append((entry.created, entry, item))

        # sorted() is stable, so same-timestamp entries keep payload order
        status_changes = sorted(status_changes, key=lambda change: change[0])

        transitions: list[StatusTransition] = []
        previous_status = CREATED_STATUS
        previous_date = details.metadata.created

        for changed_at, entry, item in status_changes:
            transitions.append(
                StatusTransition(
                    from_status=previous_status,
                    to_status=item.to_string,
                    date=changed_at,
                    author=entry.author.display_name,
                    duration_in_previous_status=to_millis(changed_at - previous_date),
                )
            )
            previous_status = item.to_string
            previous_date = changed_at

        cycle_time = self._calculate_cycle_time(details, transitions)
        return tuple(transitions), cycle_time

    def _calculate_cycle_time(
        self, details: TicketDetails, transitions: list[StatusTransition]
    ) -> CycleTimeMetrics:
        """Decompose cycle time from transitions (created to resolved for lead time)."""
        metadata = details.metadata
        lead_time = None
        if metadata.resolution_date:
            lead_time = to_millis(metadata.resolution_date - metadata.created)

        if not transitions:
            return CycleTimeMetrics(lead_time=lead_time)

        buckets: dict[str, int] = {}
        created_to_in_progress = None
        active_time = 0
        wait_time = 0

        for transition in transitions:
            duration = transition.duration_in_previous_status
            bucket = self._status_bucket(transition.to_status)
            if bucket:
                buckets[bucket] = buckets.get(bucket, 0) + duration
                if bucket == "in_progress" and created_to_in_progress is None:
                    created_to_in_progress = duration

            if self._status_in(transition.to_status, self.config.active_statuses):
                active_time += duration
            elif self._status_in(transition.to_status, self.config.wait_statuses):
                wait_time += duration

        return CycleTimeMetrics(
            created_to_in_progress=created_to_in_progress,
            in_progress_to_review=buckets.get("review"),
            review_to_testing=buckets.get("testing"),
            testing_to_done=buckets.get("done"),
            total_cycle_time=sum(t.duration_in_previous_status for t in transitions),
            lead_time=lead_time,
            active_time=active_time,
            wait_time=wait_time,
            buckets=buckets,
        )

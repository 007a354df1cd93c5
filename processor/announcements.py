"""Deduplicating pipeline that finds and records newly announced events."""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from processor.models import Event, PollResult, RecordOutcome

logger = logging.getLogger(__name__)


def filter_deleted(events: Iterable[Event]) -> List[Event]:
    """Drop events flagged as deleted."""
    return [event for event in events if not event.deleted]


def diff_by_id(events: Iterable[Event], announced_ids: Iterable[int]) -> List[Event]:
    """
    Keep events whose ID has not been announced yet.

    Args:
        events: Candidate events
        announced_ids: IDs already recorded

    Returns:
        Events with unannounced IDs, one per ID, in input order
    """
    events = list(events)
    new_ids = {event.id for event in events} - set(announced_ids)

    new_events = []
    for event in events:
        if event.id in new_ids:
            new_events.append(event)
            new_ids.discard(event.id)
    return new_events


class AnnouncementPipeline:
    """Computes which fetched events are new and records them as announced."""

    def __init__(self, events_client, store):
        """
        Args:
            events_client: Object with fetch_events() -> List[Event]
            store: Connected AnnouncedEventStore
        """
        self.events_client = events_client
        self.store = store

    def poll(self, candidates: Optional[List[Event]] = None) -> PollResult:
        """
        Find unannounced events and record their IDs.

        Args:
            candidates: Already fetched events; fetched from the API when None

        Returns:
            PollResult whose announced list holds only events that were persisted
        """
        if candidates is None:
            candidates = self.events_client.fetch_events()
        candidates = filter_deleted(candidates)

        announced_ids = self.store.list_announced_ids()
        new_events = diff_by_id(candidates, announced_ids)
        logger.info(
            f"Found {len(new_events)} new events out of {len(candidates)} candidates"
        )

        outcomes = self.record_announced(new_events)
        errors = [outcome.error for outcome in outcomes if not outcome.ok]

        return PollResult(
            candidates=candidates,
            announced=[outcome.event for outcome in outcomes if outcome.ok],
            errors=errors
        )

    def poll_new_events(self, candidates: Optional[List[Event]] = None) -> List[Event]:
        """Return the events announced by this poll, empty if none."""
        return self.poll(candidates).announced

    def record_announced(self, events: List[Event]) -> List[RecordOutcome]:
        """
        Persist each event ID independently.

        Returns:
            One RecordOutcome per event; a failed insert does not stop the rest
        """
        outcomes = []
        for event in events:
            try:
                self.store.record_announced_id(event.id)
                outcomes.append(RecordOutcome(event=event))
            except SQLAlchemyError as e:
                error_msg = f"Failed to record event {event.id}: {e}"
                logger.error(error_msg)
                outcomes.append(RecordOutcome(event=event, error=error_msg))
        return outcomes

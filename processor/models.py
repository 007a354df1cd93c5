"""Data models for event announcements and food digests."""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp from the events API.

    Args:
        value: Timestamp string such as "2024-01-15T17:00:00.000Z"

    Returns:
        Timezone-aware datetime, or None when value is empty
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Event:
    """Upcoming event from the events API."""
    id: int
    name: str
    starts: datetime
    registration_starts: Optional[datetime]
    deleted: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Event':
        """
        Build an Event from an API payload entry.

        Raises:
            ValueError: If id, name or starts is missing or malformed
        """
        try:
            event_id = int(data['id'])
            name = str(data['name'])
            starts = parse_timestamp(data['starts'])
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed event payload: {e}") from e
        if starts is None:
            raise ValueError(f"Event {event_id} has no start time")

        try:
            registration_starts = parse_timestamp(data.get('registration_starts'))
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid registration start for event {event_id}: {e}")
            registration_starts = None

        return cls(
            id=event_id,
            name=name,
            starts=starts,
            registration_starts=registration_starts,
            deleted=int(data.get('deleted') or 0)
        )


@dataclass
class FoodItem:
    """Single dish on a restaurant menu."""
    name: str
    price_name: str
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FoodItem':
        price = data.get('price') or {}
        return cls(
            name=str(data.get('name', '')).strip(),
            price_name=str(price.get('name', '')),
            warnings=[str(w) for w in data.get('warnings') or []]
        )


@dataclass
class FoodList:
    """Daily menu of one restaurant. food_list is None when the feed has none."""
    restaurant_name: str
    food_list: Optional[List[FoodItem]]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FoodList':
        raw_items = data.get('foodList')
        items = None
        if raw_items is not None:
            items = [FoodItem.from_dict(item) for item in raw_items]
        return cls(
            restaurant_name=str(data.get('restaurantName', '')),
            food_list=items
        )


@dataclass
class RecordOutcome:
    """Result of persisting one announced event ID."""
    event: Event
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PollResult:
    """Result of one announcement poll."""
    candidates: List[Event]
    announced: List[Event]
    errors: List[str]


@dataclass
class JobResult:
    """Summary of a dispatched job run."""
    job_mode: Optional[str]
    messages_sent: int = 0
    events_announced: int = 0
    errors: List[str] = field(default_factory=list)
    failed: bool = False

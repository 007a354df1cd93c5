"""HTTP client for the upcoming events API."""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import requests

from processor.models import Event

logger = logging.getLogger(__name__)


def format_from_date(moment: datetime) -> str:
    """Render a UTC timestamp with millisecond precision, e.g. 2024-01-15T10:00:00.000Z."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime('%Y-%m-%dT%H:%M:%S.') + f"{utc.microsecond // 1000:03d}Z"


class EventsClient:
    """Client for the events API."""

    def __init__(self, base_url: str, timeout: int = 30, from_offset_hours: int = 2):
        """
        Initialize the events client.

        Args:
            base_url: Events endpoint URL
            timeout: HTTP request timeout in seconds (default: 30)
            from_offset_hours: Only events starting this many hours from now
                or later are requested (default: 2)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.from_offset_hours = from_offset_hours

    def fetch_events(self, now: Optional[datetime] = None) -> List[Event]:
        """
        Fetch upcoming events, including ones flagged as deleted.

        Args:
            now: Reference time, defaults to the current UTC time

        Returns:
            List of Event objects

        Raises:
            requests.RequestException: If the request fails
            ValueError: If the response is not a JSON array
        """
        now = now or datetime.now(timezone.utc)
        from_date = now + timedelta(hours=self.from_offset_hours)
        params = {'fromDate': format_from_date(from_date)}

        logger.info(f"Fetching events from {params['fromDate']}")
        response = requests.get(self.base_url, params=params, timeout=self.timeout)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError(
                f"Expected a JSON array of events, got {type(payload).__name__}"
            )

        events = []
        for item in payload:
            try:
                events.append(Event.from_dict(item))
            except ValueError as e:
                logger.warning(f"Skipping malformed event: {e}")
                continue

        logger.info(f"Fetched {len(events)} events")
        return events

"""Unit tests for EventsClient."""
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from clients.events_api import EventsClient, format_from_date

EVENTS_URL = 'https://event-api.example.com/api/events'


class TestEventsClient:
    """Test cases for EventsClient class."""

    @responses.activate
    def test_fetch_events_success(self):
        """Test fetching and parsing events, deleted ones included."""
        responses.add(
            responses.GET,
            EVENTS_URL,
            json=[
                {
                    'id': 1,
                    'name': 'Annual meeting',
                    'starts': '2024-01-20T16:00:00.000Z',
                    'registration_starts': '2024-01-10T10:00:00.000Z',
                    'deleted': 0,
                },
                {
                    'id': 2,
                    'name': 'Cancelled sauna',
                    'starts': '2024-01-21T16:00:00.000Z',
                    'registration_starts': None,
                    'deleted': 1,
                },
            ],
            status=200
        )

        client = EventsClient(EVENTS_URL, timeout=10)
        events = client.fetch_events()

        assert [e.id for e in events] == [1, 2]
        assert events[0].name == 'Annual meeting'
        assert events[1].deleted == 1

    @responses.activate
    def test_fetch_events_sends_from_date(self):
        """Test that fromDate is now plus the configured offset."""
        responses.add(responses.GET, EVENTS_URL, json=[], status=200)

        client = EventsClient(EVENTS_URL, from_offset_hours=2)
        client.fetch_events(now=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))

        query = parse_qs(urlparse(responses.calls[0].request.url).query)
        assert query['fromDate'] == ['2024-01-15T12:30:00.000Z']

    @responses.activate
    def test_fetch_events_skips_malformed_entries(self):
        """Test that entries that cannot be parsed are skipped."""
        responses.add(
            responses.GET,
            EVENTS_URL,
            json=[
                {'id': 1, 'name': 'No start'},
                {'id': 2, 'name': 'Fine', 'starts': '2024-01-20T16:00:00Z'},
            ],
            status=200
        )

        events = EventsClient(EVENTS_URL).fetch_events()

        assert [e.id for e in events] == [2]

    @responses.activate
    def test_fetch_events_rejects_non_array(self):
        """Test that a non-array payload raises ValueError."""
        responses.add(responses.GET, EVENTS_URL, json={'error': 'nope'}, status=200)

        with pytest.raises(ValueError):
            EventsClient(EVENTS_URL).fetch_events()

    @responses.activate
    def test_fetch_events_http_error(self):
        """Test that HTTP errors propagate without retrying."""
        responses.add(responses.GET, EVENTS_URL, status=503)

        with pytest.raises(requests.HTTPError):
            EventsClient(EVENTS_URL).fetch_events()

        assert len(responses.calls) == 1


def test_format_from_date_milliseconds():
    """Test ISO rendering with milliseconds and Z suffix."""
    moment = datetime(2024, 1, 15, 10, 30, 5, 123456, tzinfo=timezone.utc)
    assert format_from_date(moment) == '2024-01-15T10:30:05.123Z'

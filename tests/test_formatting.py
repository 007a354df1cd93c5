"""Unit tests for digest formatting."""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from processor.formatting import (
    format_daily_digest,
    format_food_digest,
    format_new_events_digest,
    group_food_items,
    partition_today,
    render_food_item,
)
from processor.models import Event, FoodItem, FoodList

HELSINKI = ZoneInfo('Europe/Helsinki')
BASE_URL = 'http://tko-aly.fi/event/'


def make_event(event_id, name, starts, registration_starts=None):
    return Event(
        id=event_id,
        name=name,
        starts=starts,
        registration_starts=registration_starts,
        deleted=0
    )


class TestNewEventsDigest:
    """Test cases for format_new_events_digest."""

    def test_single_event(self):
        """Test the singular header and line format."""
        event = make_event(3, '  Sitsit ', datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc))

        message = format_new_events_digest([event], HELSINKI, BASE_URL)

        assert message == (
            '*New event:* \n'
            '15.01.2024 17:00 [Sitsit](http://tko-aly.fi/event/3)'
        )

    def test_multiple_events(self):
        """Test the plural header with one line per event."""
        events = [
            make_event(3, 'Sitsit', datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc)),
            make_event(4, 'Sauna', datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)),
        ]

        message = format_new_events_digest(events, HELSINKI, BASE_URL)

        assert message.splitlines() == [
            '*New events:* ',
            '15.01.2024 17:00 [Sitsit](http://tko-aly.fi/event/3)',
            '01.06.2024 15:30 [Sauna](http://tko-aly.fi/event/4)',
        ]

    def test_no_events(self):
        """Test that no events render to an empty string."""
        assert format_new_events_digest([], HELSINKI, BASE_URL) == ''


class TestDailyDigest:
    """Test cases for partition_today and format_daily_digest."""

    now = datetime(2024, 1, 15, 9, 0, tzinfo=HELSINKI)

    def test_only_todays_event(self):
        """Test that an event tomorrow is left out."""
        today = make_event(1, 'Today', datetime(2024, 1, 15, 16, 0, tzinfo=timezone.utc))
        tomorrow = make_event(2, 'Tomorrow', datetime(2024, 1, 16, 16, 0, tzinfo=timezone.utc))

        starting, registrations = partition_today([today, tomorrow], self.now, HELSINKI)
        message = format_daily_digest(starting, registrations, HELSINKI, BASE_URL)

        assert message == '*Today:* \n18:00 [Today](http://tko-aly.fi/event/1)'

    def test_day_boundary_uses_local_time(self):
        """Test that 22:30 UTC on the 15th is the 16th in Helsinki."""
        late = make_event(1, 'Late', datetime(2024, 1, 15, 22, 30, tzinfo=timezone.utc))

        starting, _ = partition_today([late], self.now, HELSINKI)

        assert starting == []

    def test_starts_before_registrations(self):
        """Test that start lines come before registration lines."""
        starting_event = make_event(
            1, 'Sitsit', datetime(2024, 1, 15, 16, 0, tzinfo=timezone.utc)
        )
        registration_event = make_event(
            2,
            'Excursion ',
            datetime(2024, 2, 10, 8, 0, tzinfo=timezone.utc),
            registration_starts=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        )

        starting, registrations = partition_today(
            [registration_event, starting_event], self.now, HELSINKI
        )
        message = format_daily_digest(starting, registrations, HELSINKI, BASE_URL)

        assert message.splitlines() == [
            '*Today:* ',
            '18:00 [Sitsit](http://tko-aly.fi/event/1)',
            'Registration opens at 12:00 [Excursion](http://tko-aly.fi/event/2)',
        ]

    def test_nothing_today(self):
        """Test that empty partitions render to an empty string."""
        assert format_daily_digest([], [], HELSINKI, BASE_URL) == ''


class TestFoodDigest:
    """Test cases for food list formatting."""

    def test_group_order_follows_first_occurrence(self):
        """Test that Soup comes before Salad and holds both soups."""
        items = [
            FoodItem(name='Pea soup', price_name='Soup', warnings=['G', 'L']),
            FoodItem(name='Tomato soup', price_name='Soup'),
            FoodItem(name='Caesar', price_name='Salad'),
        ]

        groups = group_food_items(items)

        assert list(groups) == ['Soup', 'Salad']
        assert [i.name for i in groups['Soup']] == ['Pea soup', 'Tomato soup']

    def test_render_item_warnings(self):
        """Test that warnings are appended only when present."""
        assert render_food_item(FoodItem('Pea soup', 'Soup', ['G', 'L'])) == '  -  Pea soup (G, L)'
        assert render_food_item(FoodItem('Bread', 'Soup', [])) == '  -  Bread'

    def test_full_menu(self):
        """Test the complete menu message."""
        food_list = FoodList(
            restaurant_name='Exactum',
            food_list=[
                FoodItem(name='Pea soup', price_name='Soup', warnings=['G', 'L']),
                FoodItem(name='Tomato soup', price_name='Soup'),
                FoodItem(name='Caesar', price_name='Salad'),
            ]
        )

        message = format_food_digest(food_list)

        assert message == (
            "*Today's food:* \n\n*UniCafe Exactum:* \n\n"
            "Soup\n  -  Pea soup (G, L)\n  -  Tomato soup\n\n\n"
            "Salad\n  -  Caesar\n\n\n"
        )

    def test_empty_menu(self):
        """Test that an empty list renders the no-food message."""
        message = format_food_digest(FoodList(restaurant_name='X', food_list=[]))
        assert message == "*Today's food:* \n\n*UniCafe X:* \n\nno food 😭😭😭"

    def test_missing_menu(self):
        """Test that a missing list renders nothing."""
        assert format_food_digest(FoodList(restaurant_name='X', food_list=None)) == ''

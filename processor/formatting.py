"""Digest rendering for event announcements and food lists."""
from datetime import datetime, tzinfo
from typing import Dict, Iterable, List

from processor.models import Event, FoodItem, FoodList

ANNOUNCEMENT_DATE_FORMAT = '%d.%m.%Y %H:%M'
DAILY_TIME_FORMAT = '%H:%M'

NEW_EVENT_HEADER = '*New event:* \n'
NEW_EVENTS_HEADER = '*New events:* \n'
TODAY_HEADER = '*Today:* \n'
REGISTRATION_PREFIX = 'Registration opens at'
FOOD_HEADER = "*Today's food:* \n\n*UniCafe {restaurant}:* \n\n"
NO_FOOD_MESSAGE = 'no food 😭😭😭'


def event_url(base_url: str, event_id: int) -> str:
    return f"{base_url}{event_id}"


def _link(event: Event, base_url: str) -> str:
    return f"[{event.name.strip()}]({event_url(base_url, event.id)})"


def render_event_line(event: Event, date_format: str, tz: tzinfo, base_url: str) -> str:
    """Render '<start> [name](url)'."""
    starts = event.starts.astimezone(tz).strftime(date_format)
    return f"{starts} {_link(event, base_url)}"


def render_registration_line(event: Event, date_format: str, tz: tzinfo, base_url: str) -> str:
    """Render 'Registration opens at <registration start> [name](url)'."""
    opens = event.registration_starts.astimezone(tz).strftime(date_format)
    return f"{REGISTRATION_PREFIX} {opens} {_link(event, base_url)}"


def _lines(lines: Iterable[str]) -> str:
    return ''.join(f"{line}\n" for line in lines)


def format_new_events_digest(events: List[Event], tz: tzinfo, base_url: str) -> str:
    """
    Format the announcement for newly found events.

    Args:
        events: Newly announced events
        tz: Timezone used for rendering start times
        base_url: Prefix of event page URLs

    Returns:
        Message text, or an empty string when there are no events
    """
    if not events:
        return ''
    header = NEW_EVENTS_HEADER if len(events) > 1 else NEW_EVENT_HEADER
    body = _lines(
        render_event_line(e, ANNOUNCEMENT_DATE_FORMAT, tz, base_url) for e in events
    )
    return (header + body).strip()


def is_same_day(moment: datetime, today: datetime, tz: tzinfo) -> bool:
    return moment.astimezone(tz).date() == today.astimezone(tz).date()


def partition_today(events: List[Event], now: datetime, tz: tzinfo):
    """
    Split events into those starting today and those whose registration opens today.

    An event can appear in both lists.

    Returns:
        Tuple of (starting_today, registration_today)
    """
    starting = [e for e in events if is_same_day(e.starts, now, tz)]
    registrations = [
        e for e in events
        if e.registration_starts is not None and is_same_day(e.registration_starts, now, tz)
    ]
    return starting, registrations


def format_daily_digest(
    starting: List[Event],
    registrations: List[Event],
    tz: tzinfo,
    base_url: str
) -> str:
    """Format the 'today' message. Returns an empty string when both lists are empty."""
    if not starting and not registrations:
        return ''
    body = _lines(
        render_event_line(e, DAILY_TIME_FORMAT, tz, base_url) for e in starting
    ) + _lines(
        render_registration_line(e, DAILY_TIME_FORMAT, tz, base_url) for e in registrations
    )
    return (TODAY_HEADER + body).strip()


def group_food_items(items: List[FoodItem]) -> Dict[str, List[FoodItem]]:
    """Group items by price name, keeping the order in which groups first appear."""
    groups: Dict[str, List[FoodItem]] = {}
    for item in items:
        groups.setdefault(item.price_name, []).append(item)
    return groups


def render_food_item(item: FoodItem) -> str:
    line = f"  -  {item.name}"
    if item.warnings:
        line += f" ({', '.join(item.warnings)})"
    return line


def render_food_groups(groups: Dict[str, List[FoodItem]]) -> str:
    return ''.join(
        f"{key}\n{_lines(render_food_item(item) for item in items)}\n\n"
        for key, items in groups.items()
    )


def food_header(restaurant_name: str) -> str:
    return FOOD_HEADER.format(restaurant=restaurant_name)


def format_food_digest(food_list: FoodList) -> str:
    """
    Format a restaurant's menu.

    Returns:
        Message text, or an empty string when the feed carries no food list
    """
    if food_list.food_list is None:
        return ''
    header = food_header(food_list.restaurant_name)
    if not food_list.food_list:
        return header + NO_FOOD_MESSAGE
    return header + render_food_groups(group_food_items(food_list.food_list))

"""Broadcast jobs: new event announcements, daily digest and food lists."""
import logging
from datetime import datetime, tzinfo
from typing import List, Optional

from processor.announcements import AnnouncementPipeline, filter_deleted
from processor.formatting import (
    format_daily_digest,
    format_food_digest,
    format_new_events_digest,
    partition_today,
)
from processor.models import Event, JobResult

logger = logging.getLogger(__name__)


class PollEventsJob:
    """Announces events that have not been broadcast before."""

    def __init__(
        self,
        pipeline: AnnouncementPipeline,
        broadcaster,
        channel_id: str,
        tz: tzinfo,
        event_url_base: str
    ):
        self.pipeline = pipeline
        self.broadcaster = broadcaster
        self.channel_id = channel_id
        self.tz = tz
        self.event_url_base = event_url_base

    def run(self, events: Optional[List[Event]] = None) -> JobResult:
        """
        Poll for new events and broadcast one digest of them.

        Args:
            events: Already fetched events; fetched by the pipeline when None

        Returns:
            JobResult with the number of events announced
        """
        logger.info("Polling events")
        poll = self.pipeline.poll(events)
        result = JobResult(
            job_mode='pollEvents',
            events_announced=len(poll.announced),
            errors=list(poll.errors)
        )

        if not poll.announced:
            logger.info("No new events to announce")
            return result

        message = format_new_events_digest(poll.announced, self.tz, self.event_url_base)
        if self.broadcaster.send_message(self.channel_id, message, True):
            result.messages_sent += 1
        return result


class DailyDigestJob:
    """Broadcasts events starting today and registrations opening today."""

    def __init__(self, broadcaster, channel_id: str, tz: tzinfo, event_url_base: str):
        self.broadcaster = broadcaster
        self.channel_id = channel_id
        self.tz = tz
        self.event_url_base = event_url_base

    def run(self, events: List[Event], now: Optional[datetime] = None) -> JobResult:
        """
        Args:
            events: Upcoming events; deleted ones are ignored
            now: Reference time, defaults to the current time in the job timezone
        """
        now = now or datetime.now(self.tz)
        result = JobResult(job_mode='todaysEvents')

        starting, registrations = partition_today(filter_deleted(events), now, self.tz)
        logger.info(
            f"{len(starting)} events start today, "
            f"{len(registrations)} registrations open today"
        )

        message = format_daily_digest(starting, registrations, self.tz, self.event_url_base)
        if not message:
            return result

        if self.broadcaster.send_message(self.channel_id, message, True):
            result.messages_sent += 1
        return result


class TodaysEventsJob:
    """Announces new events, then posts the daily digest from the same fetch."""

    def __init__(self, events_client, poll_job: PollEventsJob, daily_job: DailyDigestJob):
        self.events_client = events_client
        self.poll_job = poll_job
        self.daily_job = daily_job

    def run(self, now: Optional[datetime] = None) -> JobResult:
        events = self.events_client.fetch_events()

        # The daily digest is posted even when announcing new events fails
        try:
            poll_result = self.poll_job.run(events)
        except Exception as e:
            error_msg = f"Failed to announce new events: {e}"
            logger.error(error_msg, exc_info=True)
            poll_result = JobResult(job_mode='pollEvents', errors=[error_msg])

        daily_result = self.daily_job.run(events, now=now)

        return JobResult(
            job_mode='todaysEvents',
            messages_sent=poll_result.messages_sent + daily_result.messages_sent,
            events_announced=poll_result.events_announced,
            errors=poll_result.errors + daily_result.errors
        )


class FoodDigestJob:
    """Broadcasts each restaurant's menu to the daily channel."""

    def __init__(self, food_client, broadcaster, channel_id: str, restaurants: List[str]):
        self.food_client = food_client
        self.broadcaster = broadcaster
        self.channel_id = channel_id
        self.restaurants = restaurants

    def run(self) -> JobResult:
        result = JobResult(job_mode='postFood')

        for restaurant in self.restaurants:
            try:
                if self._post_restaurant(restaurant):
                    result.messages_sent += 1
            except Exception as e:
                error_msg = f"Failed to post food list for {restaurant}: {e}"
                logger.error(error_msg, exc_info=True)
                result.errors.append(error_msg)
                continue

        return result

    def _post_restaurant(self, restaurant: str) -> bool:
        """Fetch, format and send one restaurant's menu. Returns True if sent."""
        food_list = self.food_client.fetch_food_list(restaurant)

        message = format_food_digest(food_list)
        if not message:
            logger.info(f"No food list available for {restaurant}")
            return False

        return self.broadcaster.send_message(self.channel_id, message, False)

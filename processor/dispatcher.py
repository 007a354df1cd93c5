"""Job selection wrapped in the store lifecycle."""
import logging
from typing import Optional

from clients.events_api import EventsClient
from clients.food_api import FoodClient
from clients.telegram import TelegramBroadcaster
from config import AppConfig
from processor.announcements import AnnouncementPipeline
from processor.jobs import DailyDigestJob, FoodDigestJob, PollEventsJob, TodaysEventsJob
from processor.models import JobResult
from storage.event_store import AnnouncedEventStore

logger = logging.getLogger(__name__)

JOB_MODES = ('postFood', 'todaysEvents', 'pollEvents')


class JobDispatcher:
    """Runs one job per invocation between migration and connection close."""

    def __init__(
        self,
        config: AppConfig,
        store,
        events_client,
        broadcaster,
        food_client=None
    ):
        self.config = config
        self.store = store
        self.events_client = events_client
        self.broadcaster = broadcaster
        self.food_client = food_client

    @classmethod
    def from_config(cls, config: AppConfig) -> 'JobDispatcher':
        food_client = None
        if config.food_api_url:
            food_client = FoodClient(config.food_api_url, timeout=config.timeout_seconds)

        return cls(
            config=config,
            store=AnnouncedEventStore(config.database_url),
            events_client=EventsClient(
                config.events_api_url,
                timeout=config.timeout_seconds,
                from_offset_hours=config.events_from_offset_hours
            ),
            broadcaster=TelegramBroadcaster(
                config.api_token,
                api_base=config.telegram_api_base,
                timeout=config.timeout_seconds
            ),
            food_client=food_client
        )

    def run(self, job_mode: Optional[str]) -> JobResult:
        """
        Migrate the store, then run the job for job_mode on an open connection.

        Unknown job modes run nothing. Job failures are logged and reported in
        the result; the connection is closed either way.

        Raises:
            MigrationError: If migrations fail; no connection is opened
        """
        self.store.migrate()

        with self.store.connected():
            try:
                return self._execute(job_mode)
            except Exception as e:
                logger.error(
                    f"Job {job_mode} failed: {e}",
                    extra={'error_type': type(e).__name__},
                    exc_info=True
                )
                return JobResult(
                    job_mode=job_mode,
                    errors=[f"{type(e).__name__}: {e}"],
                    failed=True
                )

    def _execute(self, job_mode: Optional[str]) -> JobResult:
        if job_mode not in JOB_MODES:
            logger.info(f"No job for mode {job_mode!r}")
            return JobResult(job_mode=job_mode)

        logger.info(f"Running job {job_mode}")
        if job_mode == 'postFood':
            return self._food_job().run()
        if job_mode == 'todaysEvents':
            return TodaysEventsJob(
                self.events_client, self._poll_job(), self._daily_job()
            ).run()
        return self._poll_job().run()

    def _poll_job(self) -> PollEventsJob:
        return PollEventsJob(
            AnnouncementPipeline(self.events_client, self.store),
            self.broadcaster,
            self.config.announcement_channel_id,
            self.config.tz,
            self.config.event_url_base
        )

    def _daily_job(self) -> DailyDigestJob:
        return DailyDigestJob(
            self.broadcaster,
            self.config.daily_channel_id,
            self.config.tz,
            self.config.event_url_base
        )

    def _food_job(self) -> FoodDigestJob:
        return FoodDigestJob(
            self.food_client,
            self.broadcaster,
            self.config.daily_channel_id,
            self.config.restaurants
        )

"""Runtime configuration loaded from the environment."""
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

EVENTS_API_URL = 'https://event-api.tko-aly.fi/api/events'
EVENT_URL_BASE = 'http://tko-aly.fi/event/'
TELEGRAM_API_BASE = 'https://api.telegram.org'
DEFAULT_TIMEZONE = 'Europe/Helsinki'
DEFAULT_RESTAURANTS = ['exactum', 'chemicum']

REQUIRED_VARIABLES = {
    'API_TOKEN': 'api_token',
    'DATABASE_URL': 'database_url',
    'TELEGRAM_ANNOUNCEMENT_BROADCAST_CHANNEL_ID': 'announcement_channel_id',
    'TELEGRAM_DAILY_BROADCAST_CHANNEL_ID': 'daily_channel_id',
}


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


def env_get(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return the environment value for key, treating blank values as unset."""
    value = os.environ.get(key)
    if value is None or value.strip() == '':
        return default
    return value.strip()


def _env_int(key: str, default: int) -> int:
    raw = env_get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}")


@dataclass
class AppConfig:
    """Configuration shared by every collaborator of a job run."""
    api_token: str
    database_url: str
    announcement_channel_id: str
    daily_channel_id: str
    events_api_url: str = EVENTS_API_URL
    event_url_base: str = EVENT_URL_BASE
    events_from_offset_hours: int = 2
    food_api_url: Optional[str] = None
    restaurants: List[str] = field(default_factory=lambda: list(DEFAULT_RESTAURANTS))
    timezone: str = DEFAULT_TIMEZONE
    telegram_api_base: str = TELEGRAM_API_BASE
    timeout_seconds: int = 30
    log_level: str = 'INFO'

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def require_for(self, job_mode: Optional[str]) -> None:
        """
        Check settings that only some job modes need.

        Raises:
            ConfigError: If job_mode needs a setting that is not configured
        """
        if job_mode == 'postFood' and not self.food_api_url:
            raise ConfigError('FOOD_API_URL is required for postFood')


def load_config() -> AppConfig:
    """
    Build AppConfig from an optional .env file and the process environment.

    Returns:
        Validated AppConfig

    Raises:
        ConfigError: If a required variable is missing or a value is invalid
    """
    env_file = os.environ.get('ENV_FILE')
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    missing = [name for name in REQUIRED_VARIABLES if env_get(name) is None]
    if missing:
        raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

    required = {attr: env_get(name) for name, attr in REQUIRED_VARIABLES.items()}

    restaurants_raw = env_get('FOOD_RESTAURANTS')
    if restaurants_raw:
        restaurants = [r.strip() for r in restaurants_raw.split(',') if r.strip()]
    else:
        restaurants = list(DEFAULT_RESTAURANTS)

    timezone_name = env_get('TIMEZONE', DEFAULT_TIMEZONE)
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"Unknown timezone: {timezone_name}")

    config = AppConfig(
        events_api_url=env_get('EVENTS_API_URL', EVENTS_API_URL),
        event_url_base=env_get('EVENT_URL_BASE', EVENT_URL_BASE),
        events_from_offset_hours=_env_int('EVENTS_FROM_OFFSET_HOURS', 2),
        food_api_url=env_get('FOOD_API_URL'),
        restaurants=restaurants,
        timezone=timezone_name,
        telegram_api_base=env_get('TELEGRAM_API_BASE', TELEGRAM_API_BASE),
        timeout_seconds=_env_int('TIMEOUT_SECONDS', 30),
        log_level=env_get('LOG_LEVEL', 'INFO').upper(),
        **required
    )
    logger.debug(f"Loaded configuration for timezone {config.timezone}")
    return config

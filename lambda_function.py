"""AWS Lambda handler for event announcements and food digests."""
import json
import logging
import os
import sys
import time
from typing import Dict, Any

from config import ConfigError, load_config
from processor.dispatcher import JobDispatcher
from storage.event_store import MigrationError


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Run the job named by event['jobMode'].

    Args:
        event: Scheduler payload, e.g. {"jobMode": "pollEvents"}
        context: Lambda context object

    Returns:
        Response dict with statusCode and job statistics
    """
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)

    start_time = time.time()
    job_mode = (event or {}).get('jobMode')
    logger.info(f"Lambda execution started for job mode {job_mode!r}")

    # Missing configuration and failed migrations abort the process
    try:
        config = load_config()
        config.require_for(job_mode)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    # LOG_LEVEL may come from the .env file read by load_config
    setup_logging(config.log_level)

    dispatcher = JobDispatcher.from_config(config)
    try:
        result = dispatcher.run(job_mode)
    except MigrationError as e:
        logger.error(f"Unable to migrate database: {e}", exc_info=True)
        sys.exit(1)

    duration = time.time() - start_time

    logger.info(
        f"Lambda execution finished for job mode {job_mode!r}",
        extra={
            'duration_seconds': round(duration, 2),
            'messages_sent': result.messages_sent,
            'events_announced': result.events_announced,
            'errors': result.errors
        }
    )

    return {
        'statusCode': 500 if result.failed else 200,
        'body': json.dumps({
            'message': 'Job failed' if result.failed else 'Job completed',
            'job_mode': job_mode,
            'statistics': {
                'messages_sent': result.messages_sent,
                'events_announced': result.events_announced,
                'duration_seconds': round(duration, 2)
            },
            'errors': result.errors
        })
    }

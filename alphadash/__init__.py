import logging
import os
from pathlib import Path

import sentry_sdk
from dotenv import load_dotenv
from sentry_sdk.integrations.logging import LoggingIntegration

__version__ = "0.4.0"

# Load environment variables early so SENTRY_DSN and DATA_* are available for local runs
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")

APP_VERSION = os.getenv("APP_VERSION") or __version__

from alphadash.settings import SentrySettings, get_sentry_settings  # noqa: E402


def init_sentry(sentry: SentrySettings) -> bool:
    """Initialise the Sentry SDK when a DSN is configured."""
    if not sentry.enabled:
        logging.getLogger(__name__).info("Sentry DSN not set; Sentry disabled")
        return False
    sentry_sdk.init(
        dsn=sentry.dsn,
        integrations=[
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=sentry.traces_sample_rate,
        environment=sentry.environment or os.getenv("ENV", "prod"),
        release=APP_VERSION,
    )
    return True


init_sentry(get_sentry_settings())

import logging

from jobboard.core.config import get_settings


def configure_logging():
    """Configure application logging once.

    Level comes from settings (LOG_LEVEL env var). Format carries level,
    logger name and message; swap the handler for JSON output in production.
    """
    if logging.getLogger().handlers:
        # Already configured (uvicorn reload, pytest capture)
        return
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    logging.basicConfig(level=get_settings().log_level.upper(), format=fmt)

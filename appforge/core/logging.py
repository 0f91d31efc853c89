import logging
import sys

from appforge.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [build_id=%(build_id)s stage=%(stage)s] - %(message)s"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


class ContextFormatter(logging.Formatter):
    """Fills in build_id/stage for records logged outside a build."""

    def format(self, record):
        for attr in ("build_id", "stage"):
            if not hasattr(record, attr):
                setattr(record, attr, "-")
        return super().format(record)


def configure_logging(level: int | str | None = None) -> None:
    level = level if level is not None else settings.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler])

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

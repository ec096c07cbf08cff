"""Logging setup."""

import logging
import sys

from app.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once for the process."""
    level_name = (level or settings.log_level).upper()

    root = logging.getLogger()
    root.setLevel(level_name)

    # Avoid stacking handlers when the app factory runs more than once (tests, reload)
    if not any(getattr(h, "_handrest", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._handrest = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # SQL echo is controlled by the engine, keep the logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )

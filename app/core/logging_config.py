import logging
import sys
from typing import Optional

from app.config.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once for the API process.

    Level comes from ``settings.log_level`` unless given explicitly.
    """
    level_name = (level or settings.log_level).upper()

    root = logging.getLogger()
    root.setLevel(level_name)

    if not any(getattr(handler, "_pos_handler", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._pos_handler = True
        root.addHandler(handler)

    # SQL echo is controlled by settings.debug on the engine
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

import logging
import sys

import structlog

from cv_catalog.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger and structlog.

    * Console only (StreamHandler -> stderr)
    * ISO 8601 timestamps
    * JSON lines in prod, coloured console output otherwise
    * Never stacks a second handler on the root logger
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    prod = settings.ENV.lower() == "prod"

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(message)s",
            handlers=[logging.StreamHandler(sys.stderr)],
        )
    else:
        root.setLevel(level)

    processors = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if prod:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for noisy in ("sqlalchemy.engine", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

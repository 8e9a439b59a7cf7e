"""Logging configuration helpers."""

import logging

# The Supabase client logs every HTTP request at INFO through these.
QUIET_LOGGERS = ("httpx", "httpcore", "hpack")


def configure_logging(level: str = "INFO") -> None:
    """Route ``macros_tracker`` logs to one stream handler at ``level``.

    Store request logs from the HTTP stack are held at WARNING unless the
    application itself runs at DEBUG.
    """
    logger = logging.getLogger("macros_tracker")
    logger.setLevel(level.upper())
    library_level = logging.DEBUG if logger.level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

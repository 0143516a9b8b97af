"""
Logging setup shared by the CLI and the API server.
"""

from __future__ import annotations

import logging

from tubelink.api.middleware.request_id import RequestIdFilter

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "tubelink-console"


def configure_logging(level: str = "INFO", verbose: bool = False) -> logging.Logger:
    """
    Attach a console handler to the root ``tubelink`` logger.

    The handler carries a ``RequestIdFilter`` so records emitted while
    serving an API request include the ``X-Request-ID`` value. Calling
    this function more than once replaces the handler rather than
    stacking duplicates.

    Parameters
    ----------
    level : str, optional
        Log level name (default: "INFO").
    verbose : bool, optional
        If True, force DEBUG regardless of ``level`` (default: False).

    Returns
    -------
    logging.Logger
        The configured ``tubelink`` logger.
    """
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger("tubelink")
    for handler in list(root_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(log_level)
    console_handler.addFilter(RequestIdFilter())
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(log_level)
    return root_logger

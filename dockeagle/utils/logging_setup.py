"""Console logging configuration.

Only entry points call ``configure_logging``; library modules just use
``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> logging.Handler:
    """Install a Rich console handler on the root logger.

    Calling it again replaces the handler installed by a previous call.

    Returns:
        The installed handler.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    # The Docker SDK logs every HTTP request at debug level.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return handler

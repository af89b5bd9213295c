from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Install a single stream handler on the root logger.

    The ASGI server or pytest may already have configured handlers; in that case
    only the level is adjusted.
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(level=level, format=_LOG_FORMAT)

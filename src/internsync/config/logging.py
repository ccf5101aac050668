"""Logging setup for the InternSync command line."""

from __future__ import annotations

import logging

# httpx logs every request line at INFO, including PostgREST filter query strings.
QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Initialise the root logger: INFO by default, DEBUG with ``verbose``.

    Transport loggers stay at WARNING unless ``verbose`` is set.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

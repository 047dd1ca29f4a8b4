from __future__ import annotations

import logging
import sys

_PLAIN_FORMAT = "strictlines: %(message)s"
_VERBOSE_FORMAT = "strictlines [%(levelname)s] %(name)s: %(message)s"


def log_level(*, verbose: bool, quiet: bool) -> int:
    """Map the CLI verbosity flags to a logging level. `verbose` wins over `quiet`."""

    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(*, verbose: bool, quiet: bool) -> None:
    """
    Route the `strictlines.*` loggers to stderr.

    stdout stays reserved for reports, so `--format json` output can be piped
    even with `--verbose`.
    """

    logging.basicConfig(
        level=log_level(verbose=verbose, quiet=quiet),
        format=_VERBOSE_FORMAT if verbose else _PLAIN_FORMAT,
        stream=sys.stderr,
        force=True,
    )

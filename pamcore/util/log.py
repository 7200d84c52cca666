"""Logging helpers shared by the clustering code and the apps.
"""

import time
import logging

from contextlib import contextmanager

DEFAULT_FORMAT = '%(asctime)s %(name)-8s %(levelname)-7s %(message)s'
DEFAULT_DATEFMT = '%m-%d-%Y %H:%M:%S'


@contextmanager
def timed(string, log_func):
    """Log the wall-clock time taken by the enclosed block.

    Parameters
    ----------
    string : str
        Format string with a single %-placeholder for the elapsed
        seconds, e.g. "Assigned points in %.2f sec."
    log_func : callable
        Logging method (e.g. `logger.debug`) called with `string` and
        the elapsed time once the block exits.
    """
    tick = time.perf_counter()
    try:
        yield
    finally:
        tock = time.perf_counter()
        log_func(string, (tock - tick))


def configure_logging(level=logging.INFO, fmt=DEFAULT_FORMAT,
                      datefmt=DEFAULT_DATEFMT):
    """Set up root logging the same way for every pamcore app."""
    logging.basicConfig(level=level, format=fmt, datefmt=datefmt)

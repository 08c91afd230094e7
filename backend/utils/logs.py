import functools
import logging
import time
import warnings
from typing import Callable

from cachetools.func import ttl_cache

logger = logging.getLogger("matchup.performance")


def time_it(func):
    """Decorator to measure execution time of async functions"""

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(f"{func.__name__} completed in {elapsed_ms:,.0f} ms.")

    return async_wrapper


def setup_logs(level=logging.DEBUG):
    warnings.simplefilter("default")
    logging.getLogger("matchup").setLevel(level)
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")


loggers: dict[int, Callable] = {}


def ratelimited_log(delay_or_fn: int | Callable, msg=None):
    """Log the same message at most once every `delay` seconds.

    ratelimited_log(logger.warning, "msg") uses the default 60 seconds,
    ratelimited_log(300)(logger.warning, "msg") a custom delay.
    """
    if callable(delay_or_fn):
        logger_method = delay_or_fn
        delay = 60
    else:
        delay = delay_or_fn
        logger_method = None

    if delay not in loggers:

        @ttl_cache(ttl=delay)
        def call(logger_method, message):
            logger_method(message)

        loggers[delay] = call

    if logger_method is not None:
        return loggers[delay](logger_method, msg)
    return loggers[delay]

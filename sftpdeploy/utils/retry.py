"""
Retry decorator for establishing the SSH connection
"""
import functools
import time

from .logging import log, warn
from .. import config as _cfg


def retried(*retry_on: type[BaseException]):
    """
    Decorator: retry fn up to RETRY_MAX times with exponential back-off,
    but only for the given exception types. Anything else propagates at once.
    """
    retry_on = retry_on or (OSError,)

    def decorate(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            delay = _cfg.RETRY_BASE_DELAY
            for attempt in range(1, _cfg.RETRY_MAX + 1):
                try:
                    return fn(*args, **kwargs)
                except retry_on as exc:
                    if attempt == _cfg.RETRY_MAX:
                        raise
                    warn(f"{fn.__name__} failed (attempt {attempt}/{_cfg.RETRY_MAX}): {exc}")
                    log(f"  retrying in {delay:.0f}s …")
                    time.sleep(delay)
                    delay = min(delay * 2, 60)

        return wrapper

    return decorate

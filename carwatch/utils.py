# carwatch/utils.py
"""Shared logging and retry helpers used across the pipeline."""
import os
import logging
import time
from functools import wraps
from dotenv import load_dotenv

load_dotenv()

def get_logger(name=__name__):
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=getattr(logging, level, logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger("carwatch")

def retry(exceptions, tries=3, delay=1, backoff=2, logger=logger, sleep=time.sleep):
    """Call the wrapped function up to `tries` times while it raises `exceptions`.

    Failed attempts are logged with their number and the call's first argument
    (the URL, for page fetches). The last attempt's error reaches the caller.
    """
    def deco_retry(f):
        @wraps(f)
        def f_retry(*args, **kwargs):
            target = args[0] if args else f.__name__
            mdelay = delay
            for attempt in range(1, tries):
                try:
                    return f(*args, **kwargs)
                except exceptions as e:
                    logger.warning("Attempt %d/%d for %s failed: %s, retrying in %s sec",
                                   attempt, tries, target, e, mdelay)
                    sleep(mdelay)
                    mdelay *= backoff
            return f(*args, **kwargs)
        return f_retry
    return deco_retry

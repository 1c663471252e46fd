
import asyncio
import functools
import random
from typing import Type, Tuple, Optional, Callable

from bittrex_async.exceptions import TransportError
from bittrex_async.monitoring.logger import get_logger

logger = get_logger(__name__)


def retry_on_transient_errors(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_backoff: float = 10.0,
    transient_errors: Optional[Tuple[Type[Exception], ...]] = None,
    jitter: float = 0.5,
):
    """
    Decorator to retry async functions on transient errors.

    Implements exponential backoff with jitter. The wrapped call is made at
    most ``max_retries + 1`` times; the last error is re-raised.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial wait time in seconds
        max_backoff: Maximum wait time in seconds, jitter included
        transient_errors: Tuple of exception types to retry on.
                          Defaults to TransportError.
        jitter: Upper bound of the random delay added after each backoff step
    """
    retry_on = transient_errors or (TransportError,)

    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            retry_count = 0
            backoff = min(base_delay, max_backoff)

            while True:
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    if retry_count >= max_retries:
                        logger.warning(
                            f"Max retries ({max_retries}) exhausted for {func.__name__}",
                            error=str(e)
                        )
                        raise

                    logger.warning(
                        f"Transient error in {func.__name__}, retrying ({retry_count + 1}/{max_retries})",
                        error=str(e),
                        wait=f"{backoff:.2f}s"
                    )

                    await asyncio.sleep(backoff)

                    retry_count += 1
                    # Jitter stays under the ceiling
                    backoff = min(backoff * 2 + random.uniform(0, jitter), max_backoff)

        return wrapper
    return decorator

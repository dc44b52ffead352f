import time
import random
from dataclasses import dataclass
from typing import Callable, Any

from Utils.logging_config import get_logger

logger = get_logger("retry")


@dataclass(frozen=True)
class RetryPolicy:
    """
    How many times to try a call and how long to wait between tries.

    Exponential backoff: 2^attempt * base_delay (10s, 20s, 40s ... for 5s),
    plus up to `jitter` seconds of randomness so retries don't line up.
    """

    max_attempts: int = 3
    base_delay: float = 5.0
    jitter: float = 0.0

    def delay_for(self, attempt: int) -> float:
        delay = (2 ** attempt) * self.base_delay
        if self.jitter:
            delay += random.uniform(0, self.jitter)
        return delay


def retry_request(
    func: Callable[[], Any],
    policy: RetryPolicy,
    description: str = "request",
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Call `func` until it succeeds or the policy runs out of attempts.

    Every exception counts as a failed attempt; the last one is re-raised
    so the caller decides how to report exhaustion.
    """

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return func()

        except Exception as e:
            logger.warning(f"Attempt {attempt} failed for {description}: {e}")

            if attempt == policy.max_attempts:
                logger.error(f"All {policy.max_attempts} attempts failed for {description}")
                raise

            sleep_time = policy.delay_for(attempt)
            logger.info(f"Waiting {sleep_time:.0f} seconds before retry...")
            sleep(sleep_time)

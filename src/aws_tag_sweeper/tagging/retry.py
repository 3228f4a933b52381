"""
Bounded retry with exponential backoff for tag-apply calls
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from tenacity import RetryCallState, RetryError, Retrying, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


@dataclass
class AttemptResult:
    """Outcome of a retried operation"""
    succeeded: bool
    attempt_count: int
    last_error: Optional[BaseException] = None


class RetryExecutor:
    """Runs an operation up to max_attempts times, backing off between failures"""

    def __init__(self,
                 max_attempts: int = 3,
                 base_delay: float = 1.0,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the executor

        Args:
            max_attempts: Total number of attempts, including the first
            base_delay: Wait after the first failure; doubles after each further failure
            sleep: Function used to wait (injectable for tests)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.sleep = sleep

    def attempt(self, operation: Callable[[], object], description: str = 'operation') -> AttemptResult:
        """
        Run the operation until it succeeds or the attempts run out

        Operation errors are logged and reported in the result, never raised.
        """
        def log_failure(retry_state: RetryCallState):
            error = retry_state.outcome.exception()
            logger.error(f"Error tagging {description} "
                         f"(attempt {retry_state.attempt_number}/{self.max_attempts}): {error}")

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay),
            sleep=self.sleep,
            after=log_failure,
            reraise=False
        )

        attempt_count = 0
        try:
            for attempt in retrying:
                with attempt:
                    attempt_count = attempt.retry_state.attempt_number
                    operation()
        except RetryError as e:
            last_attempt = e.last_attempt
            logger.error(f"Failed to tag {description} after {last_attempt.attempt_number} attempts")
            return AttemptResult(
                succeeded=False,
                attempt_count=last_attempt.attempt_number,
                last_error=last_attempt.exception()
            )

        return AttemptResult(succeeded=True, attempt_count=attempt_count)

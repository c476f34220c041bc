import time
from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from imbue.condition_waiter.timing import format_ms


class WaitProgress(BaseModel):
    """What the polling loop reports back to its log span while it runs."""

    model_config = ConfigDict(
        frozen=False,
        extra="forbid",
    )

    probe_calls: int = Field(default=0, description="Number of times the probe has been called so far")
    outcome: str = Field(default="gave up", description="How the wait ended, as shown in the closing log line")


@contextmanager
def log_wait_span(timeout_ms: int | float, interval_ms: int | float) -> Iterator[WaitProgress]:
    """Log the start and end of one wait, with the timing options bound as context.

    Entry is logged at DEBUG. On exit the outcome, probe call count and elapsed
    time are logged at DEBUG; if an error escapes, its type is logged instead
    and the error is re-raised. Messages logged inside the span (including from
    the probe and hooks, in the same task) carry timeout_ms and interval_ms as
    extra fields.
    """
    progress = WaitProgress()
    with logger.contextualize(timeout_ms=timeout_ms, interval_ms=interval_ms):
        logger.debug(
            "Waiting up to {} ms for condition, polling every {} ms", format_ms(timeout_ms), format_ms(interval_ms)
        )
        start_time = time.monotonic()
        try:
            yield progress
        except BaseException as e:
            logger.debug(
                "Wait failed with {} after {} probe calls in {:.5f} sec",
                type(e).__name__,
                progress.probe_calls,
                time.monotonic() - start_time,
            )
            raise
        logger.debug(
            "Wait {} after {} probe calls in {:.5f} sec",
            progress.outcome,
            progress.probe_calls,
            time.monotonic() - start_time,
        )

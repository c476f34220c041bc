from collections.abc import Iterator
from typing import Any

import pytest
from loguru import logger

from imbue.condition_waiter.defaults import reset_default_options


@pytest.fixture(autouse=True)
def reset_waiter_defaults() -> Iterator[None]:
    """Keep process-wide default options from leaking between tests."""
    reset_default_options()
    yield
    reset_default_options()


@pytest.fixture
def captured_log_records() -> Iterator[list[dict[str, Any]]]:
    """Collect every loguru record (TRACE and up) emitted during the test."""
    records: list[dict[str, Any]] = []

    def sink(message: Any) -> None:
        records.append(message.record)

    handler_id = logger.add(sink, level="TRACE", format="{message}")
    try:
        yield records
    finally:
        logger.remove(handler_id)

"""Scripted probes and recording hooks for exercising the waiter in tests."""

from collections.abc import Sequence
from typing import Any


class ScriptedProbe:
    """Probe that plays back a sequence of outcomes, one per call.

    Outcomes that are exceptions are raised, everything else is returned.
    Once the script is exhausted the last outcome repeats. Set is_async to get
    an awaitable back from each call instead of the plain value.
    """

    def __init__(self, outcomes: Sequence[Any], is_async: bool = False) -> None:
        if not outcomes:
            raise ValueError("ScriptedProbe needs at least one outcome")
        self.outcomes = tuple(outcomes)
        self.is_async = is_async
        self.call_count = 0

    def _next_outcome(self) -> Any:
        outcome = self.outcomes[min(self.call_count, len(self.outcomes) - 1)]
        self.call_count += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def __call__(self) -> Any:
        if self.is_async:
            return self._next_outcome_async()
        return self._next_outcome()

    async def _next_outcome_async(self) -> Any:
        return self._next_outcome()


class CallRecorder:
    """Hook that records the positional arguments of every call.

    If error is given it is raised on every call; otherwise return_value is returned.
    An optional shared timeline gets the recorder's name appended on each call,
    which lets tests assert the relative order of several hooks.
    """

    def __init__(
        self,
        name: str = "hook",
        return_value: Any = None,
        error: Exception | None = None,
        timeline: list[str] | None = None,
    ) -> None:
        self.name = name
        self.return_value = return_value
        self.error = error
        self.timeline = timeline
        self.calls: list[tuple[Any, ...]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        if self.timeline is not None:
            self.timeline.append(self.name)
        if self.error is not None:
            raise self.error
        return self.return_value

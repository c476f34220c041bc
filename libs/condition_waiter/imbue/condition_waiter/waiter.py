"""Polling loop that turns an eventually-true condition into a single awaitable call.

A wait runs `before`, then calls the probe every `interval_ms` until the
result is classified as a success or `timeout_ms` has elapsed, then runs
`after` exactly once and either returns the result or raises `waiter_error`.
"""

import asyncio
import inspect
from collections.abc import Callable
from collections.abc import Mapping
from typing import Any
from typing import Final

from loguru import logger

from imbue.condition_waiter.data_types import ResultAnalyser
from imbue.condition_waiter.data_types import WaiterOptions
from imbue.condition_waiter.defaults import resolve_options
from imbue.condition_waiter.logging import WaitProgress
from imbue.condition_waiter.logging import log_wait_span
from imbue.condition_waiter.timing import format_ms
from imbue.condition_waiter.timing import now_ms
from imbue.condition_waiter.timing import sleep_ms
from imbue.condition_waiter.validation import require_callable

# Incremented before each probe call, so the first cycle is reported as 2.
_INITIAL_CYCLE_COUNT: Final[int] = 1

_POSITIONAL_KINDS: Final = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def _call_hook(hook: Callable[..., Any] | None, *args: Any) -> Any:
    if hook is None:
        return None
    return await _resolve(hook(*args))


def _wants_cycle_count(probe: Callable[..., Any]) -> bool:
    """Whether the probe asks for the cycle counter.

    Only a probe with exactly one required positional parameter, or with no
    required positional parameters but a *args, gets the counter. Defaulted
    parameters (e.g. is_ready(verbose=False)) are left to their defaults.
    """
    try:
        signature = inspect.signature(probe)
    except (TypeError, ValueError):
        return False
    parameters = list(signature.parameters.values())
    required_positional = [
        parameter
        for parameter in parameters
        if parameter.kind in _POSITIONAL_KINDS and parameter.default is inspect.Parameter.empty
    ]
    if required_positional:
        return len(required_positional) == 1
    return any(parameter.kind is inspect.Parameter.VAR_POSITIONAL for parameter in parameters)


async def _is_success(result: Any, analyse_result: ResultAnalyser | None) -> bool:
    if analyse_result is not None and await _resolve(analyse_result(result)):
        return True
    return bool(result)


def default_failure_message(timeout_ms: int | float, last_error: BaseException | None) -> str:
    message = f"Required condition was not achieved during {format_ms(timeout_ms)} ms."
    if last_error is None:
        return message
    return f"{message} {type(last_error).__name__}: {last_error}"


async def _failure_message(options: WaiterOptions, last_error: BaseException | None) -> str:
    if isinstance(options.message, str):
        return options.message
    if options.message is not None:
        return str(await _resolve(options.message(options.timeout_ms, last_error)))
    return default_failure_message(options.timeout_ms, last_error)


async def _run_wait(probe: Callable[..., Any], options: WaiterOptions, progress: WaitProgress) -> Any:
    start = now_ms()
    await _call_hook(options.before)

    passes_cycle_count = _wants_cycle_count(probe)
    cycle = _INITIAL_CYCLE_COUNT
    result: Any = None
    last_error: BaseException | None = None
    try:
        while now_ms() - start < options.timeout_ms:
            cycle += 1
            progress.probe_calls = cycle - _INITIAL_CYCLE_COUNT
            try:
                result = await _resolve(probe(cycle) if passes_cycle_count else probe())
            except Exception as e:
                if not options.false_if_error:
                    raise
                logger.debug("Probe raised on cycle {}: {!r}", cycle, e)
                last_error = e
                result = False
            else:
                # a clean call is enough; analyse_result is not consulted
                if options.stop_if_no_error:
                    progress.outcome = "stopped without error"
                    return result

            if await _is_success(result, options.analyse_result):
                progress.outcome = "succeeded"
                return result

            elapsed_ms = now_ms() - start
            logger.trace("Condition not met on cycle {} after {:.0f} ms", cycle, elapsed_ms)
            try:
                await _call_hook(options.call_every_cycle, cycle, elapsed_ms, last_error)
            except Exception as e:
                logger.debug("call_every_cycle raised on cycle {}: {!r}", cycle, e)
                last_error = e

            await sleep_ms(options.interval_ms)
    finally:
        await _call_hook(options.after)

    logger.debug("Condition was not met within {} ms", format_ms(options.timeout_ms))
    if options.dont_throw:
        return result
    raise options.waiter_error(await _failure_message(options, last_error))


async def wait_for(
    probe: Callable[..., Any],
    options: WaiterOptions | Mapping[str, Any] | None = None,
) -> Any:
    """Call probe until it reports success or the timeout elapses.

    The probe may be sync or async. If it has exactly one required positional
    parameter it receives the current cycle number there. Options are layered
    over the process-wide defaults (see defaults.set_default_options); all
    arguments are validated before any hook or probe runs.

    Returns the first successful probe result. On timeout, returns the last
    (falsy) result when dont_throw is set, and otherwise raises
    options.waiter_error (WaiterTimeoutError by default). With dont_throw, a
    falsy return does not distinguish "probe returned falsy" from "timed out".
    """
    resolved = resolve_options(options)
    require_callable("probe", probe)
    with log_wait_span(resolved.timeout_ms, resolved.interval_ms) as progress:
        return await _run_wait(probe, resolved, progress)


def wait_until(
    probe: Callable[..., Any],
    options: WaiterOptions | Mapping[str, Any] | None = None,
) -> Any:
    """Blocking variant of wait_for for callers that are not running an event loop."""
    return asyncio.run(wait_for(probe, options))

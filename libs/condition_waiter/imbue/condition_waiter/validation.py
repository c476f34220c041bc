"""Argument-shape checks for wait_for.

All checks raise WaiterArgumentError (a TypeError) naming the offending
argument and the kind of value that was actually passed, so that a malformed
call fails before any hook or probe runs.
"""

import inspect
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any
from typing import Final

from imbue.condition_waiter.errors import UnknownWaiterOptionError
from imbue.condition_waiter.errors import WaiterArgumentError

_CALLABLE_DESCRIPTION: Final[str] = "a function, async function or lambda"

NUMBER_OPTIONS: Final[tuple[str, ...]] = ("timeout_ms", "interval_ms")
FLAG_OPTIONS: Final[tuple[str, ...]] = ("dont_throw", "false_if_error", "stop_if_no_error")
HOOK_OPTIONS: Final[tuple[str, ...]] = ("before", "after", "call_every_cycle", "analyse_result", "waiter_error")


def describe_kind(value: Any) -> str:
    """Return a short name for the kind of a value, e.g. 'int', 'NoneType' or 'async function'."""
    if inspect.iscoroutinefunction(value):
        return "async function"
    if inspect.isfunction(value) or inspect.ismethod(value) or inspect.isbuiltin(value):
        return "function"
    if inspect.isclass(value):
        return f"class {value.__name__}"
    return type(value).__name__


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a duration
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def require_callable(argument: str, value: Any) -> None:
    if not callable(value):
        raise WaiterArgumentError(
            f"wait_for(): {argument} should be {_CALLABLE_DESCRIPTION}, current arg is {describe_kind(value)}"
        )


def require_number(argument: str, value: Any) -> None:
    if not is_number(value):
        raise WaiterArgumentError(f"wait_for(): {argument} should be a number, current arg is {describe_kind(value)}")


def require_flag(argument: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise WaiterArgumentError(f"wait_for(): {argument} should be a bool, current arg is {describe_kind(value)}")


def require_options_container(value: Any) -> None:
    """Check that the options argument is a mapping of option names, not a primitive."""
    if not isinstance(value, Mapping):
        raise WaiterArgumentError(
            f"wait_for(): options should be a mapping or WaiterOptions, current arg is {describe_kind(value)}"
        )


def check_option_kinds(options: Mapping[str, Any], known_names: Iterable[str]) -> None:
    """Validate every entry of a raw options mapping.

    None is accepted for hooks and message and means "not configured".
    Numbers and flags must always be real values.
    """
    known = frozenset(known_names)
    for name, value in options.items():
        if name not in known:
            raise UnknownWaiterOptionError(str(name))
        argument = f'option "{name}"'
        if name in NUMBER_OPTIONS:
            require_number(argument, value)
        elif name in FLAG_OPTIONS:
            require_flag(argument, value)
        elif name in HOOK_OPTIONS:
            if value is not None:
                require_callable(argument, value)
        elif name == "message" and value is not None and not isinstance(value, str) and not callable(value):
            raise WaiterArgumentError(
                f"wait_for(): {argument} should be a string or {_CALLABLE_DESCRIPTION}, "
                f"current arg is {describe_kind(value)}"
            )

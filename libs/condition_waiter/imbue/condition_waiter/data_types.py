from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator

from imbue.condition_waiter.errors import WaiterTimeoutError
from imbue.condition_waiter.validation import check_option_kinds
from imbue.condition_waiter.validation import require_options_container

# Hooks may be plain functions or return an awaitable; the waiter awaits uniformly.
LifecycleHook = Callable[[], Any]
CycleHook = Callable[[int, float, BaseException | None], Any]
ResultAnalyser = Callable[[Any], bool | Awaitable[bool]]
MessageFactory = Callable[[int | float, BaseException | None], str | Awaitable[str]]
WaiterErrorFactory = Callable[[str], BaseException]


class WaiterOptions(BaseModel):
    """Immutable set of options controlling a single wait.

    Fields that were passed explicitly are tracked (model_fields_set) so that
    options can be layered: built-in defaults < process-wide defaults < call-site options.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    timeout_ms: int | float = Field(default=5000, description="Maximum wall-clock time to keep polling")
    interval_ms: int | float = Field(default=250, description="Delay between unsuccessful probe attempts")
    dont_throw: bool = Field(
        default=False,
        description="On exhaustion, return the last result instead of raising",
    )
    false_if_error: bool = Field(
        default=True,
        description="Treat an error raised by the probe as a falsy result instead of propagating it",
    )
    stop_if_no_error: bool = Field(
        default=False,
        description="Succeed as soon as a probe call completes without error, whatever it returns",
    )
    message: str | MessageFactory | None = Field(
        default=None,
        description="Failure message, or a function of (timeout_ms, last_error) producing it",
    )
    waiter_error: WaiterErrorFactory = Field(
        default=WaiterTimeoutError,
        description="Builds the exception raised on exhaustion from the failure message",
    )
    analyse_result: ResultAnalyser | None = Field(
        default=None,
        description="Custom success classifier for the probe result",
    )
    before: LifecycleHook | None = Field(default=None, description="Called once before the first probe call")
    after: LifecycleHook | None = Field(
        default=None,
        description="Called exactly once after polling stops, whatever the outcome",
    )
    call_every_cycle: CycleHook | None = Field(
        default=None,
        description="Called with (cycle, elapsed_ms, last_error) after each unsuccessful cycle",
    )

    @model_validator(mode="before")
    @classmethod
    def _check_option_kinds(cls, data: Any) -> Any:
        if isinstance(data, WaiterOptions):
            return data
        require_options_container(data)
        check_option_kinds(data, cls.model_fields)
        return data

    def explicit_options(self) -> dict[str, Any]:
        """Return only the options that were set explicitly, by name."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def layered_over(self, defaults: "WaiterOptions") -> "WaiterOptions":
        """Return defaults with every explicitly set option of self applied on top."""
        return defaults.model_copy(update=self.explicit_options())


def coerce_options(value: WaiterOptions | Mapping[str, Any] | None) -> WaiterOptions:
    """Turn the options argument of wait_for into WaiterOptions.

    Raises WaiterArgumentError when value is neither a mapping nor WaiterOptions,
    or when any entry has the wrong kind.
    """
    if value is None:
        return WaiterOptions()
    if isinstance(value, WaiterOptions):
        return value
    if isinstance(value, Mapping):
        return WaiterOptions.model_validate(dict(value))
    return WaiterOptions.model_validate(value)

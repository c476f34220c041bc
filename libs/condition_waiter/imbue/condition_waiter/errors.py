class BaseWaiterError(Exception):
    """Base exception for all condition waiter errors."""


class WaiterArgumentError(BaseWaiterError, TypeError):
    """Raised before polling starts when wait_for is called with a malformed argument."""


class UnknownWaiterOptionError(WaiterArgumentError):
    """Raised when an options mapping contains a key that is not a waiter option."""

    def __init__(self, option_name: str) -> None:
        self.option_name = option_name
        super().__init__(f"wait_for(): unknown waiter option {option_name!r}")


class WaiterTimeoutError(BaseWaiterError, TimeoutError):
    """Raised when the waited-for condition is not achieved before the deadline.

    This is the default waiter_error. Callers can substitute any callable that
    builds an exception from the resolved failure message.
    """

"""Process-wide default waiter options.

The store starts empty and is replaced wholesale by set_default_options. It is
read once at the start of every wait and is not synchronized: set it during
process initialization, not while waits are in flight (last writer wins).
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from imbue.condition_waiter.data_types import WaiterOptions
from imbue.condition_waiter.data_types import coerce_options

_default_options: WaiterOptions = WaiterOptions()


def get_default_options() -> WaiterOptions:
    return _default_options


def set_default_options(options: WaiterOptions | Mapping[str, Any]) -> None:
    """Replace the whole default store; previously set defaults are discarded, not merged."""
    global _default_options
    _default_options = coerce_options(options)
    logger.debug("Replaced default waiter options: {}", sorted(_default_options.model_fields_set))


def reset_default_options() -> None:
    """Restore the empty default store."""
    global _default_options
    _default_options = WaiterOptions()


def resolve_options(call_site: WaiterOptions | Mapping[str, Any] | None) -> WaiterOptions:
    """Layer call-site options over the current process-wide defaults."""
    return coerce_options(call_site).layered_over(_default_options)

import pytest

from imbue.condition_waiter.data_types import WaiterOptions
from imbue.condition_waiter.defaults import get_default_options
from imbue.condition_waiter.defaults import reset_default_options
from imbue.condition_waiter.defaults import resolve_options
from imbue.condition_waiter.defaults import set_default_options
from imbue.condition_waiter.errors import WaiterArgumentError


def test_default_store_starts_empty() -> None:
    assert get_default_options().explicit_options() == {}


def test_set_default_options_accepts_mapping() -> None:
    set_default_options({"timeout_ms": 100})

    assert get_default_options().timeout_ms == 100.0


def test_set_default_options_accepts_waiter_options() -> None:
    options = WaiterOptions(interval_ms=20)

    set_default_options(options)

    assert get_default_options() is options


def test_set_default_options_replaces_instead_of_merging() -> None:
    set_default_options({"timeout_ms": 100, "dont_throw": True})
    set_default_options({"interval_ms": 20})

    assert get_default_options().explicit_options() == {"interval_ms": 20.0}
    assert get_default_options().dont_throw is False


def test_set_default_options_validates() -> None:
    with pytest.raises(WaiterArgumentError):
        set_default_options({"timeout_ms": "soon"})

    assert get_default_options().explicit_options() == {}


def test_reset_default_options() -> None:
    set_default_options({"timeout_ms": 100})

    reset_default_options()

    assert get_default_options() == WaiterOptions()


def test_resolve_options_precedence() -> None:
    set_default_options({"timeout_ms": 100, "interval_ms": 20})

    resolved = resolve_options({"interval_ms": 5})

    # call site > process defaults > built-in defaults
    assert resolved.interval_ms == 5.0
    assert resolved.timeout_ms == 100.0
    assert resolved.false_if_error is True


def test_resolve_options_reads_current_defaults_each_time() -> None:
    set_default_options({"timeout_ms": 100})
    first = resolve_options(None)
    set_default_options({"timeout_ms": 300})
    second = resolve_options(None)

    assert first.timeout_ms == 100.0
    assert second.timeout_ms == 300.0

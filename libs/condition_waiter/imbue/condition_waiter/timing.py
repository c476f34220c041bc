import asyncio
import time


def now_ms() -> float:
    """Current reading of the monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


def format_ms(milliseconds: int | float) -> str:
    """Render a duration without exponent notation, e.g. 3600000 or 0.5."""
    if float(milliseconds).is_integer():
        return f"{milliseconds:.0f}"
    return f"{milliseconds:f}".rstrip("0").rstrip(".")


async def sleep_ms(milliseconds: int | float = 5 * 1000) -> None:
    """Suspend the current task for the given number of milliseconds."""
    await asyncio.sleep(max(milliseconds, 0) / 1000.0)

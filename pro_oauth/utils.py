"""Small helpers shared by the PRO auth modules"""

import inspect
import time
from typing import Any, Awaitable, Callable, Optional, Union

SaveCallback = Callable[[], Union[Awaitable[Any], None]]


def now_ms() -> int:
    """Current wall clock time in epoch milliseconds"""
    return int(time.time() * 1000)


async def maybe_await(value: Any) -> Any:
    """Await value if it is awaitable, otherwise return it unchanged"""
    if inspect.isawaitable(value):
        return await value
    return value


async def call_save(save: Optional[SaveCallback]) -> None:
    """Invoke the host persistence hook if one was given"""
    if save is None:
        return
    await maybe_await(save())

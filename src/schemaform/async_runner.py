"""Helpers to run async operations from sync or async contexts."""

from __future__ import annotations

import asyncio
import inspect
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any, TypeVar, cast

from schemaform.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Coroutine

T = TypeVar("T")


async def resolve_awaitable(value: T | Awaitable[T]) -> T:
    """Await a value returned by a sync-or-async callable.

    Args:
        value: Plain result or awaitable produced by a callback.

    Returns:
        The awaited result, or the value itself when not awaitable.
    """
    if inspect.isawaitable(value):
        return await cast("Awaitable[T]", value)
    return cast("T", value)


def _run_in_background_thread(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine in a dedicated thread with its own event loop.

    Args:
        coro: The coroutine to run.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _runner() -> None:
        try:
            output.put(asyncio.run(coro))
        except BaseException as exc:  # noqa: BLE001
            output.put(exc)

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    result = output.get()
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a form coroutine from both sync and async contexts.

    Without a running loop the coroutine runs through `asyncio.run`; inside a
    running loop it runs on a dedicated thread so the caller can stay sync.

    Args:
        coro: The coroutine to run.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_in_background_thread(coro)

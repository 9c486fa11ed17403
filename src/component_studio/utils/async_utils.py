"""
Async Utilities
===============

Run async code (the aiohttp completion client) from synchronous Flask
request handlers, whether or not an event loop is already running in the
current thread.
"""

import asyncio
import logging
import threading
from typing import Any, Coroutine, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def run_async_safely(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine from a synchronous context.

    If a loop is already running in this thread the coroutine is executed
    on a fresh loop in a helper thread; otherwise a new loop is created for
    this thread and closed afterwards.

    Raises:
        Any exception raised by the coroutine
    """
    try:
        asyncio.get_running_loop()
        logger.debug("Running async code via separate thread (event loop already running)")
        return _run_in_new_thread(coro)
    except RuntimeError:
        pass

    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        return loop.run_until_complete(coro)
    finally:
        asyncio.set_event_loop(None)
        loop.close()


def _run_in_new_thread(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine in a new thread with its own event loop."""
    result = None
    exception = None

    def _thread_runner():
        nonlocal result, exception
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            result = loop.run_until_complete(coro)
        except Exception as e:
            exception = e
        finally:
            loop.close()

    thread = threading.Thread(target=_thread_runner, daemon=True)
    thread.start()
    thread.join()

    if exception is not None:
        raise exception
    return result  # type: ignore[return-value]


__all__ = ['run_async_safely']

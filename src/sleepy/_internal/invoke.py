"""Invoke helper — call sync or async capability methods uniformly.

Capability methods can be ``def`` or ``async def``. Plain functions run
in anyio's worker thread pool so a blocking handler never stalls the
event loop; coroutine functions are awaited in place.

Usage::

    from sleepy._internal.invoke import invoke

    result = await invoke(handler, form, thread_limit=40)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(handler: Any, *args: Any, thread_limit: int | None = None) -> Any:
    """Call *handler* with *args* and return its (awaited) result.

    *thread_limit* resizes the event loop's default thread limiter,
    which caps how many sync handlers run at once on that loop. Calls
    beyond the cap wait for a free thread.
    """
    if inspect.iscoroutinefunction(handler):
        return await handler(*args)

    limiter = anyio.to_thread.current_default_thread_limiter()
    if thread_limit is not None and limiter.total_tokens != thread_limit:
        limiter.total_tokens = thread_limit

    result = await anyio.to_thread.run_sync(functools.partial(handler, *args), limiter=limiter)
    if inspect.isawaitable(result):
        result = await result
    return result

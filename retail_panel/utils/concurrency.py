"""Concurrency helpers for the async service layer."""
import asyncio
from typing import Any, Awaitable, Tuple


async def join_all_or_fail(*awaitables: Awaitable[Any]) -> Tuple[Any, ...]:
    """
    Run a fixed set of independent awaitables as one unit.

    Returns every result, in argument order, when all of them succeed. As
    soon as any awaitable fails the still-pending siblings are cancelled and
    a failure is raised; no partial result is ever returned. When several
    had already failed by then, the one listed first in the arguments wins.
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    if not tasks:
        return ()

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    failed = [task for task in tasks if task in done and not task.cancelled() and task.exception()]
    if failed:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        raise failed[0].exception()

    return tuple(task.result() for task in tasks)

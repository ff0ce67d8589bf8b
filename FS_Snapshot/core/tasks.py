import asyncio
from typing import Awaitable, Callable, Iterable, List, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def map_concurrently(
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
) -> List[R]:
    """
    Run func over items, one task per item, and join on all of them.

    Results come back in the order of `items`, not completion order. On the
    first failure the remaining tasks are cancelled and awaited before the
    error is re-raised, so the caller sees exactly one exception.
    """
    tasks = [asyncio.ensure_future(func(item)) for item in items]
    if not tasks:
        return []

    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

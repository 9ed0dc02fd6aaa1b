from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, List, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def bounded_map(
    items: Iterable[T],
    func: Callable[[T], Awaitable[R]],
    concurrency: int,
) -> List[R]:
    """
    Run ``func`` over ``items`` with at most ``concurrency`` calls in flight.

    Items are pulled from a queue by a fixed set of workers; each worker keeps
    its own result list and the lists are joined once every worker is done, so
    results come back in completion order, not input order.

    ``func`` is expected to absorb per-item failures itself. Anything it lets
    escape cancels the remaining workers and is re-raised once they stop.
    """
    if concurrency <= 0:
        raise ValueError("concurrency must be > 0")

    q: asyncio.Queue[T] = asyncio.Queue()
    for item in items:
        q.put_nowait(item)

    async def worker() -> List[R]:
        out: List[R] = []
        while True:
            try:
                item = q.get_nowait()
            except asyncio.QueueEmpty:
                return out
            out.append(await func(item))

    workers = [asyncio.create_task(worker()) for _ in range(min(concurrency, q.qsize()))]
    if not workers:
        return []
    try:
        chunks = await asyncio.gather(*workers)
    except BaseException:
        for task in workers:
            task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        raise
    return [result for chunk in chunks for result in chunk]

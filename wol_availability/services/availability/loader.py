"""
Request coalescing for per-member availability reads.

Concurrent load(member, start, end) calls made in the same event-loop tick are grouped by their exact
[start, end) and answered with one batched fetch per group; each caller gets only its own member's rows.
The pending table is flushed by a loop.call_soon hook (end of the current tick) or by flush().
Nothing is cached between batches: a request made after a flush starts a new batch.
"""
import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import datetime

from wol_availability.services.availability.intervals import TimeRange, intersects
from wol_availability.services.availability.types import Availability, as_utc

logger = logging.getLogger(__name__)

BatchFetch = Callable[[Sequence[int], datetime, datetime], list[Availability]]


@dataclass
class _Group:
    window: TimeRange
    waiters: list[tuple[int, asyncio.Future]] = field(default_factory=list)

    @property
    def members(self) -> list[int]:
        return list(dict.fromkeys(m for m, _ in self.waiters))


class AvailabilityLoader:
    """
    Coalesces fetch_member_availabilities calls. batch_fetch is typically
    AvailabilityStore.fetch_members_availabilities; it is synchronous and runs in an executor thread.
    """

    def __init__(self, batch_fetch: BatchFetch, executor: Executor | None = None):
        self._batch_fetch = batch_fetch
        self._executor = executor
        self._pending: dict[TimeRange, _Group] = {}
        self._scheduled = False
        self._inflight: set[asyncio.Task] = set()

    async def load(self, member: int, start: datetime, end: datetime) -> list[Availability]:
        """Same result as fetch_member_availabilities(member, start, end); unordered."""
        loop = asyncio.get_running_loop()
        window = TimeRange(as_utc(start), as_utc(end))
        fut = loop.create_future()
        self._pending.setdefault(window, _Group(window)).waiters.append((member, fut))
        if not self._scheduled:
            self._scheduled = True
            loop.call_soon(self._dispatch)
        return await fut

    async def load_many(self, members: Iterable[int], start: datetime, end: datetime) -> list[list[Availability]]:
        return list(await asyncio.gather(*(self.load(m, start, end) for m in members)))

    async def flush(self) -> None:
        """Dispatch pending requests now and wait for every in-flight batch to finish."""
        self._dispatch()
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    def _dispatch(self) -> None:
        self._scheduled = False
        if not self._pending:
            return
        groups, self._pending = list(self._pending.values()), {}
        for group in groups:
            task = asyncio.get_running_loop().create_task(self._run(group))
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

    async def _run(self, group: _Group) -> None:
        loop = asyncio.get_running_loop()
        start, end = group.window
        members = group.members
        logger.debug("Batched availability fetch: %s members for %s..%s", len(members), start, end)
        try:
            rows = await loop.run_in_executor(self._executor, self._batch_fetch, members, start, end)
        except Exception as e:
            for _, fut in group.waiters:
                if not fut.done():
                    fut.set_exception(e)
            return

        by_member: dict[int, list[Availability]] = {}
        for r in rows:
            if intersects(r.range, group.window):
                by_member.setdefault(r.member, []).append(r)
        for member, fut in group.waiters:
            if not fut.done():
                fut.set_result(list(by_member.get(member, [])))

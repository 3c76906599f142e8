"""
Paging search client.

This module provides SearchClient, which turns one logical query into as many
search requests as it takes to walk the whole result set using
`search_after` cursors, and reports progress through SearchEvents.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ._logging import logger, redact_query
from .config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    SearchOptions,
    SortOrder,
)
from .events import EventType, SearchEvents
from .exceptions import ResultSizeExceededError
from .pagination import Item, ResultPage
from .query import build_search_request, next_cursor

SearchFunction = Callable[[dict[str, Any]], Awaitable["ResultPage | Mapping[str, Any]"]]


@dataclass(eq=False)
class _Session:
    """Bookkeeping for a single get() call, from first request to `end`."""

    query: Mapping[str, Any] | None
    canceled: bool = False
    results: list[Item] = field(default_factory=list)
    result_count: int | None = None
    pages: int = 0
    # Extra listeners that only hear this session, used by stream()
    sink: SearchEvents | None = None


class SearchClient:
    """
    Client for a paginated search endpoint.

    Handles paging through results, the result size guard and canceling a
    search. The endpoint itself is reached through `search_fn`, an async
    callable that takes the request dict and returns one page as a
    ResultPage or a mapping with `total`, `rows` and optionally `replies`.

    Events (see EventType):
        resultCount: total number of matches, once, before any results
        results: a list of items, per page in incremental mode, else once
        error: the exception that ended the search
        end: the search is over, emitted exactly once per session
             (plus once per cancel() call)

    Usage:
        client = SearchClient(api.search, chunk_size=100)
        client.events.on(EventType.RESULTS, store.add)
        client.events.on(EventType.END, spinner.stop)
        client.get({"group": "abc"})
    """

    def __init__(
        self,
        search_fn: SearchFunction,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        separate_replies: bool = True,
        incremental: bool = True,
        max_results: int | None = None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: SortOrder = DEFAULT_SORT_ORDER,
        events: SearchEvents | None = None,
    ) -> None:
        self.search_fn = search_fn
        self.options = SearchOptions(
            chunk_size=chunk_size,
            separate_replies=separate_replies,
            incremental=incremental,
            max_results=max_results,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        self.events = events if events is not None else SearchEvents()

        # Sessions that have not finished yet, so cancel() can reach all of them
        self._sessions: set[_Session] = set()
        # Strong references so running sessions are not garbage collected
        self._tasks: set[asyncio.Task[None]] = set()

    # --- PUBLIC API ---

    def get(self, query: Mapping[str, Any] | None = None) -> "asyncio.Task[None]":
        """
        Start a search and return without waiting for it.

        Emits `resultCount`, then `results` as items become available (per
        batch in incremental mode, all at once otherwise), `error` if the
        search fails and finally `end`.

        A previous search still in flight is not canceled; call cancel()
        first for a clean restart.

        Returns:
            The task running the search. Awaiting it is optional, it never
            raises for search failures.
        """
        _, task = self._start(query)
        return task

    def cancel(self) -> None:
        """
        Cancel every search started on this client and emit the `end` event.

        No further events are emitted for the canceled searches, including
        older ones from overlapping get() calls. A request already in flight
        is not aborted; its response is dropped when it arrives. A get()
        after cancel() starts a fresh search.
        """
        sessions = list(self._sessions)
        for session in sessions:
            session.canceled = True
        logger.info("Search canceled", extra={"sessions": len(sessions)})
        self.events.emit(EventType.END)
        # Streams listen on their own sink and need to hear the `end` too
        for session in sessions:
            if session.sink is not None:
                session.sink.emit(EventType.END)

    async def stream(self, query: Mapping[str, Any] | None = None) -> AsyncIterator[list[Item]]:
        """
        Run a search and yield each `results` payload as it is emitted.

        Only events of the search started here are consumed; other searches
        running on the same client do not feed into the iterator. Raises the
        search's error, if any, after the chunks delivered before it. Closing
        the generator before the search ends cancels that search alone and
        emits `end` on the client's events.

        Usage:
            async for items in client.stream({"uri": url}):
                render(items)
        """
        queue: asyncio.Queue[tuple[EventType, tuple[Any, ...]]] = asyncio.Queue()

        def forward(event: EventType) -> Callable[..., None]:
            return lambda *args: queue.put_nowait((event, args))

        sink = SearchEvents()
        for event in EventType:
            sink.on(event, forward(event))

        session, _ = self._start(query, sink=sink)
        finished = False
        error: BaseException | None = None
        try:
            while True:
                event, args = await queue.get()
                if event is EventType.RESULTS:
                    yield args[0]
                elif event is EventType.ERROR:
                    error = args[0]
                elif event is EventType.END:
                    finished = True
                    break
        finally:
            if not finished and not session.canceled:
                session.canceled = True
                logger.info("Search canceled", extra={"sessions": 1})
                self.events.emit(EventType.END)

        if error is not None:
            raise error

    async def fetch_all(self, query: Mapping[str, Any] | None = None) -> list[Item]:
        """
        Run a search to completion and return every item in order.
        WARNING: Holds the whole result set in memory.
        """
        items: list[Item] = []
        async for chunk in self.stream(query):
            items.extend(chunk)
        return items

    # --- SESSION ---

    def _start(
        self, query: Mapping[str, Any] | None, sink: SearchEvents | None = None
    ) -> "tuple[_Session, asyncio.Task[None]]":
        session = _Session(query=query, sink=sink)

        logger.info(
            "Starting search",
            extra={
                "query_hash": redact_query(query),
                "chunk_size": self.options.chunk_size,
                "incremental": self.options.incremental,
                "max_results": self.options.max_results,
            },
        )

        task = asyncio.get_running_loop().create_task(self._run(session))
        self._sessions.add(session)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return session, task

    def _emit(self, session: _Session, event: EventType, *args: Any) -> None:
        """Emits on behalf of a session, unless that session was canceled."""
        if session.canceled:
            return
        self.events.emit(event, *args)
        if session.sink is not None:
            session.sink.emit(event, *args)

    async def _run(self, session: _Session) -> None:
        try:
            await self._fetch_batches(session)
        finally:
            self._sessions.discard(session)

    async def _fetch_batches(self, session: _Session) -> None:
        """
        Fetch batches one after another until the result set is exhausted,
        the search fails, or the session is canceled.
        """
        options = self.options
        search_after: Any = None

        while True:
            session.pages += 1
            request = build_search_request(options, session.query, search_after)

            logger.debug(
                "Fetching batch",
                extra={
                    "page": session.pages,
                    "query_hash": redact_query(session.query),
                    "has_cursor": search_after is not None,
                },
            )

            try:
                response = await self.search_fn(request)
                if session.canceled:
                    logger.debug(
                        "Discarding batch of canceled search", extra={"page": session.pages}
                    )
                    return
                page = ResultPage.from_response(response, page=session.pages)
            except Exception as e:
                if session.canceled:
                    logger.debug(
                        "Discarding failure of canceled search", extra={"page": session.pages}
                    )
                    return
                logger.warning(
                    "Search failed",
                    extra={"page": session.pages, "error_type": type(e).__name__},
                )
                self._emit(session, EventType.ERROR, e)
                self._emit(session, EventType.END)
                return

            if session.result_count is None:
                if options.max_results is not None and page.total > options.max_results:
                    logger.warning(
                        "Result size exceeds maximum",
                        extra={"total": page.total, "max_results": options.max_results},
                    )
                    self._emit(
                        session,
                        EventType.ERROR,
                        ResultSizeExceededError(total=page.total, max_results=options.max_results),
                    )
                    self._emit(session, EventType.END)
                    return

                session.result_count = page.total
                self._emit(session, EventType.RESULT_COUNT, page.total)

            chunk = page.chunk()
            if options.incremental:
                self._emit(session, EventType.RESULTS, chunk)
            else:
                session.results.extend(chunk)

            if session.canceled:
                return

            # A full batch means there may be more; a short one means we are done
            cursor = next_cursor(chunk, options.sort_by)
            if len(chunk) == options.chunk_size and cursor:
                search_after = cursor
                continue

            if not options.incremental:
                self._emit(session, EventType.RESULTS, session.results)

            logger.info(
                "Search complete",
                extra={
                    "pages": session.pages,
                    "total": session.result_count,
                    "query_hash": redact_query(session.query),
                },
            )
            self._emit(session, EventType.END)
            return

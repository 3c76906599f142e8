"""
Loading every annotation of a group from an h-style /api/search endpoint.

The client only needs an async function that performs one request; here it
is backed by an in-memory list so the example runs without a server.
"""

import asyncio
import logging
from contextlib import aclosing
from typing import Any

from cursorstream import EventType, ResultSizeExceededError, SearchClient

ANNOTATIONS = [
    {"id": f"ann-{n}", "created": f"2024-01-{n:02d}T12:00:00", "text": f"note {n}"}
    for n in range(1, 26)
]


async def search(request: dict[str, Any]) -> dict[str, Any]:
    """Fake /api/search: sorted by `created`, paged with `search_after`."""
    await asyncio.sleep(0.01)
    rows = sorted(ANNOTATIONS, key=lambda a: a["created"])
    if "search_after" in request:
        rows = [a for a in rows if a["created"] > request["search_after"]]
    return {"total": len(ANNOTATIONS), "rows": rows[: request["limit"]], "replies": []}


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    # Incremental: render pages as they arrive
    client = SearchClient(search, chunk_size=10)
    client.events.on(EventType.RESULT_COUNT, lambda total: print(f"{total} annotations"))
    client.events.on(EventType.RESULTS, lambda rows: print(f"got {len(rows)}"))
    client.events.on(EventType.ERROR, lambda err: print(f"failed: {err}"))
    client.events.on(EventType.END, lambda: print("done"))
    await client.get({"group": "__world__"})

    # Notebook-style: refuse groups that are too large to load at once
    guarded = SearchClient(search, incremental=False, max_results=20)
    try:
        await guarded.fetch_all({"group": "__world__"})
    except ResultSizeExceededError as e:
        print(f"not loading: {e}")

    # Async iteration with early exit cancels the remaining pages
    async with aclosing(SearchClient(search, chunk_size=5).stream({})) as pages:
        async for rows in pages:
            print([a["id"] for a in rows])
            break


if __name__ == "__main__":
    asyncio.run(main())

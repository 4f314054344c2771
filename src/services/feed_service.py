"""Home screen orchestration: communities and global feed fetched together."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional

from src.adapters.moltbook_adapter import MoltbookAdapter
from src.core.types import FeedContent
from src.services.orchestrator import Orchestrator

logger = logging.getLogger("moltview")


class FeedOrchestrator(Orchestrator[FeedContent]):
    """Loads the community list and the global post feed concurrently.

    Both fetches are joined before the state leaves Loading. If either fails,
    the first failure to complete is surfaced and the other half is
    discarded, even if it succeeded; there is no partial display.
    """

    name = "feed"

    def __init__(self, adapter: MoltbookAdapter, sort: str = "hot", limit: int = 25,
                 executor: Optional[ThreadPoolExecutor] = None):
        super().__init__(executor)
        self._adapter = adapter
        self._sort = sort
        self._limit = limit

    def _fetch(self) -> FeedContent:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="moltview-feed-fanout") as pool:
            submolts_future = pool.submit(self._adapter.fetch_submolts)
            posts_future = pool.submit(self._adapter.fetch_global_feed, self._sort, self._limit)
            # Raises the first failure in completion order; leaving the
            # with-block still waits for the sibling to finish.
            for future in as_completed((submolts_future, posts_future)):
                future.result()

        content = FeedContent(communities=submolts_future.result(), posts=posts_future.result())
        logger.info(f"Feed loaded: {len(content.communities)} submolts, {len(content.posts)} posts")
        return content

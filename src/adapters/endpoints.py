"""Endpoint descriptors for the Moltbook REST API (read-only subset)."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlencode, urlsplit

from src.core.exceptions import InvalidRequestError

DEFAULT_BASE_URL = "https://www.moltbook.com/api/v1"

QueryItems = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class Endpoint:
    """Path segments plus ordered query items.

    ``query=None`` means the URL carries no query component at all, while
    ``query=()`` renders an explicit empty one (a trailing ``?``).
    """

    segments: tuple[str, ...]
    query: Optional[QueryItems] = None

    @classmethod
    def submolts(cls) -> "Endpoint":
        return cls(("submolts",))

    @classmethod
    def global_feed(cls, sort: str = "hot", limit: int = 25) -> "Endpoint":
        return cls(("posts",), (("sort", sort), ("limit", str(limit))))

    @classmethod
    def submolt_feed(cls, name: str) -> "Endpoint":
        return cls(("submolts", name, "feed"))

    @classmethod
    def post_detail(cls, post_id: str) -> "Endpoint":
        return cls(("posts", post_id))

    @classmethod
    def search(cls, query: str) -> "Endpoint":
        return cls(("search",), (("q", query),))

    @classmethod
    def agent_profile(cls, name: str) -> "Endpoint":
        return cls(("agents", "profile"), (("name", name),))

    @property
    def path(self) -> str:
        return "/" + "/".join(self.segments)

    def url(self, base_url: str = DEFAULT_BASE_URL) -> str:
        """Build the absolute request URL.

        Raises:
            InvalidRequestError: base URL is not absolute or a path segment is empty
        """
        parts = urlsplit(base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise InvalidRequestError(f"Base URL is not absolute: {base_url!r}")
        if not self.segments or any(not s for s in self.segments):
            raise InvalidRequestError(f"Empty path segment in {self.segments!r}")

        path = "/".join(quote(s, safe="") for s in self.segments)
        url = f"{base_url.rstrip('/')}/{path}"
        if self.query is None:
            return url
        return f"{url}?{urlencode(self.query, quote_via=quote)}"

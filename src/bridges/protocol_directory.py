"""Process-lifetime cache of the DefiLlama protocol directory.

Populate once, then reuse. Staleness is accepted: a bridge that launched
after the first fetch will not be found until invalidate() is called.
No lock: two concurrent first lookups may both fetch, which is harmless
since the payload is idempotent.
"""

from loguru import logger

from src.bridges.llama.client import DefiLlamaClient
from src.bridges.llama.models import LlamaProtocol


class ProtocolDirectory:
    """Lazily fetched list of (slug, name) entries in upstream order."""

    def __init__(
        self,
        client: DefiLlamaClient,
        entries: list[LlamaProtocol] | None = None,
    ) -> None:
        self._client = client
        self._entries = entries
        self.fetch_count = 0

    @property
    def is_populated(self) -> bool:
        return self._entries is not None

    async def entries(self) -> list[LlamaProtocol]:
        """Return cached entries, fetching on first use.

        Raises the client's NetworkError/UpstreamDataError on a failed first
        fetch; the cache stays empty so the next call tries again.
        """
        if self._entries is None:
            self.fetch_count += 1
            protocols = await self._client.get_protocols()
            logger.info(f"[SLUG] Protocol directory loaded: {len(protocols)} entries")
            self._entries = protocols
        return self._entries

    def invalidate(self) -> None:
        self._entries = None

"""Map Li.Fi bridge keys to DefiLlama protocol slugs.

The two providers name the same protocol independently ("stargateV2" vs
"stargate", "cbridge" vs "celer-network"). Resolution is an ordered rule
chain, first hit wins:

1. OVERRIDES: hand-maintained pairs no string rule can connect.
2. exact: key equals a slug or a lower-cased display name.
3. substring: key contains a slug, a slug contains the key, or the key
   appears in a display name. First entry in directory order wins; when
   several protocols qualify this may pick the wrong one. There is no
   ranking to fall back on.
4. version strip: "stargatev2" -> "stargate", then rules 2-3 again.
5. pass-through: the key as given, which may yield no security data.
"""

import re

from loguru import logger

from src.bridges.exceptions import BridgeError
from src.bridges.llama.models import LlamaProtocol
from src.bridges.protocol_directory import ProtocolDirectory

OVERRIDES: dict[str, str] = {
    "cbridge": "celer-network",
    "amarok": "connext",
    "circle": "cctp",
}

VERSION_SUFFIX = re.compile(r"v\d+$", re.IGNORECASE)


def match_override(key: str) -> str | None:
    return OVERRIDES.get(key)


def match_exact(key: str, entries: list[LlamaProtocol]) -> str | None:
    for p in entries:
        if p.slug == key or p.name.lower() == key:
            return p.slug
    return None


def match_substring(key: str, entries: list[LlamaProtocol]) -> str | None:
    for p in entries:
        if not p.slug:
            continue
        if p.slug in key or key in p.slug or key in p.name.lower():
            return p.slug
    return None


def strip_version(key: str) -> str | None:
    """Return the key without a trailing vN, or None if there is none."""
    stripped = VERSION_SUFFIX.sub("", key)
    if stripped == key or not stripped:
        return None
    return stripped


class SlugResolver:
    """Resolves bridge keys against a shared ProtocolDirectory."""

    def __init__(self, directory: ProtocolDirectory) -> None:
        self._directory = directory

    async def resolve_slug(self, bridge_key: str) -> str:
        """Best-effort slug for bridge_key. Never raises."""
        key = bridge_key.strip().lower()

        override = match_override(key)
        if override:
            return override

        try:
            entries = await self._directory.entries()
        except BridgeError as e:
            logger.warning(f"[SLUG] Directory unavailable, passing '{bridge_key}' through: {e}")
            return bridge_key

        slug = match_exact(key, entries) or match_substring(key, entries)
        if slug:
            return slug

        stripped = strip_version(key)
        if stripped:
            slug = match_exact(stripped, entries) or match_substring(stripped, entries)
            if slug:
                logger.debug(f"[SLUG] '{bridge_key}' -> '{slug}' after version strip")
                return slug

        logger.debug(f"[SLUG] No directory match for '{bridge_key}', passing through")
        return bridge_key

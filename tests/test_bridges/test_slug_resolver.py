"""Tests for bridge key -> DefiLlama slug reconciliation."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.bridges.exceptions import NetworkError
from src.bridges.protocol_directory import ProtocolDirectory
from src.bridges.slug_resolver import (
    SlugResolver,
    match_exact,
    match_override,
    match_substring,
    strip_version,
)


def _resolver(entries) -> tuple[SlugResolver, MagicMock]:
    client = MagicMock()
    client.get_protocols = AsyncMock(return_value=entries)
    return SlugResolver(ProtocolDirectory(client)), client


class TestRules:
    def test_override(self) -> None:
        assert match_override("cbridge") == "celer-network"
        assert match_override("stargate") is None

    def test_exact_by_slug_and_name(self, protocol_entries) -> None:
        assert match_exact("across", protocol_entries) == "across"
        assert match_exact("celer network", protocol_entries) == "celer-network"
        assert match_exact("hop", protocol_entries) is None

    def test_substring_first_entry_wins(self, protocol_entries) -> None:
        # both cbridge-clone and foobar-bridge contain "bridge"
        assert match_substring("bridge", protocol_entries) == "cbridge-clone"

    def test_substring_key_contains_slug(self, protocol_entries) -> None:
        assert match_substring("stargatev2", protocol_entries) == "stargate"

    def test_strip_version(self) -> None:
        assert strip_version("stargatev2") == "stargate"
        assert strip_version("hopV10") == "hop"
        assert strip_version("across") is None
        assert strip_version("v2") is None


class TestSlugResolver:
    @pytest.mark.asyncio
    async def test_override_beats_directory(self, protocol_entries) -> None:
        resolver, _ = _resolver(protocol_entries)
        # directory has "cbridge-clone" as a substring candidate
        assert await resolver.resolve_slug("cbridge") == "celer-network"

    @pytest.mark.asyncio
    async def test_override_does_not_need_directory(self) -> None:
        resolver, client = _resolver([])
        assert await resolver.resolve_slug("Amarok") == "connext"
        client.get_protocols.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exact_match(self, protocol_entries) -> None:
        resolver, _ = _resolver(protocol_entries)
        assert await resolver.resolve_slug("Across") == "across"

    @pytest.mark.asyncio
    async def test_slug_contains_key(self, protocol_entries) -> None:
        resolver, _ = _resolver(protocol_entries)
        assert await resolver.resolve_slug("hop") == "hop-protocol"

    @pytest.mark.asyncio
    async def test_versioned_key(self, protocol_entries) -> None:
        resolver, _ = _resolver(protocol_entries)
        assert await resolver.resolve_slug("stargateV2") == "stargate"

    @pytest.mark.asyncio
    async def test_match_only_after_version_strip(self, protocol_entries) -> None:
        resolver, _ = _resolver(protocol_entries)
        assert await resolver.resolve_slug("foobarv3") == "foobar-bridge"

    @pytest.mark.asyncio
    async def test_no_match_passes_key_through(self, protocol_entries) -> None:
        resolver, _ = _resolver(protocol_entries)
        assert await resolver.resolve_slug("MysteryBridge") == "MysteryBridge"

    @pytest.mark.asyncio
    async def test_directory_failure_degrades(self) -> None:
        client = MagicMock()
        client.get_protocols = AsyncMock(side_effect=NetworkError("Timeout"))
        resolver = SlugResolver(ProtocolDirectory(client))

        assert await resolver.resolve_slug("stargateV2") == "stargateV2"
        assert await resolver.resolve_slug("circle") == "cctp"

    @pytest.mark.asyncio
    async def test_directory_fetched_once(self, protocol_entries) -> None:
        resolver, client = _resolver(protocol_entries)
        await resolver.resolve_slug("across")
        await resolver.resolve_slug("hop")
        await resolver.resolve_slug("stargatev2")
        assert client.get_protocols.await_count == 1


class TestProtocolDirectory:
    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self, protocol_entries) -> None:
        client = MagicMock()
        client.get_protocols = AsyncMock(return_value=protocol_entries)
        directory = ProtocolDirectory(client)

        assert not directory.is_populated
        await directory.entries()
        assert directory.is_populated
        directory.invalidate()
        await directory.entries()

        assert directory.fetch_count == 2

    @pytest.mark.asyncio
    async def test_failed_fetch_leaves_cache_empty(self, protocol_entries) -> None:
        client = MagicMock()
        client.get_protocols = AsyncMock(side_effect=[NetworkError("down"), protocol_entries])
        directory = ProtocolDirectory(client)

        with pytest.raises(NetworkError):
            await directory.entries()
        assert not directory.is_populated
        assert await directory.entries() == protocol_entries

    @pytest.mark.asyncio
    async def test_seeded_entries_skip_fetch(self, protocol_entries) -> None:
        client = MagicMock()
        client.get_protocols = AsyncMock()
        directory = ProtocolDirectory(client, entries=protocol_entries)

        assert await directory.entries() == protocol_entries
        client.get_protocols.assert_not_awaited()

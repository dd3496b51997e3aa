"""Shared test fixtures."""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from src.bridges.llama.models import LlamaProtocol


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for fake httpx responses: status code plus JSON body."""

    def _make(status_code: int = 200, body: Any = None) -> MagicMock:
        resp = MagicMock()
        resp.status_code = status_code
        resp.json.return_value = body
        return resp

    return _make


@pytest.fixture
def protocol_entries() -> list[LlamaProtocol]:
    """A small directory in upstream order."""
    return [
        LlamaProtocol(slug="across", name="Across"),
        LlamaProtocol(slug="hop-protocol", name="Hop Protocol"),
        LlamaProtocol(slug="stargate", name="Stargate"),
        LlamaProtocol(slug="celer-network", name="Celer Network"),
        LlamaProtocol(slug="cbridge-clone", name="cBridge Clone"),
        LlamaProtocol(slug="foobar-bridge", name="FooBar Bridge"),
    ]

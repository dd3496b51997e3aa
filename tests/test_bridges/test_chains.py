"""Tests for chain alias normalization."""

import pytest

from src.bridges.chains import CHAIN_MAP, is_address, normalize_chain


def test_known_aliases():
    assert normalize_chain("eth") == 1
    assert normalize_chain("arbitrum") == 42161
    assert normalize_chain("bsc") == 56
    assert normalize_chain("matic") == 137
    assert normalize_chain("solana") == "sol"


def test_aliases_are_case_and_space_insensitive():
    assert normalize_chain("  ARB ") == 42161
    assert normalize_chain("Base") == 8453


@pytest.mark.parametrize("canonical", sorted(set(CHAIN_MAP.values()), key=str))
def test_canonical_ids_are_idempotent(canonical):
    assert normalize_chain(canonical) == canonical
    assert normalize_chain(normalize_chain(canonical)) == canonical


def test_unknown_string_passes_through_lowercased():
    assert normalize_chain("  Fantom ") == "fantom"


def test_numeric_string_becomes_int():
    assert normalize_chain("42161") == 42161
    assert normalize_chain(" 10 ") == 10
    assert normalize_chain(normalize_chain("8453")) == 8453


def test_numeric_input_is_returned_as_is():
    assert normalize_chain(250) == 250


def test_missing_input_defaults_to_ethereum():
    assert normalize_chain(None) == 1
    assert normalize_chain("") == 1
    assert normalize_chain("   ") == 1


def test_is_address():
    assert is_address("0xaf88d065e77c8cC2239327C5EDb3A432268e5831")
    assert is_address("0XAF88")
    assert not is_address("USDC")
    assert not is_address("usdc.e")

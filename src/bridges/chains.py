"""Chain alias normalization.

Users (and the LLM layer) say "arb", "matic" or "bnb"; Li.Fi wants numeric
chain IDs. Solana is the one non-EVM chain and keeps Li.Fi's string key.
"""

DEFAULT_CHAIN = "eth"
ADDRESS_PREFIX = "0x"

CHAIN_MAP: dict[str, int | str] = {
    # Ethereum & L2s
    "eth": 1,
    "mainnet": 1,
    "ethereum": 1,
    "arb": 42161,
    "arbitrum": 42161,
    "opt": 10,
    "optimism": 10,
    "op": 10,
    "base": 8453,
    "pol": 137,
    "polygon": 137,
    "matic": 137,
    "zksync": 324,
    "era": 324,
    "linea": 59144,
    "blast": 81457,
    # BSC ecosystem
    "bsc": 56,
    "bnb": 56,
    "binance": 56,
    "opbnb": 204,
    # Others
    "ava": 43114,
    "avalanche": 43114,
    "sol": "sol",
    "solana": "sol",
}


def normalize_chain(value: str | int | None) -> int | str:
    """Map a chain alias to its canonical id.

    Numbers are already canonical, and numeric strings like "42161" become
    ints. Unknown strings are lower-cased, trimmed and passed through, so
    provider keys survive untouched.
    """
    if value is None or value == "":
        return CHAIN_MAP[DEFAULT_CHAIN]
    if isinstance(value, int):
        return value
    key = value.strip().lower()
    if not key:
        return CHAIN_MAP[DEFAULT_CHAIN]
    if key.isdecimal():
        return int(key)
    return CHAIN_MAP.get(key, key)


def is_address(token: str) -> bool:
    """True if the token ref is already an on-chain address rather than a symbol."""
    return token.strip().lower().startswith(ADDRESS_PREFIX)

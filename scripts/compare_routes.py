"""Debug runner — print the raw JSON result of a bridge operation.

Usage:
    python scripts/compare_routes.py arb opt USDT 100000000
    python scripts/compare_routes.py arb opt USDT 100000000 --to-token USDC
    python scripts/compare_routes.py --security stargatev2
    python scripts/compare_routes.py --bridges
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings  # noqa: E402
from src.bridges.tools import BridgeToolkit  # noqa: E402
from src.utils.logger import setup_logger  # noqa: E402


async def main() -> None:
    parser = argparse.ArgumentParser(description="Compare bridge routes with risk scores")
    parser.add_argument("from_chain", nargs="?")
    parser.add_argument("to_chain", nargs="?")
    parser.add_argument("token", nargs="?", help="Source token symbol or address")
    parser.add_argument("amount", nargs="?", help="Amount in atomic units")
    parser.add_argument("--to-token", default=None, help="Destination token (default: same as source)")
    parser.add_argument("--single", action="store_true", help="Single best quote instead of top routes")
    parser.add_argument("--security", metavar="BRIDGE", help="Security stats for one bridge")
    parser.add_argument("--bridges", action="store_true", help="List supported bridges")
    args = parser.parse_args()

    setup_logger(level=settings.log_level, log_file=settings.log_file)
    toolkit = BridgeToolkit()
    try:
        if args.bridges:
            result = await toolkit.get_supported_bridges()
        elif args.security:
            result = await toolkit.get_security_stats(args.security)
        elif None in (args.from_chain, args.to_chain, args.token, args.amount):
            parser.error("from_chain, to_chain, token and amount are required")
        elif args.single:
            result = await toolkit.get_bridge_route(
                args.from_chain, args.to_chain, args.token, args.to_token, args.amount
            )
        else:
            result = await toolkit.get_bridge_options(
                args.from_chain, args.to_chain, args.token, args.to_token, args.amount
            )
    finally:
        await toolkit.close()

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    asyncio.run(main())

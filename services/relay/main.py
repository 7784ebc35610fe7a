from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from relaynet.errors import ConfigurationError, RelayCancelled, RelayExhausted
from relaynet.relay import RelayStrategy
from relaynet.rpc import RpcTransport
from services.relay.settings import RelaySettings, load_settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

USAGE = "usage: RPCS=url1,url2 RAWTX=0x.. [ATTEMPTS=3] relaynet-relay"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Relay a signed raw transaction to one of several RPC endpoints.")
    parser.add_argument("--rpcs", help="Comma-separated RPC endpoint URLs (overrides RPCS).")
    parser.add_argument("--raw-tx", help="Signed raw transaction payload (overrides RAWTX).")
    parser.add_argument("--attempts", type=int, help="Maximum number of attempts (overrides ATTEMPTS).")
    parser.add_argument("--timeout", type=float, help="Per-attempt timeout in seconds (overrides RELAY_TIMEOUT).")
    return parser


def collect_overrides(args: argparse.Namespace) -> dict[str, object]:
    overrides = {
        "RPCS": args.rpcs,
        "RAWTX": args.raw_tx,
        "ATTEMPTS": args.attempts,
        "RELAY_TIMEOUT": args.timeout,
    }
    return {key: value for key, value in overrides.items() if value is not None}


def build_strategy(settings: RelaySettings) -> RelayStrategy:
    return RelayStrategy(
        endpoints=settings.endpoint_list(),
        transport=RpcTransport(method=settings.rpc_method),
        max_attempts=settings.attempts,
        timeout=settings.timeout_seconds,
        backoff_unit=settings.backoff_seconds,
    )


async def run(strategy: RelayStrategy, raw_tx: str) -> int:
    try:
        outcome = await strategy.relay(raw_tx)
    except RelayExhausted as exc:
        print(f"all relays failed: {exc.last_error}")
        return EXIT_FAILED
    except RelayCancelled as exc:
        print(f"relay cancelled after {exc.attempts} attempts: {exc.last_error}")
        return EXIT_FAILED
    print(f"relayed successfully via {outcome.endpoint} (result: {outcome.result})")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(**collect_overrides(args))
    except ConfigurationError as exc:
        print(f"{exc}\n{USAGE}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    return asyncio.run(run(build_strategy(settings), settings.raw_tx))


if __name__ == "__main__":
    sys.exit(main())

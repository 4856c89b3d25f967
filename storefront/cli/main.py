from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Sequence

from ..config.loader import CONFIG_PATH_ENV
from ..errors import HttpError, StorefrontError, TransportError, ValidationError
from ..runtime import Storefront, build_storefront
from ..sink import LoggingSink

LOGGER = logging.getLogger("storefront.cli")

PAYMENT_METHODS = ("CREDIT_CARD", "DEBIT_CARD", "PAYPAL")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Storefront console CLI")
    parser.add_argument("--config", help="path to storefront YAML configuration")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="probe every registered service once")
    sub.add_parser("catalog", help="load the inventory catalog once")

    checkout_parser = sub.add_parser("checkout", help="submit a single checkout")
    checkout_parser.add_argument("--item", required=True, help="product identifier")
    checkout_parser.add_argument("--quantity", type=int, required=True, help="units to order")
    checkout_parser.add_argument(
        "--payment-method",
        default="CREDIT_CARD",
        choices=PAYMENT_METHODS,
        help="payment method passed to the checkout service",
    )

    explore_parser = sub.add_parser("explore", help="GET an inventory API path and show timing")
    explore_parser.add_argument("path", help="e.g. /api/v1/inventory/value")

    run_parser = sub.add_parser("run", help="run the periodic refresh loop")
    run_parser.add_argument(
        "--cycles",
        type=int,
        default=0,
        help="optional number of refresh cycles before exiting (0 runs indefinitely)",
    )

    serve_parser = sub.add_parser("serve", help="serve the JSON API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1", help="bind host for uvicorn")
    serve_parser.add_argument("--port", type=int, default=8080, help="bind port for uvicorn")
    return parser


async def _health(storefront: Storefront) -> int:
    snapshot = await storefront.probe_health()
    return 0 if snapshot.all_up else 1


async def _catalog(storefront: Storefront) -> int:
    catalog = await storefront.scheduler.refresh_catalog()
    if catalog is not None:
        return 0
    # Degraded mode: the fallback timer publishes the sample data.
    await storefront.timers.join()
    return 1


async def _checkout(storefront: Storefront, args: argparse.Namespace) -> int:
    await storefront.scheduler.refresh_catalog()
    result = await storefront.checkout(args.item, args.quantity, args.payment_method)
    await storefront.timers.join()
    return 0 if result.ok else 1


async def _explore(storefront: Storefront, path: str) -> int:
    try:
        result = await storefront.explore(path)
    except ValidationError as exc:
        LOGGER.error("%s", exc)
        return 2
    except (HttpError, TransportError) as exc:
        LOGGER.error("GET %s failed: %s", path, exc)
        return 1
    sys.stdout.write(
        f"{result.method} {result.path}\n\n"
        f"Response Time: {result.response_ms}ms\n"
        f"Status: {result.status_code}\n\n"
        f"Response:\n{json.dumps(result.payload, indent=2, sort_keys=True)}\n"
    )
    return 0


async def _run(storefront: Storefront, cycles: int) -> int:
    scheduler = storefront.scheduler
    if cycles <= 0:
        await storefront.start()
        try:
            while True:
                await asyncio.sleep(3600)
        finally:
            await storefront.stop()
    for cycle in range(cycles):
        if cycle:
            await asyncio.sleep(storefront.config.scheduler.interval_sec)
        task = scheduler.tick()
        if task is not None:
            await task
    await storefront.timers.join()
    return 0


def _run_uvicorn(host: str, port: int, config: str | None) -> int:
    import uvicorn

    if config:
        os.environ[CONFIG_PATH_ENV] = config
    uvicorn.run("storefront.main:app", host=host, port=port, log_config=None)
    return 0


async def _dispatch(args: argparse.Namespace) -> int:
    storefront = build_storefront(args.config, sink=LoggingSink())
    if args.command == "health":
        return await _health(storefront)
    if args.command == "catalog":
        return await _catalog(storefront)
    if args.command == "checkout":
        return await _checkout(storefront, args)
    if args.command == "explore":
        return await _explore(storefront, args.path)
    if args.command == "run":
        return await _run(storefront, args.cycles)
    raise ValueError(f"unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if args.command == "serve":
        return _run_uvicorn(args.host, args.port, args.config)
    try:
        return asyncio.run(_dispatch(args))
    except KeyboardInterrupt:
        LOGGER.info("interrupted")
        return 130
    except StorefrontError as exc:
        LOGGER.error("%s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())

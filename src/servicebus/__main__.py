"""Service bus demo entrypoint. Loads config, wires services, places orders."""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from pathlib import Path

import yaml
from loguru import logger

from servicebus import __version__
from servicebus.config import Config, cfg, load_config_with_env
from servicebus.core.errors import BusError, HandlerFailure
from servicebus.dispatch import Bus, DeliveryLog, from_milliseconds
from servicebus.formatting import LogDisplay, render_loyalty, render_stock
from servicebus.services import Services, pick_items, register_services


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. Replace default logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan> | {message}"
        ),
    )


def reload_config(config_path: Path) -> Config:
    """Load config from path and update global cfg."""
    data = load_config_with_env(config_path)
    cfg.reload(data)
    return cfg


def build_bus(config: Config) -> Bus:
    """Bus configured from latency, retention, depth, timeout and serialization keys."""
    return Bus(
        log=DeliveryLog(retention=config.log_retention),
        delay=from_milliseconds(config.latency_ms),
        max_depth=config.max_cascade_depth,
        handler_timeout=config.handler_timeout_seconds,
        serialize=config.serialize_publishes,
    )


def main(argv: list[str] | None = None) -> None:
    """Main entrypoint."""
    parser = argparse.ArgumentParser(
        description="Service bus demo — four coffee-shop services talking over one bus"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml; defaults used if missing)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--orders",
        "-n",
        type=int,
        default=1,
        help="Orders to place (the printed log shows the last one)",
    )
    parser.add_argument("--customer", default="Guest", help="Customer name")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for items and ids")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        config = reload_config(args.config)
    except (BusError, yaml.YAMLError) as exc:
        logger.error("Invalid config {}: {}", args.config, exc)
        sys.exit(1)
    logger.info("Config loaded from {}", args.config)

    bus = build_bus(config)
    display = LogDisplay(config.log_display_limit, sink=lambda line: logger.info("bus | {}", line))
    bus.log.add_observer(display)

    rng = random.Random(args.seed)
    services = register_services(bus, config.stock, rng=rng)
    logger.info(
        "Bus ready — {} subscriptions on {} topics",
        len(bus.registry),
        len(bus.registry.topics()),
    )

    customer = args.customer.strip() or "Guest"
    ok = asyncio.run(_run(services, display, customer, max(args.orders, 0), rng))

    for line in display.lines:
        print(line)
    print(render_loyalty(customer, services.loyalty.get_account(customer)))
    for row in render_stock(services.inventory.get_stock()):
        print(row)

    if not ok:
        sys.exit(1)


async def _run(
    services: Services,
    display: LogDisplay,
    customer: str,
    orders: int,
    rng: random.Random,
) -> bool:
    """Place orders one after another. Returns False if any cascade failed.

    The display is cleared before each order, so it ends up holding the last cascade.
    """
    for _ in range(orders):
        display.clear()
        items = pick_items(rng)
        logger.info("Ordering {}", ", ".join(item.name for item in items))
        try:
            await services.orders.place_order(items, customer)
        except HandlerFailure as exc:
            logger.error("Cascade failed: {} (root cause: {!r})", exc, exc.root_cause)
            return False
    return True


if __name__ == "__main__":
    main()

"""
Command-line interface for the marketplace demo.

Runs the collection / mint / list / buy workflow once against an Aptos node.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

import structlog

from marketplace import __version__
from marketplace.config import FailurePolicy, MarketplaceConfig, set_config
from marketplace.core.assets import CollectionDescriptor, TokenDescriptor
from marketplace.core.identity import ConfigIdentityProvider, IdentityProvider
from marketplace.core.workflow import WorkflowOrchestrator
from marketplace.exceptions import ConfigurationError, MarketplaceError
from marketplace.node.aptos import AptosRestAdapter
from marketplace.node.interface import NodeInterface

logger = structlog.get_logger(__name__)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        stream=sys.stdout,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="marketplace-demo",
        description="Create, mint, list and buy an NFT on an Aptos marketplace",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from configuration)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs in JSON format",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in FailurePolicy],
        default=None,
        help="Continue after a failed step or stop (default: from configuration)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Run command
    subparsers.add_parser("run", help="Run the marketplace workflow once (default)")

    # Balance command
    subparsers.add_parser("balance", help="Show seller and buyer balances")

    return parser


async def run_workflow(
    config: MarketplaceConfig,
    identities: Optional[IdentityProvider] = None,
    node: Optional[NodeInterface] = None,
) -> dict:
    """
    Run the workflow once and return the report as a dictionary.

    Args:
        config: Marketplace configuration
        identities: Source of the wallets (configuration if not provided)
        node: Node interface (REST adapter if not provided)
    """
    wallets = (identities or ConfigIdentityProvider(config)).get_wallets()
    node = node or AptosRestAdapter(config)

    orchestrator = WorkflowOrchestrator(
        node=node,
        wallets=wallets,
        collection=CollectionDescriptor.from_config(config),
        token=TokenDescriptor.from_config(config),
        config=config,
    )

    try:
        report = await orchestrator.run()
    finally:
        await node.disconnect()

    return report.to_dict()


async def show_balances(
    config: MarketplaceConfig,
    identities: Optional[IdentityProvider] = None,
    node: Optional[NodeInterface] = None,
) -> dict:
    """Query both wallets' balances."""
    wallets = (identities or ConfigIdentityProvider(config)).get_wallets()
    node = node or AptosRestAdapter(config)

    balances = {}
    try:
        for identity in (wallets.seller, wallets.buyer):
            balances[identity.label] = {
                "address": identity.address,
                "balance": await node.get_balance(identity),
            }
    finally:
        await node.disconnect()

    return balances


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    command = args.command or "run"

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_json:
        overrides["log_json"] = True
    if args.policy:
        overrides["failure_policy"] = FailurePolicy(args.policy)

    config = MarketplaceConfig(**overrides)
    set_config(config)
    setup_logging(config.log_level, config.log_json)

    try:
        if command == "run":
            result = asyncio.run(run_workflow(config))
        else:
            result = asyncio.run(show_balances(config))
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        sys.exit(1)
    except MarketplaceError as e:
        logger.error("command_failed", command=command, error=str(e))
        sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()

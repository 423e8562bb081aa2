"""Command line entry point for a full protocol deployment."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console

from config.settings import Settings, load_settings
from deployer.chain import ArtifactStore, ChainClient
from deployer.core.errors import DeploymentError
from deployer.data import ConfigLoader
from deployer.deploy import DeploymentOrchestrator
from deployer.persistence import DeploymentStorage
from deployer.report import render_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protocol-deploy",
        description="Deploy, wire and provision the lending protocol contracts.",
    )
    parser.add_argument("--registry", help="Re-attach to an existing Registry instead of deploying one")
    parser.add_argument("--pools-data", help="Market list document (overrides POOLS_DATA_PATH)")
    parser.add_argument("--prt-data", help="PRT parameters document, empty string to skip PRT init")
    parser.add_argument("--artifacts", help="Compiled contract artifacts directory")
    parser.add_argument("--skip-parameters", action="store_true", help="Create pools without parameter setup")
    parser.add_argument("--check", action="store_true", help="Only validate settings, documents and artifacts")
    parser.add_argument("--no-save", action="store_true", help="Do not write the deployment report")
    parser.add_argument("--show-last", action="store_true", help="Print the latest saved report for the connected chain")
    parser.add_argument("--log-level", help="Logging level (overrides LOG_LEVEL)")
    return parser


def _overrides(args: argparse.Namespace) -> dict:
    overrides = {}
    if args.registry is not None:
        overrides["registry"] = args.registry
    if args.pools_data is not None:
        overrides["pools_data_path"] = args.pools_data
    if args.prt_data is not None:
        overrides["prt_data_path"] = args.prt_data
    if args.artifacts is not None:
        overrides["artifacts_dir"] = args.artifacts
    if args.skip_parameters:
        overrides["configure_parameters"] = False
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return overrides


async def deploy(settings: Settings, check_only: bool = False, save: bool = True, console: Optional[Console] = None):
    """Load documents, run the orchestrator and print the outcome."""
    console = console or Console()
    config = ConfigLoader(settings).load()

    chain = ChainClient(settings, artifacts=ArtifactStore(settings.artifacts_dir))
    storage = DeploymentStorage(settings.ensure_deployments_dir()) if save else None
    orchestrator = DeploymentOrchestrator(chain, config, settings=settings, storage=storage)

    if check_only:
        orchestrator.preflight()
        console.print(f"[green]Configuration OK[/green]: {len(config.markets)} markets, "
                      f"stable pools {'on' if config.flags.stable_pools_enabled else 'off'}")
        return None

    try:
        report = await orchestrator.run()
    except DeploymentError:
        render_report(orchestrator.report(), console)
        raise
    finally:
        await chain.close()

    render_report(report, console)
    return report


async def show_last(settings: Settings, console: Optional[Console] = None, chain=None):
    """Print the most recent saved report for the chain behind RPC_URL."""
    console = console or Console()
    chain = chain or ChainClient(settings)
    try:
        chain_id = await chain.chain_id()
    finally:
        await chain.close()

    storage = DeploymentStorage(settings.ensure_deployments_dir())
    report = storage.load_latest(chain_id)
    if report is None:
        console.print(f"[yellow]No saved deployment for chain {chain_id}[/yellow]")
        return None

    saved = storage.list_reports(chain_id)
    console.print(f"Chain {chain_id}: {len(saved)} saved report(s), showing {saved[0]['id']}")
    render_report(report, console, show_transactions=False)
    return report


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        settings = load_settings(**_overrides(args))
    except DeploymentError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.show_last:
            asyncio.run(show_last(settings, console=console))
        else:
            asyncio.run(deploy(settings, check_only=args.check, save=not args.no_save, console=console))
    except DeploymentError as e:
        logger.error(f"Deployment failed: {e}")
        console.print(f"[red]Deployment failed:[/red] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

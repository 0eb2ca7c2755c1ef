"""
RedStone Price Feed Demo - command line interface
"""
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from eth_account import Account
from loguru import logger
from rich.console import Console
from rich.table import Table

from redstone_demo import __version__
from redstone_demo.data.config import ConfigManager
from redstone_demo.data.models import RSK_TESTNET
from redstone_demo.data.pipelines.price_feed import fetch_prices
from redstone_demo.data.registry import DataRegistry
from redstone_demo.wallet.provider import Web3WalletProvider

load_dotenv()
console = Console()


def setup_logging(debug: bool = False, log_file: bool = False):
    logger.remove()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    debug_mode = debug or os.getenv("DEBUG", "false").lower() == "true"
    if debug_mode:
        log_level = "DEBUG"
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=log_level,
        colorize=True
    )
    if log_file:
        log_dir = Path("logs"); log_dir.mkdir(exist_ok=True)
        logger.add(
            log_dir / "price_feed_{time:YYYY-MM-DD}.log",
            rotation="1 day",
            retention="30 days",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG"
        )
    logger.debug("Logging system configured")


def build_wallet(config: ConfigManager) -> Optional[Web3WalletProvider]:
    """Local-key wallet from PRIVATE_KEY, or None when no key is configured"""
    key = os.getenv("PRIVATE_KEY", "").strip()
    if not key:
        return None
    return Web3WalletProvider(Account.from_key(key), config.rpc_url)


# CLI Command Group
@click.group()
@click.option('--config', '-c', 'config_path', help='Path to configuration file')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config_path, debug):
    """RedStone Price Feed Demo - RSK testnet price feeds"""
    ctx.ensure_object(dict)
    setup_logging(debug)
    if config_path:
        ConfigManager.reset()
    ctx.obj['config'] = ConfigManager(config_path)
    ctx.obj['debug'] = debug


@cli.command()
@click.pass_context
def prices(ctx):
    """Fetch the latest RedStone prices"""
    config: ConfigManager = ctx.obj['config']
    registry = DataRegistry(config)
    quotes = asyncio.run(fetch_prices(registry.redstone, config.get_symbols()))

    table = Table(title="RedStone Prices")
    table.add_column("Symbol", style="cyan")
    table.add_column("Price (USD)", style="green", justify="right")
    table.add_column("Timestamp", style="dim")
    for symbol, quote in quotes.items():
        ts = quote.ts.isoformat() if quote.ts else "-"
        table.add_row(symbol, f"${quote.value:,.2f}", ts)
    console.print(table)


@cli.command()
@click.pass_context
def deploy(ctx):
    """Deploy the PriceFeed contract"""
    from redstone_demo.deploy import run_deployment

    result = run_deployment(ctx.obj['config'])
    console.print(f"PriceFeed deployed to: [bold green]{result.address}[/bold green]")
    console.print(f"[dim]tx {result.tx_hash} (block {result.block_number})[/dim]")


@cli.command()
@click.pass_context
def app(ctx):
    """Interactive price feed console"""
    from redstone_demo.cli.console_app import run_console_app

    config: ConfigManager = ctx.obj['config']
    try:
        asyncio.run(run_console_app(config, build_wallet(config)))
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Goodbye![/yellow]")


@cli.command()
@click.option('--host', default='127.0.0.1', help='Bind address')
@click.option('--port', default=8000, type=int, help='Bind port')
@click.pass_context
def serve(ctx, host, port):
    """Run the web dashboard"""
    import uvicorn
    from redstone_demo.interfaces.web import create_app

    config: ConfigManager = ctx.obj['config']
    uvicorn.run(create_app(config, build_wallet(config)), host=host, port=port)


@cli.command()
def version():
    """Show version information"""
    console.print("[bold blue]RedStone Price Feed Demo[/bold blue]")
    console.print(f"Version: {__version__}")
    console.print(f"Network: {RSK_TESTNET.chain_name} ({RSK_TESTNET.chain_id})")


def main():
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()

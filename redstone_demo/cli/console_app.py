"""
Interactive console version of the price feed page.
"""

from typing import Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table

from redstone_demo.app.controller import Notification, PriceFeedApp
from redstone_demo.app.state import AppState, display_price
from redstone_demo.data.config import ConfigManager
from redstone_demo.data.registry import DataRegistry
from redstone_demo.wallet.provider import WalletProvider, Web3WalletProvider

console = Console()

_STATUS_STYLE = {"success": "green", "error": "red"}


def show_notification(n: Notification):
    style = _STATUS_STYLE.get(n.status, "white")
    console.print(f"[bold {style}]{n.title}[/bold {style}] {n.description}")


def render_state(state: AppState) -> Group:
    title, subtitle = "RedStone Price Feed Demo", "RSK Testnet Integration"
    if not state.is_connected:
        parts = [Panel("[dim]Wallet not connected.[/dim]", title=title, subtitle=subtitle, border_style="blue")]
        if state.error:
            parts.append(Panel(state.error, border_style="red", title="Error"))
        return Group(*parts)

    table = Table(show_header=True, expand=True)
    for symbol in state.prices.as_dict():
        table.add_column(f"{symbol} Price", justify="center", style="cyan")
    table.add_row(*(f"${display_price(v)}" for v in state.prices.as_dict().values()))

    lines = [
        f"[dim]Connected Account: {state.account}[/dim]",
        f"Contract: {state.contract_address or '[dim]not set[/dim]'}",
    ]
    if state.loading:
        lines.append("[yellow]Fetching Prices...[/yellow]")

    parts = [Panel(Group("\n".join(lines), table), title=title, subtitle=subtitle, border_style="purple")]
    if state.error:
        parts.append(Panel(state.error, border_style="red", title="Error"))
    return Group(*parts)


def confirm_request(method: str, params) -> bool:
    return Confirm.ask(f"Wallet: approve [cyan]{method}[/cyan]?", default=True)


async def run_console_app(config: ConfigManager, wallet: Optional[WalletProvider]):
    if isinstance(wallet, Web3WalletProvider):
        wallet.approve = confirm_request

    registry = DataRegistry(config)
    app = PriceFeedApp(
        wallet,
        price_api=registry.redstone,
        contract_address=config.contract_address,
        notify=show_notification,
    )

    while not app.state.is_connected:
        console.print(render_state(app.state))
        choice = Prompt.ask("Choose an option", choices=["connect", "quit"], default="connect")
        if choice == "quit":
            return
        await app.connect_wallet()

    while True:
        console.print(render_state(app.state))
        choice = Prompt.ask(
            "Choose an option",
            choices=["address", "fetch", "dismiss", "quit"],
            default="fetch" if app.state.contract_address else "address",
        )
        if choice == "address":
            app.set_contract_address(Prompt.ask("Enter contract address", default=app.state.contract_address))
        elif choice == "fetch":
            await app.fetch_prices()
        elif choice == "dismiss":
            app.dismiss_error()
        elif choice == "quit":
            console.print("\n[yellow]👋 Thanks for trying the RedStone Price Feed Demo![/yellow]")
            return

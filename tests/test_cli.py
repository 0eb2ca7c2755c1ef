from decimal import Decimal
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from redstone_demo.cli.main import cli
from redstone_demo.data.models import PriceQuote


def test_version():
    result = CliRunner().invoke(cli, ["version"])
    assert result.exit_code == 0
    assert "RSK Testnet" in result.output


def test_prices_table():
    quotes = {
        "ETH": PriceQuote(symbol="ETH", value=Decimal("3123.456")),
        "BTC": PriceQuote(symbol="BTC", value=Decimal("65000")),
    }
    with patch("redstone_demo.cli.main.fetch_prices", AsyncMock(return_value=quotes)):
        result = CliRunner().invoke(cli, ["prices"])

    assert result.exit_code == 0
    assert "$3,123.46" in result.output
    assert "$65,000.00" in result.output


def test_deploy_failure_propagates():
    with patch("redstone_demo.deploy.run_deployment", side_effect=FileNotFoundError("no artifact")):
        result = CliRunner().invoke(cli, ["deploy"])

    assert result.exit_code != 0
    assert isinstance(result.exception, FileNotFoundError)


def test_console_tiles_match_dashboard_format():
    from rich.console import Console

    from redstone_demo.app.state import AppState, Connection, PriceBoard
    from redstone_demo.cli.console_app import render_state

    state = AppState(
        connection=Connection.CONNECTED,
        account="0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1",
        prices=PriceBoard(eth="3123.46", btc="65000.10", rbtc="64990.13", rif="0.08"),
    )
    console = Console(record=True, width=160)
    console.print(render_state(state))
    text = console.export_text()

    assert "$3,123.46" in text
    assert "$65,000.1" in text
    assert "$0.08" in text

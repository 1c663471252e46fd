"""
CLI entrypoint for the Bittrex async client.

Provides market data lookups and order commands against the live exchange
or, with --simulate, against the order simulation.
"""
import asyncio
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer

from bittrex_async.config.config import Config, load_config
from bittrex_async.config.dotenv_loader import load_dotenv_files
from bittrex_async.domain.models import OrderBookType
from bittrex_async.domain.protocols import TradingApi
from bittrex_async.exceptions import BittrexError
from bittrex_async.factory import create_trading_api
from bittrex_async.monitoring.logger import get_logger, setup_logging

app = typer.Typer(
    name="bittrex-async",
    help="Async Bittrex client with order simulation",
    add_completion=False,
)

logger = get_logger(__name__)

ConfigOption = typer.Option(None, "--config", help="Path to config file (default: packaged config.yaml)")
SimulateOption = typer.Option(False, "--simulate", help="Route orders to the order simulation")


def _load(config_path: Optional[Path], simulate: bool) -> Config:
    load_dotenv_files()
    try:
        config = load_config(config_path)
    except Exception as e:
        typer.secho(f"Failed to load configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if simulate:
        config = config.model_copy(update={"mode": "simulation"})

    setup_logging(config.monitoring.log_level, config.monitoring.log_format, log_file=config.monitoring.log_file)
    return config


def _run(config: Config, action: Callable[[TradingApi], Awaitable[Any]]) -> Any:
    """Run one action against a fresh trading API, mapping client errors to exit code 1."""

    async def runner():
        async with create_trading_api(config) as api:
            return await action(api)

    try:
        return asyncio.run(runner())
    except BittrexError as e:
        logger.error("Command failed", error=str(e), error_type=type(e).__name__)
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def _decimal(value: str, name: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise typer.BadParameter(f"{name} must be a decimal number, got {value!r}")


def _echo_model(model) -> None:
    typer.echo(model.model_dump_json(by_alias=True, indent=2))


@app.command()
def ticker(
    market: str = typer.Argument(..., help="Market name, e.g. BTC-LTC"),
    config_path: Optional[Path] = ConfigOption,
):
    """Show bid, ask and last price of a market."""
    config = _load(config_path, simulate=False)
    result = _run(config, lambda api: api.get_ticker(market))
    if result is None:
        typer.echo(f"No ticker for {market}")
        raise typer.Exit(1)
    typer.echo(f"{market}  bid={result.bid}  ask={result.ask}  last={result.last}")


@app.command()
def summary(
    market: str = typer.Argument(..., help="Market name, e.g. BTC-LTC"),
    config_path: Optional[Path] = ConfigOption,
):
    """Show the 24h summary of a market."""
    config = _load(config_path, simulate=False)
    result = _run(config, lambda api: api.get_market_summary(market))
    if result is None:
        typer.echo(f"No summary for {market}")
        raise typer.Exit(1)
    _echo_model(result)


@app.command()
def orderbook(
    market: str = typer.Argument(..., help="Market name, e.g. BTC-LTC"),
    side: OrderBookType = typer.Option(OrderBookType.BOTH, "--side", help="buy, sell or both"),
    depth: int = typer.Option(20, "--depth", min=1, help="Entries per side"),
    config_path: Optional[Path] = ConfigOption,
):
    """Show the order book of a market."""
    config = _load(config_path, simulate=False)
    book = _run(config, lambda api: api.get_order_book(market, side, depth))

    typer.echo(f"ORDER BOOK: {market}")
    for label, entries in (("BUY", book.buy), ("SELL", book.sell)):
        if not entries:
            continue
        typer.echo(f"--- {label} ---")
        for entry in entries[:depth]:
            typer.echo(f"{entry.rate:>20}  {entry.quantity}")


@app.command()
def balances(
    simulate: bool = SimulateOption,
    config_path: Optional[Path] = ConfigOption,
):
    """List balances of all currencies."""
    config = _load(config_path, simulate)
    result = _run(config, lambda api: api.get_balances())
    if not result:
        typer.echo("No balances")
        return
    for balance in result:
        typer.echo(f"{balance.currency:<8} {balance.balance}")


@app.command("open-orders")
def open_orders(
    market: Optional[str] = typer.Option(None, "--market", help="Only orders on this market"),
    simulate: bool = SimulateOption,
    config_path: Optional[Path] = ConfigOption,
):
    """List open orders."""
    config = _load(config_path, simulate)
    result = _run(config, lambda api: api.get_open_orders(market))
    if not result:
        typer.echo("No open orders")
        return
    for order in result:
        typer.echo(f"{order.order_uuid}  {order.exchange}  {order.order_type}  qty={order.quantity}  limit={order.limit}")


@app.command()
def order(
    order_id: str = typer.Argument(..., help="Order uuid"),
    simulate: bool = SimulateOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Show a single order."""
    config = _load(config_path, simulate)
    result = _run(config, lambda api: api.get_order(order_id))
    if result is None:
        typer.echo(f"Order {order_id} not found")
        raise typer.Exit(1)
    _echo_model(result)


@app.command()
def buy(
    market: str = typer.Argument(..., help="Market name, e.g. BTC-LTC"),
    quantity: str = typer.Argument(..., help="Amount of the target currency"),
    rate: str = typer.Argument(..., help="Limit price in the base currency"),
    simulate: bool = SimulateOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Place a limit buy order."""
    qty, limit = _decimal(quantity, "quantity"), _decimal(rate, "rate")
    config = _load(config_path, simulate)
    accepted = _run(config, lambda api: api.buy_limit(market, qty, limit))
    typer.echo(f"Buy order accepted: {accepted.uuid}")


@app.command()
def sell(
    market: str = typer.Argument(..., help="Market name, e.g. BTC-LTC"),
    quantity: str = typer.Argument(..., help="Amount of the target currency"),
    rate: str = typer.Argument(..., help="Limit price in the base currency"),
    simulate: bool = SimulateOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Place a limit sell order."""
    qty, limit = _decimal(quantity, "quantity"), _decimal(rate, "rate")
    config = _load(config_path, simulate)
    accepted = _run(config, lambda api: api.sell_limit(market, qty, limit))
    typer.echo(f"Sell order accepted: {accepted.uuid}")


@app.command()
def cancel(
    order_id: str = typer.Argument(..., help="Order uuid"),
    simulate: bool = SimulateOption,
    config_path: Optional[Path] = ConfigOption,
):
    """Cancel an open order."""
    config = _load(config_path, simulate)
    _run(config, lambda api: api.cancel_order(order_id))
    typer.echo(f"Order {order_id} cancelled")


if __name__ == "__main__":
    app()

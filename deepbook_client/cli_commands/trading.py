"""Pool and balance manager commands for the DeepBook CLI."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from loguru import logger

from deepbook_client.client import DeepBookClient
from deepbook_client.core.config import DeepBookSettings, load_settings
from deepbook_client.errors import DeepBookError
from deepbook_client.models import OrderType, SelfMatchingOption
from deepbook_client.transactions.types import ProgrammableTransaction

from .utils import describe_transaction, print_table, setup_logging

T = TypeVar("T")

trading_app = typer.Typer(
    name="trading",
    help="Query pools and balance managers, and preview orders",
)


async def _with_client(
    settings: DeepBookSettings, operation: Callable[[DeepBookClient], Awaitable[T]]
) -> T:
    async with DeepBookClient.from_settings(settings) as client:
        return await operation(client)


def _run(
    settings: DeepBookSettings,
    label: str,
    operation: Callable[[DeepBookClient], Awaitable[T]],
) -> T:
    try:
        return asyncio.run(_with_client(settings, operation))
    except DeepBookError as exc:
        logger.error("{} failed: {}", label, exc)
        raise typer.Exit(code=1) from exc


def _settings(verbose: bool) -> DeepBookSettings:
    settings = load_settings()
    setup_logging(settings.log_dir, verbose)
    return settings


@trading_app.command()
def balance(
    manager: str = typer.Argument(..., help="Balance manager key"),
    coin: str = typer.Argument(..., help="Coin key, e.g. SUI"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Show how much of a coin a balance manager holds."""
    settings = _settings(verbose)
    result = _run(
        settings, "Balance query", lambda client: client.check_manager_balance(manager, coin)
    )
    typer.echo(f"{manager} {coin}: {result.balance} ({result.coin_type})")


@trading_app.command("open-orders")
def open_orders(
    pool: str = typer.Argument(..., help="Pool key, e.g. SUI_DBUSDC"),
    manager: str = typer.Argument(..., help="Balance manager key"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """List the open order ids of a balance manager in a pool."""
    settings = _settings(verbose)
    order_ids = _run(
        settings,
        "Open orders query",
        lambda client: client.account_open_orders(pool, manager),
    )
    if not order_ids:
        typer.echo(f"No open orders for {manager} in {pool}")
        return
    print_table(f"Open orders {manager} @ {pool}", ["Order id"], [(oid,) for oid in order_ids])


@trading_app.command("mid-price")
def mid_price(
    pool: str = typer.Argument(..., help="Pool key"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Show the mid price of a pool in quote per base."""
    settings = _settings(verbose)
    price = _run(settings, "Mid price query", lambda client: client.mid_price(pool))
    typer.echo(f"{pool} mid price: {price}")


@trading_app.command()
def whitelisted(
    pool: str = typer.Argument(..., help="Pool key"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Show whether a pool is whitelisted."""
    settings = _settings(verbose)
    flag = _run(settings, "Whitelist query", lambda client: client.whitelisted(pool))
    typer.echo(f"{pool} whitelisted: {'yes' if flag else 'no'}")


async def preview_limit_order(
    client: DeepBookClient,
    *,
    pool: str,
    manager: str,
    client_order_id: str,
    price: str,
    quantity: str,
    is_bid: bool,
    expiration: int | None,
    order_type: OrderType,
    self_matching: SelfMatchingOption,
    pay_with_deep: bool,
    simulate: bool,
) -> tuple[list[str], str | None]:
    """Compose a limit order and optionally dry-run it.

    Returns:
        Transaction summary lines and the dry-run status (``None`` when skipped).
    """
    builder = client.new_transaction()
    await client.deepbook.place_limit_order(
        builder,
        pool,
        manager,
        client_order_id,
        price,
        quantity,
        is_bid,
        expiration=expiration,
        order_type=order_type,
        self_matching_option=self_matching,
        pay_with_deep=pay_with_deep,
    )
    lines = describe_transaction(ProgrammableTransaction(builder.inputs, builder.commands))
    if not simulate:
        return lines, None
    response = await client.simulator.inspect(builder)
    status = (response.get("effects") or {}).get("status") or {}
    return lines, str(status.get("status", "unknown"))


@trading_app.command("preview-limit-order")
def preview_limit_order_command(
    pool: str = typer.Option(..., "--pool", "-p", help="Pool key"),
    manager: str = typer.Option(..., "--manager", "-m", help="Balance manager key"),
    price: str = typer.Option(..., "--price", help="Price in quote per base"),
    quantity: str = typer.Option(..., "--quantity", "-q", help="Quantity in base units"),
    ask: bool = typer.Option(False, "--ask", help="Sell base instead of buying it"),
    client_order_id: str = typer.Option("1", "--client-order-id", help="Client order id"),
    expiration: int | None = typer.Option(
        None, "--expiration", help="Expiry timestamp in ms (default: never)"
    ),
    order_type: str = typer.Option(
        OrderType.NO_RESTRICTION.name,
        "--order-type",
        help="NO_RESTRICTION, IMMEDIATE_OR_CANCEL, FILL_OR_KILL or POST_ONLY",
    ),
    self_matching: str = typer.Option(
        SelfMatchingOption.SELF_MATCHING_ALLOWED.name,
        "--self-matching",
        help="SELF_MATCHING_ALLOWED, CANCEL_TAKER or CANCEL_MAKER",
    ),
    pay_with_deep: bool = typer.Option(
        True, "--pay-with-deep/--no-pay-with-deep", help="Pay trading fees in DEEP"
    ),
    simulate: bool = typer.Option(True, "--simulate/--no-simulate", help="Dry-run the order"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Compose a limit order, print its commands and dry-run it."""
    try:
        parsed_type = OrderType[order_type.upper()]
    except KeyError as exc:
        raise typer.BadParameter(f"Unknown order type: {order_type}") from exc
    try:
        parsed_matching = SelfMatchingOption[self_matching.upper()]
    except KeyError as exc:
        raise typer.BadParameter(f"Unknown self-matching option: {self_matching}") from exc

    settings = _settings(verbose)
    lines, status = _run(
        settings,
        "Limit order preview",
        lambda client: preview_limit_order(
            client,
            pool=pool,
            manager=manager,
            client_order_id=client_order_id,
            price=price,
            quantity=quantity,
            is_bid=not ask,
            expiration=expiration,
            order_type=parsed_type,
            self_matching=parsed_matching,
            pay_with_deep=pay_with_deep,
            simulate=simulate,
        ),
    )
    for line in lines:
        typer.echo(line)
    if status is not None:
        typer.echo(f"Dry run status: {status}")

"""Registry inspection commands for the DeepBook CLI."""

import typer

from deepbook_client.core.config import load_settings
from deepbook_client.registry import DeepBookConfig

from .utils import print_table

registry_app = typer.Typer(
    name="registry",
    help="Inspect configured coins, pools and balance managers",
)


def _load_registry() -> DeepBookConfig:
    return DeepBookConfig.from_settings(load_settings())


@registry_app.command()
def coins() -> None:
    """List the coins known for the configured network."""
    config = _load_registry()
    rows = [(key, coin.type, coin.scalar) for key, coin in sorted(config.coins.items())]
    print_table(f"Coins ({config.env})", ["Key", "Type", "Scalar"], rows)


@registry_app.command()
def pools() -> None:
    """List the pools known for the configured network."""
    config = _load_registry()
    rows = [
        (key, pool.base_coin, pool.quote_coin, pool.address)
        for key, pool in sorted(config.pools.items())
    ]
    print_table(f"Pools ({config.env})", ["Key", "Base", "Quote", "Address"], rows)


@registry_app.command()
def managers() -> None:
    """List configured balance managers and how they are accessed."""
    config = _load_registry()
    if not config.balance_managers:
        typer.echo("No balance managers configured (set DEEPBOOK_BALANCE_MANAGERS).")
        return
    rows = [
        (key, manager.address, manager.access.kind, manager.trade_cap or "-")
        for key, manager in sorted(config.balance_managers.items())
    ]
    print_table("Balance managers", ["Key", "Address", "Access", "Trade cap"], rows)

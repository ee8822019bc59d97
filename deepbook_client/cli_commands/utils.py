"""Shared utility functions for CLI commands."""

import sys
from collections.abc import Sequence
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.table import Table

from deepbook_client.transactions.types import (
    Argument,
    GasCoin,
    Input,
    MoveCall,
    NestedResult,
    ObjectInput,
    ProgrammableTransaction,
    PureInput,
    Result,
    SharedObjectArg,
    SplitCoins,
    TransferObjects,
)

console = Console()


def setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """Configure loguru logging.

    Args:
        log_dir: Directory for log files
        verbose: Enable verbose debug logging
    """
    # Remove default handler
    logger.remove()

    log_level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
        "<level>{message}</level>",
        level=log_level,
    )

    logger.add(
        log_dir / "deepbook_{time}.log",
        rotation="1 day",
        retention="7 days",
        level="DEBUG",
    )


def print_table(title: str, columns: Sequence[str], rows: Sequence[Sequence[object]]) -> None:
    """Render rows as a rich table on stdout."""
    table = Table(title=title)
    for column in columns:
        table.add_column(column, overflow="fold")
    for row in rows:
        table.add_row(*(str(cell) for cell in row))
    console.print(table)


def format_argument(argument: Argument) -> str:
    if isinstance(argument, GasCoin):
        return "gas"
    if isinstance(argument, Input):
        return f"in{argument.index}"
    if isinstance(argument, Result):
        return f"r{argument.index}"
    if isinstance(argument, NestedResult):
        return f"r{argument.index}.{argument.result_index}"
    return repr(argument)


def describe_transaction(transaction: ProgrammableTransaction) -> list[str]:
    """Human-readable one-line summaries of inputs and commands."""
    lines: list[str] = []
    for index, call_arg in enumerate(transaction.inputs):
        if isinstance(call_arg, PureInput):
            lines.append(f"in{index}: pure {call_arg.move_type} 0x{call_arg.value.hex()}")
        elif isinstance(call_arg, ObjectInput):
            arg = call_arg.arg
            if isinstance(arg, SharedObjectArg):
                access = "mut" if arg.mutable else "ref"
                lines.append(f"in{index}: shared {arg.object_id} ({access})")
            else:
                lines.append(f"in{index}: owned {arg.object_id} v{arg.version}")
    for index, command in enumerate(transaction.commands):
        if isinstance(command, MoveCall):
            args = ", ".join(format_argument(argument) for argument in command.arguments)
            types = f"<{', '.join(command.type_arguments)}>" if command.type_arguments else ""
            lines.append(f"r{index}: {command.module}::{command.function}{types}({args})")
        elif isinstance(command, SplitCoins):
            amounts = ", ".join(format_argument(argument) for argument in command.amounts)
            lines.append(f"r{index}: SplitCoins({format_argument(command.coin)}, [{amounts}])")
        elif isinstance(command, TransferObjects):
            objects = ", ".join(format_argument(argument) for argument in command.objects)
            lines.append(
                f"r{index}: TransferObjects([{objects}], {format_argument(command.address)})"
            )
    return lines

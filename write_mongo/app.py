"""Typer CLI for checking a write_mongo configuration outside the daemon."""

from __future__ import annotations

import socket
import time
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import load_config
from .data import DataSet, DSType, ValueList
from .errors import ConfigError
from .host import LocalHost
from .logging_conf import configure_logging
from .plugin import PLUGIN_NAME, module_register

app = typer.Typer(
    help="write_mongo command line tools",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()

ConfigArgument = Annotated[
    Path,
    typer.Argument(exists=True, dir_okay=False, readable=True, help="YAML configuration file"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]


def _bind(config: Path) -> LocalHost:
    host = LocalHost()
    module_register(host)
    try:
        host.configure(PLUGIN_NAME, load_config(config))
    except ConfigError as exc:
        host.shutdown()
        console.print(f"Invalid configuration: {exc}")
        raise typer.Exit(code=1) from exc
    if not host.registered():
        host.shutdown()
        console.print("No destination node could be configured.")
        raise typer.Exit(code=1)
    return host


@app.command()
def validate(config: ConfigArgument, verbose: VerboseOption = False) -> None:
    """Bind the configuration and list the resulting destination nodes."""

    configure_logging(verbose)
    host = _bind(config)
    table = Table(title="Destination nodes", box=box.SIMPLE)
    for column in ("Callback", "Host", "Port", "Timeout", "Database", "Layout"):
        table.add_column(column)
    try:
        for name, user_data in sorted(host.registered().items()):
            settings = user_data.data.settings
            table.add_row(
                name,
                settings.endpoint_host,
                str(settings.endpoint_port),
                str(settings.timeout),
                settings.database,
                settings.layout.value,
            )
        console.print(table)
    finally:
        host.shutdown()


@app.command()
def emit(
    config: ConfigArgument,
    value: Annotated[float, typer.Option("--value", help="Gauge value to store")],
    plugin: Annotated[str, typer.Option("--plugin")] = "write_mongo",
    plugin_instance: Annotated[str, typer.Option("--plugin-instance")] = "",
    type_name: Annotated[str, typer.Option("--type")] = "gauge",
    type_instance: Annotated[str, typer.Option("--type-instance")] = "",
    hostname: Annotated[Optional[str], typer.Option("--host")] = None,
    verbose: VerboseOption = False,
) -> None:
    """Write a single gauge sample through every configured node."""

    configure_logging(verbose)
    host = _bind(config)
    ds = DataSet.build(type_name, [("value", DSType.GAUGE)])
    vl = ValueList(
        values=[value],
        time=time.time(),
        host=hostname or socket.gethostname(),
        plugin=plugin,
        plugin_instance=plugin_instance,
        type=type_name,
        type_instance=type_instance,
    )
    try:
        statuses = host.write(ds, vl)
    finally:
        host.shutdown()

    table = Table(title=f"{PLUGIN_NAME} emit", box=box.SIMPLE)
    table.add_column("Callback")
    table.add_column("Status")
    for name, status in sorted(statuses.items()):
        table.add_row(name, "ok" if status == 0 else f"failed ({status})")
    console.print(table)
    if any(status != 0 for status in statuses.values()):
        raise typer.Exit(code=1)


def main() -> None:  # pragma: no cover
    app()


__all__ = ["app", "main"]

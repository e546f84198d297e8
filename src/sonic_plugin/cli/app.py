"""CLI for the Sonic plugin - check configuration and inspect the wallet from the terminal."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sonic_plugin.config import (
    PRIVATE_KEY_SETTING,
    RPC_URL_SETTING,
    WALLET_ADDRESS_SETTING,
    SonicSettings,
    load_settings,
    read_settings_file,
    validate_sonic_config,
)
from sonic_plugin.errors import SonicPluginError
from sonic_plugin.providers.wallet_status import SonicWalletStatusProvider
from sonic_plugin.wallet.chains import CHAINS
from sonic_plugin.wallet.manager import SonicChainReader, SonicWalletManager

app = typer.Typer(
    name="sonic-plugin",
    help="Inspect the Sonic plugin wallet and configuration.",
    no_args_is_help=True,
)
console = Console()

_config_path: Path | None = None


@app.callback()
def main(
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML settings file (defaults to environment variables)",
        envvar="SONIC_PLUGIN_CONFIG",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Inspect the Sonic plugin wallet and configuration."""
    global _config_path
    _config_path = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: Exception) -> None:
    console.print(f"[red]{exc}[/red]")
    raise typer.Exit(1)


def _settings() -> SonicSettings:
    try:
        if _config_path is not None:
            return load_settings(_config_path)
        return SonicSettings.from_mapping(
            {
                name: os.environ.get(name)
                for name in (PRIVATE_KEY_SETTING, RPC_URL_SETTING, WALLET_ADDRESS_SETTING)
            }
        )
    except SonicPluginError as exc:
        _fail(exc)


@app.command("check-config")
def check_config():
    """Validate SONIC_WALLET_ADDRESS and SONIC_PRIVATE_KEY.

    Values from --config take precedence over environment variables.
    """
    try:
        values = read_settings_file(_config_path) if _config_path is not None else {}
        env = validate_sonic_config(values, os.environ)
    except SonicPluginError as exc:
        _fail(exc)
    console.print(f"[green]Configuration OK[/green] for {env.wallet_address}")


@app.command("networks")
def networks():
    """List the supported Sonic networks."""
    table = Table(title="Supported Networks")
    table.add_column("Network", style="cyan")
    table.add_column("Chain ID", justify="right")
    table.add_column("RPC URL")
    for chain in CHAINS.values():
        table.add_row(chain.name or "-", str(chain.chain_id), chain.rpc_url)
    console.print(table)


@app.command("address")
def wallet_address():
    """Show the wallet address derived from the private key."""
    try:
        wallet = SonicWalletManager(_settings().wallet_config())
    except SonicPluginError as exc:
        _fail(exc)
    console.print(Panel(
        f"[cyan]{wallet.address}[/cyan]\n\n[dim]{wallet.network()}[/dim]",
        title="Wallet Address",
    ))


@app.command("balance")
def wallet_balance(
    address: str = typer.Argument(None, help="Address to check (defaults to the plugin wallet)"),
):
    """Show the native S balance of the plugin wallet or another address."""
    settings = _settings()

    async def _balance() -> tuple[str, str, str]:
        if address:
            reader = SonicChainReader.from_rpc_url(settings.rpc_url)
            return address, await reader.balance_of(address), reader.network()
        wallet = SonicWalletManager(settings.wallet_config())
        return wallet.address, await wallet.balance(), wallet.network()

    try:
        addr, balance, network = asyncio.run(_balance())
    except SonicPluginError as exc:
        _fail(exc)
    console.print(f"[bold]{addr}[/bold] on {network}: {balance} S")


@app.command("status")
def wallet_status():
    """Print the wallet status block as the agent sees it."""
    provider = SonicWalletStatusProvider(_settings())
    console.print(asyncio.run(provider.get(None, None)))

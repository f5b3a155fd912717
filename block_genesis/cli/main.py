"""
BlockGenesis - Command Line Interface
=======================================
Inspection shell over the genesis registry and the block codec.

Security Level: LOW
Last Updated: 2026-10-12
Version: 1.0.0

Commands:
- networks: List every network with its genesis hash
- show: Genesis record of one network
- decode: Decode a hex-encoded block file
- verify: Rebuild the registry and cross-check every record
"""

import typer
from typing import Optional
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# Internal imports
from block_genesis.constants import Envelope, PROTOCOL_VERSION
from block_genesis.config import get_settings
from block_genesis.domain.genesis import (
    GenesisRegistry,
    get_genesis_registry,
    strip_frame,
)
from block_genesis.errors import BlockGenesisException, GenesisError
from block_genesis.logging_setup import setup_logging
from block_genesis.utils.serialization import hex_to_bytes, serialize_to_json
from block_genesis.wire.codec import BlockCodec


# ============================================================================
# CLI APP
# ============================================================================

app = typer.Typer(
    name="blockgenesis",
    help="BlockGenesis - genesis block registry and block codec",
    add_completion=False
)

console = Console()


def _short(value: str) -> str:
    return f"{value[:16]}..."


# ============================================================================
# REGISTRY COMMANDS
# ============================================================================

@app.command("networks")
def networks_cmd():
    """List supported networks and their genesis hashes"""
    try:
        registry = get_genesis_registry()
    except BlockGenesisException as e:
        console.print(f"[red]Error building genesis registry: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title="Genesis Blocks")
    table.add_column("Network", style="cyan")
    table.add_column("Hash", style="green")
    table.add_column("Timestamp")
    table.add_column("Txs", justify="right")
    table.add_column("Proof")

    for record in registry:
        header = record.block.header
        table.add_row(
            record.network.value,
            _short(record.hash.hex()),
            header.time.strftime("%Y-%m-%d"),
            str(len(record.block.transactions)),
            "yes" if record.block.proof is not None else "no",
        )

    console.print(table)


@app.command("show")
def show_cmd(
    network: Optional[str] = typer.Argument(
        None,
        help="Network name (defaults to BLOCKGENESIS_NETWORK)"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the full record as JSON"
    )
):
    """Show the genesis record of one network"""
    try:
        record = get_genesis_registry().get(network or get_settings().network)
    except BlockGenesisException as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(serialize_to_json(record.to_dict(), indent=2))
        return

    header = record.block.header
    coinbase = record.block.coinbase()

    console.print(Panel.fit(
        f"Network: [cyan]{record.network.value}[/cyan]\n"
        f"Hash: [cyan]{record.hash.hex()}[/cyan]\n"
        f"Merkle root: [cyan]{record.merkle_root.hex()}[/cyan]\n"
        f"Version: [cyan]{header.version}[/cyan]\n"
        f"Time: [cyan]{header.time.isoformat()}[/cyan]\n"
        f"Bits: [cyan]{header.bits:08x}[/cyan]\n"
        f"Nonce: [cyan]{header.nonce}[/cyan]\n"
        f"Coinbase value: [cyan]{coinbase.total_output_value()}[/cyan]",
        title=f"Genesis {record.network.value}",
        border_style="green"
    ))


@app.command("verify")
def verify_cmd():
    """Rebuild every genesis record and check it against its constants"""
    try:
        registry = GenesisRegistry(get_settings())
    except GenesisError as e:
        console.print(f"[red]✗ Genesis verification failed: {escape(e.message)}[/red]")
        raise typer.Exit(1)

    for record in registry:
        console.print(
            f"[green]✓[/green] {record.network.value}: {_short(record.hash.hex())}"
        )

    console.print(f"[green]All {len(registry)} genesis blocks verified[/green]")


# ============================================================================
# CODEC COMMANDS
# ============================================================================

@app.command("decode")
def decode_cmd(
    hexfile: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="File holding a hex-encoded block"
    ),
    envelope: str = typer.Option(
        "base",
        "--envelope",
        "-e",
        help="Block envelope (base/packetcrypt)"
    ),
    framed: bool = typer.Option(
        False,
        "--framed",
        help="Input starts with an 8-byte magic + length prefix"
    ),
    protocol_version: int = typer.Option(
        PROTOCOL_VERSION,
        "--protocol-version",
        help="Wire protocol version"
    )
):
    """Decode a block and print it as JSON"""
    try:
        selected = Envelope[envelope.upper()]
    except KeyError:
        console.print(f"[red]Unknown envelope: {envelope}[/red]")
        raise typer.Exit(1)

    try:
        data = hex_to_bytes(hexfile.read_text(encoding="utf-8"))
        if framed:
            data = strip_frame(data)
        block = BlockCodec(get_settings()).decode(
            data,
            protocol_version=protocol_version,
            envelope=selected,
        )
    except (BlockGenesisException, ValueError) as e:
        console.print(f"[red]Decode failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    typer.echo(serialize_to_json(block.to_dict(), indent=2))


# ============================================================================
# CALLBACK
# ============================================================================

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging"
    )
):
    """
    BlockGenesis - genesis block registry and block codec

    Inspect, decode and verify the genesis blocks of every supported network.
    """
    config = get_settings()

    setup_logging(
        log_level="DEBUG" if verbose else config.log_level,
        log_to_file=config.log_to_file,
        log_dir=config.log_dir,
        log_format=config.log_format,
    )


if __name__ == "__main__":
    app()


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "app",
]

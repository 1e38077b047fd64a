"""Command line interface"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from ..config import ConverterConfig, load_config
from ..converter import ConversionFormat, ConversionPath, ConversionResult, ConversionSuccess, DataURLConverter
from ..errors import GatewayFailureError, UnsupportedFormatError
from ..extension import DataURLConverterExtension
from ..logging import setup_logging
from ..media.data_url import data_url_media_type, decode_data_url, is_data_url
from ..media.loader import MediaLoader, MediaResult
from ..media.mime import MediaKind, extension_for_mime, media_kind_from_mime

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="Convert media data URLs between formats", no_args_is_help=True)

# Source kinds each conversion path can read
_PATH_INPUT_KINDS = {
    ConversionPath.AUDIO: {MediaKind.VIDEO, MediaKind.AUDIO},
    ConversionPath.IMAGE: {MediaKind.IMAGE},
}


async def _load_source(source: str) -> tuple[str, MediaResult | None]:
    """Return (data URL, loaded media). Data URLs are passed through as given."""
    if is_data_url(source):
        return source, None
    media = await MediaLoader().load(source)
    return media.to_data_url(), media


def _source_kind(data_url: str, media: MediaResult | None) -> MediaKind:
    if media is not None:
        return media.kind
    return media_kind_from_mime(data_url_media_type(data_url))


def _warn_on_kind_mismatch(kind: MediaKind, format: str) -> None:
    try:
        target = ConversionFormat.parse(format)
    except UnsupportedFormatError:
        return
    if kind is not MediaKind.UNKNOWN and kind not in _PATH_INPUT_KINDS[target.path]:
        err_console.print(f"[yellow]Warning:[/yellow] {kind.value} source converted to {target.value}")


def _output_path(output: Path, result: ConversionSuccess, media: MediaResult | None) -> Path:
    """An existing directory gets <source stem><format extension> inside it."""
    if not output.is_dir():
        return output
    stem = Path(media.file_name).stem if media and media.file_name else "converted"
    suffix = extension_for_mime(result.format.mime_type) or f".{result.format.value}"
    return output / f"{stem}{suffix}"


async def _run_conversion(
    source: str, format: str, config: ConverterConfig
) -> tuple[DataURLConverter, ConversionResult, MediaResult | None]:
    data_url, media = await _load_source(source)
    _warn_on_kind_mismatch(_source_kind(data_url, media), format)
    converter = DataURLConverter(config=config)
    return converter, await converter.convert(data_url, format), media


def _result_bytes(converter: DataURLConverter, result: ConversionSuccess) -> bytes:
    if is_data_url(result.url):
        return decode_data_url(result.url)
    blob = converter.object_urls.resolve(result.url)
    converter.object_urls.revoke_object_url(result.url)
    return blob.data


@app.command("convert")
def convert_command(
    source: str = typer.Argument(..., help="Data URL, file path or http(s) URL"),
    format: str = typer.Option(..., "--format", "-f", help="Target format (mp3, png, jpeg)"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write converted bytes to this file (or into this directory)"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="Config file (JSON/JSON5)"
    ),
):
    """Convert SOURCE to FORMAT and print the result URL"""
    config = load_config(config_path)
    setup_logging(config.log_level, console=err_console)

    try:
        converter, result, media = asyncio.run(_run_conversion(source, format, config))
    except (GatewayFailureError, FileNotFoundError, ValueError, httpx.HTTPError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not isinstance(result, ConversionSuccess):
        err_console.print(f"[red]Error:[/red] {result.message}")
        raise typer.Exit(1)

    if output:
        target = _output_path(output, result, media)
        data = _result_bytes(converter, result)
        target.write_bytes(data)
        err_console.print(f"[green]Wrote {len(data)} bytes to {target}[/green]")
        return

    typer.echo(result.url)


@app.command("manifest")
def manifest_command(
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Show the extension manifest"""
    info = DataURLConverterExtension(DataURLConverter()).get_info()

    if json_output:
        typer.echo(json.dumps(info.to_host_dict(), indent=2))
        return

    table = Table(title=f"{info.name} ({info.id})")
    table.add_column("Opcode", style="cyan", no_wrap=True)
    table.add_column("Type", style="green")
    table.add_column("Text", style="white")
    table.add_column("Menus", style="yellow")

    for block in info.blocks:
        menus = ", ".join(
            f"{arg.menu}: {'/'.join(info.menus[arg.menu].items)}"
            for arg in block.arguments.values()
            if arg.menu
        )
        table.add_row(block.opcode, block.block_type, block.text, menus or "-")

    console.print(table)


def main() -> None:
    app()

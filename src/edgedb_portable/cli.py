"""
edgedb-portable CLI.

Usage:
    edgedb-portable list --nightly
    edgedb-portable resolve --version 3.1
    edgedb-portable download --version 3 --dest ./downloads
"""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from edgedb_portable.config import get_settings
from edgedb_portable.exceptions import PortableError
from edgedb_portable.logging import setup_logging
from edgedb_portable.models.channel import Channel, Query
from edgedb_portable.models.package import PackageInfo
from edgedb_portable.services.download import DownloadService, verify_download
from edgedb_portable.services.repository import PackageRepository

console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    raise SystemExit(1)


def _repository(ctx: click.Context) -> PackageRepository:
    return PackageRepository(pkg_root=ctx.obj.get("pkg_root"))


def _resolve(ctx: click.Context, nightly: bool, version: str | None) -> PackageInfo:
    """Resolve query options to a package or exit with an error."""
    try:
        query = Query.from_options(nightly, version)
        package = _repository(ctx).get_server_package(query)
    except PortableError as e:
        _fail(str(e))
    if package is None:
        _fail(f"no package matches {query}")
    return package


@click.group()
@click.option("--pkg-root", envvar="EDGEDB_PKG_ROOT", help="Package server base URL")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.version_option(package_name="edgedb-portable")
@click.pass_context
def main(ctx: click.Context, pkg_root: str | None, verbose: bool) -> None:
    """edgedb-portable: resolve and download EdgeDB server packages."""
    try:
        settings = get_settings()
    except ValidationError as e:
        _fail(f"invalid configuration: {e}")
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_json)
    ctx.ensure_object(dict)
    ctx.obj["pkg_root"] = pkg_root


# =============================================================================
# List Command
# =============================================================================


@main.command(name="list")
@click.option("--nightly", is_flag=True, help="Nightly channel")
@click.pass_context
def list_packages(ctx: click.Context, nightly: bool) -> None:
    """List server versions available for this platform."""
    channel = Channel.NIGHTLY if nightly else Channel.STABLE
    try:
        packages = _repository(ctx).get_server_packages(channel)
    except PortableError as e:
        _fail(str(e))

    if not packages:
        console.print(f"[yellow]No {channel.as_str()} packages[/yellow]")
        return
    for pkg in sorted(packages, key=lambda p: p.version.specific()):
        console.print(f"{escape(str(pkg.version))}  [dim]{pkg.size:,} bytes[/dim]")


# =============================================================================
# Resolve Command
# =============================================================================


@main.command()
@click.option("--nightly", is_flag=True, help="Nightly channel")
@click.option("--version", "version", help='Version filter, e.g. "3", "3.1" or "nightly"')
@click.option("--json", "as_json", is_flag=True, help="JSON output")
@click.pass_context
def resolve(ctx: click.Context, nightly: bool, version: str | None, as_json: bool) -> None:
    """Show the package that would be installed."""
    package = _resolve(ctx, nightly, version)
    if as_json:
        click.echo(package.model_dump_json(indent=2))
        return
    console.print(f"[bold]{escape(str(package))}[/bold]")
    console.print(f"URL:  {escape(package.url)}", soft_wrap=True)
    console.print(f"Size: {package.size:,} bytes")
    console.print(f"Hash: {package.hash}", soft_wrap=True)


# =============================================================================
# Download Command
# =============================================================================


@main.command()
@click.option("--nightly", is_flag=True, help="Nightly channel")
@click.option("--version", "version", help='Version filter, e.g. "3", "3.1" or "nightly"')
@click.option(
    "--dest",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to download into",
)
@click.option("--no-progress", is_flag=True, help="Do not show a progress bar")
@click.pass_context
def download(
    ctx: click.Context,
    nightly: bool,
    version: str | None,
    dest: Path,
    no_progress: bool,
) -> None:
    """Download and verify a server package."""
    package = _resolve(ctx, nightly, version)
    dest.mkdir(parents=True, exist_ok=True)
    path = dest / package.cache_file_name()

    service = DownloadService(console=err_console, show_progress=not no_progress)
    try:
        result = service.download(path, package.url)
        verify_download(result, package)
    except PortableError as e:
        _fail(str(e))
    console.print(
        f"[green]Downloaded[/green] {escape(str(package))} -> {escape(str(path))}",
        soft_wrap=True,
    )


"""Command-line entry points for the symbol cache."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from symcache.config import ConfigError, SymCacheConfig, dump_example_config, load_config
from symcache.core import SymbolCache
from symcache.errors import ConfigInvalid
from symcache.parse.pdb import PdbParseError, get_stats
from symcache.types import SymbolKey
from symcache.util.logging import configure_logging

app = typer.Typer(add_completion=False, help="Local cache for symbol-server PDB files")

EXIT_FAILED = 1
EXIT_CONFIG = 2

ConfigOption = typer.Option(None, "--config", "-c", help="YAML/TOML/JSON config file")
RootOption = typer.Option(None, "--root", help="Override cache.root")
ServerOption = typer.Option(None, "--server", help="Override cache.server_url")


def _load(config: Optional[Path], root: Optional[Path], server: Optional[str]) -> SymCacheConfig:
    overrides: dict[str, object] = {}
    if root is not None:
        overrides["cache.root"] = str(root)
    if server is not None:
        overrides["cache.server_url"] = server
    try:
        return load_config(config, overrides=overrides)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc


def _build_cache(cfg: SymCacheConfig) -> SymbolCache:
    configure_logging(log_path=cfg.logging.log_path, level=cfg.logging.level, stream=sys.stderr)
    return SymbolCache.from_config(cfg)


def _make_key(name: str, guid: str, age: str) -> SymbolKey:
    try:
        return SymbolKey(name=name, guid=guid, age=int(age, 16))
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _download(cache: SymbolCache, key: SymbolKey) -> None:
    try:
        result = cache.download(key)
    except ConfigInvalid as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc

    if not result:
        typer.echo(f"{result.status.value}: {result.relative_path}", err=True)
        raise typer.Exit(code=EXIT_FAILED)
    typer.echo(str(result.path))


@app.command()
def fetch(
    name: str = typer.Argument(..., help="Symbol file name, e.g. ntdll.pdb"),
    guid: str = typer.Argument(..., help="Build GUID (32 hex digits)"),
    age: str = typer.Argument(..., help="Age in hex"),
    config: Optional[Path] = ConfigOption,
    root: Optional[Path] = RootOption,
    server: Optional[str] = ServerOption,
) -> None:
    """Download a symbol file into the cache unless already present."""

    cfg = _load(config, root, server)
    _download(_build_cache(cfg), _make_key(name, guid, age))


@app.command()
def lookup(
    name: str = typer.Argument(..., help="Symbol file name"),
    identifier: str = typer.Argument(..., help="Combined GUID+age as used in symbol server URLs"),
    config: Optional[Path] = ConfigOption,
    root: Optional[Path] = RootOption,
    server: Optional[str] = ServerOption,
) -> None:
    """Like ``fetch`` but takes the ``GUIDAGE`` directory name."""

    try:
        key = SymbolKey.parse_identifier(name, identifier)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    cfg = _load(config, root, server)
    _download(_build_cache(cfg), key)


@app.command()
def path(
    name: str = typer.Argument(..., help="Symbol file name"),
    guid: str = typer.Argument(..., help="Build GUID"),
    age: str = typer.Argument(..., help="Age in hex"),
    config: Optional[Path] = ConfigOption,
    root: Optional[Path] = RootOption,
) -> None:
    """Print where a symbol file is (or would be) cached, without fetching."""

    cfg = _load(config, root, None)
    cache = SymbolCache.from_config(cfg)
    typer.echo(str(cache.resolve_path(_make_key(name, guid, age))))


@app.command()
def stats(file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local PDB file")) -> None:
    """Print the record counts the content check relies on."""

    try:
        result = get_stats(file)
    except PdbParseError as exc:
        typer.echo(f"Not a readable PDB: {exc}", err=True)
        raise typer.Exit(code=EXIT_FAILED) from exc
    typer.echo(f"block_size={result.block_size}")
    typer.echo(f"streams={result.stream_count}")
    typer.echo(f"types={result.type_count}")
    typer.echo(f"ids={result.id_count}")


@app.command("dump-config")
def dump_config(dest: Path = typer.Argument(..., help="Destination (.yaml or .json)")) -> None:
    """Write the default configuration to DEST."""

    try:
        dump_example_config(dest)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc
    typer.echo(f"Wrote {dest}")


def main() -> None:
    app()


__all__ = ["main", "app"]

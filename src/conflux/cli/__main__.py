from __future__ import annotations

import dataclasses
import importlib
import json
import logging
import time
from pathlib import Path
from typing import Any, List, Optional

import typer

from ..core.environment import Environment
from ..core.errors import ConfluxError
from ..core.events import ConfigChangedEvent, EventBus
from ..core.types import shape_name

app = typer.Typer(help="Conflux CLI")


def _env(name: str, config: Optional[Path], sources: Optional[List[Path]]) -> Environment:
    return Environment(name, sources=sources or None, config_path=config)


def _load_shape(path: str) -> Any:
    module_name, sep, attr = path.partition(":")
    if not sep or not attr:
        raise typer.BadParameter("shape must look like 'package.module:ClassName'")
    try:
        target: Any = importlib.import_module(module_name)
        for part in attr.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError) as e:
        raise typer.BadParameter(f"can't import {path}: {e}") from e
    return target


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def _dump(value: Any) -> str:
    return json.dumps(_jsonable(value), indent=2, default=str)


class _EchoListener:
    def on_config_changed(self, event: ConfigChangedEvent) -> None:
        typer.echo(_dump({
            "shape": shape_name(event.shape),
            "previous": _jsonable(event.previous),
            "current": _jsonable(event.current),
        }))

    def on_refresh_event(self) -> None:
        pass


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level"),
):
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def values(
    env: str = typer.Option("development", "--env"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to conflux.yaml"),
    source: Optional[List[Path]] = typer.Option(None, "--source"),
):
    """Print merged raw properties with the source each one came from."""
    e = _env(env, config, source)
    try:
        effective, provenance = e.accessor().properties()
    except ConfluxError as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1)
    typer.echo(_dump({
        key: {"value": value, "source": provenance[key].source_id}
        for key, value in sorted(effective.items())
    }))


@app.command()
def probe(
    shape: str = typer.Argument(..., help="package.module:RawShape"),
    prefix: Optional[str] = typer.Option(None, "--prefix"),
    env: str = typer.Option("development", "--env"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to conflux.yaml"),
    source: Optional[List[Path]] = typer.Option(None, "--source"),
):
    """Bind a raw shape once and print it."""
    raw_shape = _load_shape(shape)
    provider = _env(env, config, source).provider_factory().build(raw_shape, prefix=prefix)
    try:
        typer.echo(_dump(provider.probe()))
    except ConfluxError as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1)


@app.command()
def watch(
    shape: str = typer.Argument(..., help="package.module:RawShape"),
    prefix: Optional[str] = typer.Option(None, "--prefix"),
    interval: float = typer.Option(5.0, "--interval", min=0.0, help="Seconds between refreshes"),
    count: Optional[int] = typer.Option(None, "--count", min=1, help="Stop after N refreshes"),
    env: str = typer.Option("development", "--env"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to conflux.yaml"),
    source: Optional[List[Path]] = typer.Option(None, "--source"),
):
    """Print the current value, then every change detected by periodic refreshes."""
    raw_shape = _load_shape(shape)
    bus = EventBus()
    factory = _env(env, config, source).provider_factory(event_manager=bus)
    provider = factory.build(raw_shape, prefix=prefix)
    bus.subscribe(_EchoListener())
    try:
        typer.echo(_dump(provider.get_data()))
        refreshes = 0
        while count is None or refreshes < count:
            time.sleep(interval)
            factory.refresh_all()
            refreshes += 1
    except ConfluxError as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

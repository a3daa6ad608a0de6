from __future__ import annotations

from pathlib import Path

import typer

from gamebook.errors import LoadError
from gamebook.validation import load_crt, load_story


validate_app = typer.Typer(help="Validate gamebook data files")


@validate_app.command()
def story(file: Path = typer.Argument(..., help="Story document (.toml/.yaml/.json)")):
    """Validate a story document."""
    try:
        doc = load_story(file)
    except LoadError as e:
        typer.secho(f"ERR: {file}\n{e}", fg=typer.colors.RED)
        raise typer.Exit(1)
    typer.secho(f"OK: {file} ({len(doc.nodes)} nodes)", fg=typer.colors.GREEN)


@validate_app.command()
def crt(file: Path = typer.Argument(..., help="Combat result table document")):
    """Validate a combat result table."""
    try:
        table = load_crt(file)
    except LoadError as e:
        typer.secho(f"ERR: {file}\n{e}", fg=typer.colors.RED)
        raise typer.Exit(1)
    gaps = table.gaps()
    typer.secho(f"OK: {file} ({len(table)} entries)", fg=typer.colors.GREEN)
    if gaps:
        sample = ", ".join(f"({k.roll},{k.ratio})" for k in gaps[:5])
        more = "" if len(gaps) <= 5 else f" (+{len(gaps)-5} more)"
        typer.secho(f"warning: {len(gaps)} undefined keys: {sample}{more}", fg=typer.colors.YELLOW)


__all__ = ["validate_app"]

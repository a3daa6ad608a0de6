from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from gamebook.cli_validate import validate_app
from gamebook.config_env import load_env
from gamebook.engine.config import get_pacing, load_config, save_config
from gamebook.engine.logger import SessionLogger
from gamebook.engine.session import Session
from gamebook.errors import LoadError, UnknownSystemError
from gamebook.rules import available_systems
from gamebook.validation import load_story

EXIT_LOAD_ERROR = 1
EXIT_HALTED = 2

app = typer.Typer(no_args_is_help=True, help="Gamebook - play data-driven gamebooks in the terminal.")
app.add_typer(validate_app, name="validate")


@app.callback()
def main() -> None:
    """Gamebook - play data-driven gamebooks in the terminal."""
    load_env()


@app.command()
def play(
    story: Path = typer.Argument(..., help="Story document (.toml/.yaml/.json)"),
    crt: Path | None = typer.Option(None, help="Combat result table (default: beside the story, then bundled)"),
    system: str | None = typer.Option(None, help="Rule system name (overrides the story's 'system')"),
    seed: int | None = typer.Option(None, help="Seed the dice for a reproducible run"),
    delay: float | None = typer.Option(None, help="Seconds of pacing around each combat blow"),
    log: Path | None = typer.Option(None, "--log", help="Write a JSONL + Markdown transcript"),
    max_rounds: int = typer.Option(100, help="Give up on a fight that is still undecided after this many blows"),
    actions: bool = typer.Option(True, "--actions/--no-actions", help="Prompt for an action between nodes"),
) -> None:
    """Play a story from its first node until it ends."""
    try:
        doc = load_story(story)
        session = Session.from_story(
            doc,
            system_name=system,
            story_file=story,
            crt_path=crt,
            seed=seed,
            echo=typer.echo,
            pacing=get_pacing(delay),
            journal=SessionLogger(log) if log else None,
            max_rounds=max_rounds,
            action_prompt=actions,
        )
    except (LoadError, UnknownSystemError) as e:
        typer.secho(f"ERR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_LOAD_ERROR)

    if doc.title:
        typer.secho(doc.title, bold=True)
    result = session.run()
    if not result.completed:
        typer.secho(f"Session halted at {result.node_id}: {result.error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_HALTED)


@app.command()
def systems() -> None:
    """List the registered rule systems."""
    for name in available_systems():
        typer.echo(name)


@app.command(help="Set or show local gamebook config (~/.gamebook/config.json)")
def config(
    pacing: float | None = typer.Option(None, "--pacing", help="Default combat pacing in seconds"),
    crt: Path | None = typer.Option(None, "--crt", help="Default combat result table"),
    system: str | None = typer.Option(None, "--system", help="Default rule system"),
    show: bool = typer.Option(False, "--show", help="Print current config"),
) -> None:
    cfg: dict[str, Any] = load_config()
    changed = False
    if pacing is not None:
        cfg["pacing"] = max(0.0, pacing)
        changed = True
    if crt is not None:
        cfg["crt"] = str(crt.expanduser().resolve())
        changed = True
    if system is not None:
        if system not in available_systems():
            typer.secho(f"Unknown rule system: {system}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        cfg["system"] = system
        changed = True
    if changed:
        save_config(cfg)
        typer.echo("Config saved.")
    if show:
        typer.echo(cfg)


def run_cli() -> None:
    app()


if __name__ == "__main__":
    run_cli()

from __future__ import annotations

import io

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gamebook.engine.player import Player


def _csv(items) -> str:
    return ", ".join(sorted(items)) if items else "-"


def stats_block(player: Player) -> Table:
    t = Table(box=None, show_header=False, expand=False)
    for stat, value in player.stats.items():
        base = player.base_stats.get(stat)
        shown = f"{value}/{base}" if base is not None and base != value else str(value)
        t.add_row(f"[bold]{stat}[/]", shown)
    return t


def gear_block(player: Player) -> Table:
    t = Table(box=None, show_header=False, expand=False)
    t.add_row("Abilities", _csv(player.active_abilities()))
    t.add_row("Items", _csv(player.items))
    equip = ", ".join(f"{slot}: {item}" for slot, item in sorted(player.equipment.items()))
    t.add_row("Equipment", equip or "-")
    return t


def status_panel(player: Player, title: str = "Status") -> Panel:
    grid = Table.grid(padding=(0, 2))
    grid.add_row(stats_block(player), gear_block(player))
    return Panel(grid, title=title, box=box.ASCII, expand=False)


def render_status(player: Player, title: str = "Status", width: int = 72) -> str:
    """Render the status panel to plain text so any echo function can print it."""
    buf = io.StringIO()
    console = Console(file=buf, width=width, color_system=None, highlight=False)
    console.print(status_panel(player, title))
    return buf.getvalue().rstrip("\n")

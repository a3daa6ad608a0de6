# tests/conftest.py
import os

import pytest

from gamebook.engine.crt import CombatKey, CombatResultTable, DamageOutcome

# keep combat narration instant and logs quiet regardless of the developer's shell
os.environ["GAMEBOOK_PACING"] = "0"
os.environ.setdefault("GAMEBOOK_LOG_LEVEL", "WARNING")


class FixedRolls:
    """Stand-in for ``random.Random`` that hands out scripted d10 results.

    The last roll repeats once the script runs out.
    """

    def __init__(self, *rolls: int):
        self.rolls = list(rolls)
        self.calls = 0

    def randint(self, lo: int, hi: int) -> int:
        self.calls += 1
        value = self.rolls.pop(0) if len(self.rolls) > 1 else self.rolls[0]
        assert lo <= value <= hi
        return value


def table(**entries) -> CombatResultTable:
    """``table(r3_c5=(5, 2))`` -> CRT with key (3, 5) -> 5/2; ``c_m2`` means ratio -2."""
    out = {}
    for name, value in entries.items():
        roll_part, ratio_part = name[1:].split("_c")
        ratio = -int(ratio_part[1:]) if ratio_part.startswith("m") else int(ratio_part)
        enemy_loss, player_loss, *killed = value
        out[CombatKey(int(roll_part), ratio)] = DamageOutcome(enemy_loss, player_loss, bool(killed and killed[0]))
    return CombatResultTable(out)


@pytest.fixture
def fixed_rolls():
    return FixedRolls


@pytest.fixture
def make_table():
    return table


@pytest.fixture
def gamebook_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    monkeypatch.setenv("GAMEBOOK_HOME", str(home))
    monkeypatch.delenv("GAMEBOOK_CRT", raising=False)
    return home


@pytest.fixture
def scripted_input(monkeypatch):
    """Feed ``builtins.input`` from a list; returns the list of prompts seen."""

    def install(*answers: str):
        queue = list(answers)
        prompts: list[str] = []

        def fake_input(prompt: str = "") -> str:
            prompts.append(prompt)
            if not queue:
                raise EOFError
            return queue.pop(0)

        monkeypatch.setattr("builtins.input", fake_input)
        return prompts

    return install

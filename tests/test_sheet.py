from gamebook.engine.player import Player
from gamebook.sheet import render_status


def test_render_status_plain_text():
    p = Player(
        stats={"HP": 25, "CS": 15},
        abilities={"Healing": True, "Tracking": False},
        items={"Meal"},
        equipment={"weapon": "Sword"},
    )
    p.take_damage(5)
    text = render_status(p, title="Lone Wolf")
    assert "Lone Wolf" in text
    assert "20/25" in text
    assert "Healing" in text and "Tracking" not in text
    assert "weapon: Sword" in text
    assert "\x1b[" not in text


def test_render_status_empty_player():
    text = render_status(Player())
    assert "Status" in text
    assert "-" in text

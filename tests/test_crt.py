import pytest

from gamebook.engine.crt import (
    ZERO_OUTCOME,
    CombatKey,
    CombatResultTable,
    DamageOutcome,
    normalize_ratio,
)


@pytest.mark.parametrize(
    "ratio,expected",
    [(-30, -11), (-11, -11), (-10, -10), (0, 0), (10, 10), (11, 11), (12, 11), (99, 11)],
)
def test_normalize_ratio_clamps(ratio, expected):
    assert normalize_ratio(ratio) == expected


def test_from_rows_and_lookup():
    crt = CombatResultTable.from_rows(
        [
            {"RandNum": 3, "ComRatio": 5, "EnemyLoss": 5, "PlayerLoss": 2, "IsKilled": False},
            {"RandNum": 0, "ComRatio": -11, "EnemyLoss": 0, "PlayerLoss": 12, "IsKilled": False},
        ]
    )
    assert len(crt) == 2
    assert crt.lookup(3, 5) == DamageOutcome(5, 2, False)
    assert crt[CombatKey(0, -11)].player_loss == 12
    assert crt.lookup(4, 5) is None


def test_later_row_wins_on_repeat():
    crt = CombatResultTable.from_rows(
        [
            {"RandNum": 1, "ComRatio": 0, "EnemyLoss": 1, "PlayerLoss": 1},
            {"RandNum": 1, "ComRatio": 0, "EnemyLoss": 9, "PlayerLoss": 0, "IsKilled": True},
        ]
    )
    assert crt.lookup(1, 0) == DamageOutcome(9, 0, True)


def test_table_is_read_only(make_table):
    crt = make_table(r3_c5=(5, 2))
    with pytest.raises(TypeError):
        crt[CombatKey(3, 5)] = ZERO_OUTCOME  # type: ignore[index]
    with pytest.raises(TypeError):
        crt._entries[CombatKey(1, 1)] = ZERO_OUTCOME


def test_negative_losses_rejected():
    with pytest.raises(ValueError):
        DamageOutcome(enemy_loss=-1)


def test_gaps_cover_full_domain(make_table):
    assert len(CombatResultTable().gaps()) == 10 * 23
    crt = make_table(r0_cm11=(0, 6), r9_c11=(18, 0, True))
    gaps = crt.gaps()
    assert len(gaps) == 228
    assert CombatKey(0, -11) not in gaps
    assert CombatKey(5, 0) in gaps

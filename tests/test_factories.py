import pytest

from roguequest.core.rng import RNG
from roguequest.data.repositories import CreaturesRepository
from roguequest.domain.creature_scaling import EffectiveStats
from roguequest.domain.roster import RosterCreature
from roguequest.domain.state import RunModifiers
from roguequest.services.factories import (
    BACK_ROW,
    FRONT_ROW,
    HERO_ID,
    create_creature_unit,
    create_hero_unit,
    make_instance_id,
)


def test_make_instance_id_is_deterministic() -> None:
    first = make_instance_id("run", RNG(7))
    second = make_instance_id("run", RNG(7))

    assert first == second
    assert first.startswith("run_")
    assert 100000 <= int(first.split("_")[1]) <= 999999


def test_create_hero_unit_uses_level_curve() -> None:
    hero = create_hero_unit(2, RunModifiers(), name="Alice")

    assert hero.instance_id == HERO_ID
    assert hero.display_name == "Alice"
    assert hero.side == "allies"
    assert hero.index == FRONT_ROW
    assert hero.level == 2
    assert hero.stats.hp == hero.stats.max_hp == 120
    assert hero.stats.attack == 14
    assert hero.stats.crit_rate == pytest.approx(0.1)


def test_create_hero_unit_applies_run_modifiers() -> None:
    modifiers = RunModifiers(
        attack_multiplier=1.5,
        hp_multiplier=2.0,
        crit_rate_bonus=0.2,
        lifesteal=0.05,
        double_attack_chance=0.15,
        rage=True,
    )

    hero = create_hero_unit(1, modifiers)

    assert hero.stats.max_hp == hero.stats.hp == 220
    assert hero.stats.attack == 18
    assert hero.stats.crit_rate == pytest.approx(0.3)
    assert hero.lifesteal == pytest.approx(0.05)
    assert hero.double_attack_chance == pytest.approx(0.15)
    assert hero.rage


@pytest.mark.parametrize(("creature_id", "row"), [("pikeman", FRONT_ROW), ("archer", BACK_ROW)])
def test_create_creature_unit_rows_and_stars(creature_id: str, row: int) -> None:
    creature_def = CreaturesRepository().get(creature_id)
    member = RosterCreature(creature_id, star=2)

    unit = create_creature_unit(member, creature_def, EffectiveStats(hp=60, attack=11, defense=7, speed=6), RunModifiers())

    assert unit.instance_id == f"creature_{creature_id}"
    assert unit.display_name == f"{creature_def.name} **"
    assert unit.index == row
    assert unit.level == creature_def.tier
    assert unit.source_id == creature_id
    assert unit.stats.hp == unit.stats.max_hp == 60
    assert unit.stats.crit_rate == pytest.approx(0.05)

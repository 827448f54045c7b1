from typing import List

import pytest

from roguequest.core.rng import RNG
from roguequest.domain.battle_models import BattleState, BattleUnit
from roguequest.domain.defs import DamageMultiplierEffect, HealEffect, StatBuffEffect
from roguequest.domain.skills import Skill
from roguequest.services.battle_service import (
    AttackResolvedEvent,
    BattleEvent,
    BattleResolvedEvent,
    BattleService,
    CombatantDefeatedEvent,
    HealEvent,
    RewardGrantedEvent,
    RoundEndedEvent,
    SkillTriggeredEvent,
)
from roguequest.services.encounter_service import stage_kill_reward
from tests.helpers.scripted_rng import ScriptedRNG
from tests.helpers.units import make_unit


def _hero(**overrides) -> BattleUnit:
    values = dict(hp=110, attack=30, defense=5, speed=10)
    values.update(overrides)
    return make_unit("hero_0", "allies", **values)


def _enemy(instance_id: str = "enemy_0", **overrides) -> BattleUnit:
    values = dict(hp=50, attack=5, defense=2, speed=8)
    values.update(overrides)
    return make_unit(instance_id, "enemies", **values)


def _attacks(events: List[BattleEvent], attacker_id: str) -> List[AttackResolvedEvent]:
    return [event for event in events if isinstance(event, AttackResolvedEvent) and event.attacker_id == attacker_id]


def test_hero_defeats_single_enemy_in_two_hits() -> None:
    service = BattleService()
    rng = RNG(1)
    hero = _hero()
    enemy = _enemy()
    rewards = []

    def grant(state: BattleState, defeated: BattleUnit) -> List[BattleEvent]:
        gold, exp = stage_kill_reward(1, 1)
        rewards.append((defeated.instance_id, gold, exp))
        return [RewardGrantedEvent(source_id=defeated.instance_id, gold=gold, exp=exp)]

    state, _ = service.start_battle([hero], [enemy], [], rng)
    events = service.run_to_completion(state, rng, on_enemy_defeated=grant)

    assert [attack.damage for attack in _attacks(events, "hero_0")] == [29, 29]
    assert state.status == "victory"
    assert state.round_number == 2
    assert enemy.stats.hp == 0
    assert hero.stats.hp == 108
    assert rewards == [("enemy_0", 16, 9)]
    assert isinstance(events[-1], BattleResolvedEvent)
    assert events[-1].outcome == "victory"
    assert state.event_log[-1] is events[-1]


def test_battle_with_dead_enemies_resolves_before_any_action() -> None:
    service = BattleService()
    rng = RNG(2)
    hero = _hero()
    enemy = _enemy(hp=0, max_hp=50)

    state, events = service.start_battle([hero], [enemy], [], rng)

    assert state.status == "victory"
    assert isinstance(events[-1], BattleResolvedEvent)
    assert events[-1].rounds == 0
    assert service.run_round(state, rng) == []
    assert service.run_to_completion(state, rng) == []
    assert state.round_number == 0
    assert hero.stats.hp == 110


def test_battle_with_dead_allies_resolves_as_defeat() -> None:
    service = BattleService()
    state, events = service.start_battle([_hero(hp=0, max_hp=110)], [_enemy()], [], RNG(3))

    assert state.status == "defeat"
    assert not any(isinstance(event, AttackResolvedEvent) for event in events)


def test_living_lists_units_with_hp_per_side() -> None:
    hero = _hero()
    fallen = make_unit("creature_imp", hp=0, max_hp=40)
    enemy = _enemy()
    state = BattleState(battle_id="battle_1", allies=[hero, fallen], enemies=[enemy])

    assert state.living("allies") == [hero]
    assert state.living("enemies") == [enemy]
    enemy.stats.hp = 0
    assert state.living("enemies") == []


def test_defeat_when_allies_fall() -> None:
    service = BattleService()
    rng = RNG(4)
    hero = _hero(hp=5, max_hp=110, attack=3, speed=1)
    enemy = _enemy(attack=50, speed=20, hp=500)

    state, _ = service.start_battle([hero], [enemy], [], rng)
    events = service.run_to_completion(state, rng)

    assert state.status == "defeat"
    assert not state.halted
    assert any(isinstance(event, CombatantDefeatedEvent) and event.combatant_id == "hero_0" for event in events)


def test_safety_cap_halts_as_defeat() -> None:
    service = BattleService()
    rng = RNG(5)
    hero = _hero(hp=10_000, attack=1, defense=10)
    enemy = _enemy(hp=10_000, attack=1, defense=10)

    state, _ = service.start_battle([hero], [enemy], [], rng)
    events = service.run_to_completion(state, rng, max_rounds=5)

    assert state.round_number == 5
    assert state.status == "defeat"
    assert state.halted
    assert isinstance(events[-1], BattleResolvedEvent)
    assert events[-1].halted


def test_error_inside_round_halts_battle() -> None:
    service = BattleService()
    rng = RNG(6)

    def explode(state: BattleState, defeated: BattleUnit) -> List[BattleEvent]:
        raise RuntimeError("boom")

    state, _ = service.start_battle([_hero()], [_enemy(hp=10, max_hp=10)], [], rng)
    events = service.run_round(state, rng, on_enemy_defeated=explode)

    assert state.status == "defeat"
    assert state.halted
    assert isinstance(events[-1], BattleResolvedEvent)
    assert events[-1].halted


def test_run_round_requires_started_battle() -> None:
    state = BattleState(battle_id="b", allies=[_hero()], enemies=[_enemy()])
    with pytest.raises(ValueError):
        BattleService().run_round(state, RNG(1))


def test_action_order_sorts_by_speed_then_level() -> None:
    service = BattleService()
    fast = make_unit("fast", "enemies", speed=20)
    veteran = make_unit("veteran", "allies", speed=10, level=5)
    rookie = make_unit("rookie", "allies", speed=10, level=1)
    slow = make_unit("slow", "enemies", speed=2)
    dead = make_unit("dead", "enemies", speed=99, hp=0, max_hp=10)
    state = BattleState(battle_id="b", allies=[rookie, veteran], enemies=[slow, fast, dead])

    for seed in range(10):
        order = service.action_order(state, RNG(seed))
        assert [unit.instance_id for unit in order] == ["fast", "veteran", "rookie", "slow"]


def test_speed_ties_are_broken_by_the_rng() -> None:
    service = BattleService()
    a = make_unit("a", "allies", speed=10)
    b = make_unit("b", "enemies", speed=10)
    state = BattleState(battle_id="b", allies=[a], enemies=[b])

    first_ids = {service.action_order(state, RNG(seed))[0].instance_id for seed in range(40)}

    assert first_ids == {"a", "b"}


def test_target_selection_prefers_front_row() -> None:
    service = BattleService()
    attacker = make_unit("hero", "allies", index=1)
    enemies = [make_unit(f"enemy_{i}", "enemies", index=i) for i in range(3)]

    assert service.select_target(attacker, enemies, RNG(1)).instance_id == "enemy_0"

    enemies[0].stats.hp = 0
    assert service.select_target(attacker, enemies, RNG(1)).instance_id == "enemy_1"

    for enemy in enemies:
        enemy.stats.hp = 0
    assert service.select_target(attacker, enemies, RNG(1)) is None


def test_target_selection_random_within_front_row_tie() -> None:
    service = BattleService()
    enemy = make_unit("enemy_0", "enemies", index=0)
    allies = [
        make_unit("hero_0", "allies", index=0),
        make_unit("creature_knight", "allies", index=0),
        make_unit("creature_archer", "allies", index=1),
    ]

    picked = {service.select_target(enemy, allies, RNG(seed)).instance_id for seed in range(40)}

    assert picked == {"hero_0", "creature_knight"}


def test_target_selection_prefers_mirror_index_within_row() -> None:
    service = BattleService()
    attacker = make_unit("enemy_1", "enemies", index=1)
    allies = [make_unit("back_a", "allies", index=1), make_unit("back_b", "allies", index=1)]
    allies[0].stats.hp = 0

    assert service.select_target(attacker, allies, RNG(1)).instance_id == "back_b"


def test_damage_skill_triggers_and_goes_on_cooldown() -> None:
    service = BattleService()
    fireball = Skill("fireball", "Fireball", 0.8, 3, DamageMultiplierEffect(1.5))
    skills = [fireball]
    rng = ScriptedRNG([0.5, 0.5, 0.1])
    hero = _hero(crit_rate=1.0, crit_damage=2.0)

    state, _ = service.start_battle([hero], [_enemy(hp=500)], skills, rng)
    events = service.run_round(state, rng)

    hero_attack = _attacks(events, "hero_0")[0]
    assert hero_attack.skill_id == "fireball"
    assert hero_attack.damage == 43
    assert not hero_attack.was_critical
    # cooldown set to 3 on use, then ticked once at round end
    assert fireball.current_cooldown == 2
    assert isinstance(events[-1], RoundEndedEvent)


def test_skill_on_cooldown_is_not_rolled() -> None:
    service = BattleService()
    fireball = Skill("fireball", "Fireball", 1.0, 3, DamageMultiplierEffect(1.5), current_cooldown=2)
    rng = RNG(7)

    state, _ = service.start_battle([_hero()], [_enemy(hp=500)], [fireball], rng)
    events = service.run_round(state, rng)

    assert _attacks(events, "hero_0")[0].skill_id is None
    assert fireball.current_cooldown == 1


def test_first_ready_skill_in_registration_order_wins() -> None:
    service = BattleService()
    first = Skill("first", "First", 1.0, 2, DamageMultiplierEffect(2.0))
    second = Skill("second", "Second", 1.0, 2, DamageMultiplierEffect(3.0))
    rng = RNG(8)

    state, _ = service.start_battle([_hero()], [_enemy(hp=500)], [first, second], rng)
    events = service.run_round(state, rng)

    assert _attacks(events, "hero_0")[0].skill_id == "first"
    assert second.current_cooldown == 0


def test_enemies_never_use_skills() -> None:
    service = BattleService()
    blast = Skill("blast", "Blast", 1.0, 0, DamageMultiplierEffect(3.0))
    rng = RNG(9)
    enemy = _enemy(speed=50)

    state, _ = service.start_battle([_hero(hp=500, max_hp=500)], [enemy], [blast], rng)
    events = service.run_round(state, rng)

    assert _attacks(events, "enemy_0")[0].skill_id is None


def test_heal_skill_heals_then_attacks() -> None:
    service = BattleService()
    mend = Skill("second_wind", "Second Wind", 1.0, 4, HealEffect(0.3))
    rng = RNG(10)
    hero = _hero(hp=50, max_hp=110)

    state, _ = service.start_battle([hero], [_enemy(hp=500)], [mend], rng)
    events = service.run_round(state, rng)

    kinds = [type(event) for event in events]
    assert kinds.index(SkillTriggeredEvent) < kinds.index(HealEvent) < kinds.index(AttackResolvedEvent)
    heal = next(event for event in events if isinstance(event, HealEvent))
    assert heal.amount == 33
    assert _attacks(events, "hero_0")[0].skill_id is None
    assert mend.current_cooldown == 3


def test_stat_buff_skill_raises_attack_before_hit() -> None:
    service = BattleService()
    focus = Skill("battle_focus", "Battle Focus", 1.0, 5, StatBuffEffect("attack", 0.1))
    rng = RNG(11)
    hero = _hero()

    state, _ = service.start_battle([hero], [_enemy(hp=500)], [focus], rng)
    events = service.run_round(state, rng)

    assert hero.stats.attack == 33
    assert _attacks(events, "hero_0")[0].damage == 32


def test_basic_attack_crit_uses_crit_damage() -> None:
    service = BattleService()
    rng = RNG(12)
    hero = _hero(crit_rate=1.0, crit_damage=2.0)

    state, _ = service.start_battle([hero], [_enemy(hp=500)], [], rng)
    attack = _attacks(service.run_round(state, rng), "hero_0")[0]

    assert attack.was_critical
    assert attack.damage == 58


def test_lifesteal_heals_attacker() -> None:
    service = BattleService()
    rng = RNG(13)
    hero = _hero(hp=50, max_hp=110)
    hero.lifesteal = 0.5

    state, _ = service.start_battle([hero], [_enemy(hp=500)], [], rng)
    events = service.run_round(state, rng)

    heal = next(event for event in events if isinstance(event, HealEvent))
    assert heal.amount == 14
    # 50 + 14, then the enemy hits for floor(5 - 2.5) = 2
    assert hero.stats.hp == 62


def test_double_attack_strikes_again() -> None:
    service = BattleService()
    rng = RNG(14)
    hero = _hero()
    hero.double_attack_chance = 1.0
    enemies = [_enemy("enemy_0", hp=500, index=0), _enemy("enemy_1", hp=500, index=1)]

    state, _ = service.start_battle([hero], enemies, [], rng)
    attacks = _attacks(service.run_round(state, rng), "hero_0")

    assert len(attacks) == 2
    assert not attacks[0].is_follow_up
    assert attacks[1].is_follow_up


def test_follow_up_retargets_after_kill() -> None:
    service = BattleService()
    rng = RNG(15)
    hero = _hero()
    hero.double_attack_chance = 1.0
    enemies = [_enemy("enemy_0", hp=10, max_hp=10, index=0), _enemy("enemy_1", hp=500, index=1)]

    state, _ = service.start_battle([hero], enemies, [], rng)
    attacks = _attacks(service.run_round(state, rng), "hero_0")

    assert [attack.target_id for attack in attacks] == ["enemy_0", "enemy_1"]


def test_rage_boosts_damage_at_low_hp() -> None:
    service = BattleService()
    rng = RNG(16)
    hero = _hero(hp=20, max_hp=110)
    hero.rage = True

    state, _ = service.start_battle([hero], [_enemy(hp=500)], [], rng)
    attack = _attacks(service.run_round(state, rng), "hero_0")[0]

    assert attack.damage == 43


def test_dead_units_do_not_act_later_in_round() -> None:
    service = BattleService()
    rng = RNG(17)
    hero = _hero(speed=20)
    enemy = _enemy(hp=10, max_hp=10, speed=1)

    state, _ = service.start_battle([hero], [enemy], [], rng)
    events = service.run_round(state, rng)

    assert _attacks(events, "enemy_0") == []
    assert state.status == "victory"


def test_battle_view_reflects_state() -> None:
    service = BattleService()
    rng = RNG(18)
    state, _ = service.start_battle([_hero()], [_enemy()], [], rng)
    service.run_round(state, rng)

    view = service.get_battle_view(state)

    assert view.round_number == 1
    assert view.allies[0].current_hp == 108
    assert view.enemies[0].current_hp == 21

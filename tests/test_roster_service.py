import pytest

from roguequest.core.rng import RNG
from roguequest.data.repositories import CreaturesRepository, SynergiesRepository
from roguequest.domain.roster import DEFAULT_TEAM_CAP, MAX_STAR, MAX_TEAM_CAP, RosterCreature, Team
from roguequest.services.roster_service import RosterService

FIVE_CREATURES = ["pikeman", "skeleton", "imp", "sprite", "goblin"]


def _roster(team: Team | None = None) -> RosterService:
    return RosterService(team or Team(), CreaturesRepository(), SynergiesRepository())


def test_acquire_same_creature_upgrades_until_maxed() -> None:
    roster = _roster()

    first = roster.acquire("angel")
    assert first.accepted and first.reason == "new" and first.new_star == 1

    second = roster.acquire("angel")
    assert second.accepted and second.reason == "upgraded" and second.new_star == 2

    third = roster.acquire("angel")
    assert third.accepted and third.new_star == 3

    fourth = roster.acquire("angel")
    assert not fourth.accepted
    assert fourth.reason == "maxed"
    assert fourth.new_star is None
    assert len(roster.team) == 1
    assert roster.team.find("angel").star == MAX_STAR


def test_acquire_new_creature_on_full_team_is_rejected() -> None:
    roster = _roster()
    for creature_id in FIVE_CREATURES:
        assert roster.acquire(creature_id).accepted

    result = roster.acquire("angel")

    assert not result.accepted
    assert result.reason == "team full"
    assert result.message
    assert len(roster.team) == DEFAULT_TEAM_CAP
    assert roster.team.find("angel") is None


def test_full_team_can_still_upgrade_members() -> None:
    roster = _roster()
    for creature_id in FIVE_CREATURES:
        roster.acquire(creature_id)

    result = roster.acquire("imp")

    assert result.accepted
    assert result.new_star == 2


def test_acquire_unknown_creature_raises() -> None:
    with pytest.raises(KeyError):
        _roster().acquire("not_a_creature")


def test_star_never_decreases_or_exceeds_max_over_random_sequences() -> None:
    rng = RNG(2024)
    roster = _roster()
    pool = FIVE_CREATURES + ["angel", "lich", "devil"]
    last_star = {}

    for _ in range(200):
        roster.acquire(rng.choice(pool))
        assert len(roster.team) <= roster.team.cap
        for member in roster.team:
            assert 1 <= member.star <= MAX_STAR
            assert member.star >= last_star.get(member.creature_id, 1)
            last_star[member.creature_id] = member.star


def test_full_team_choices_are_all_upgrades_and_not_truncated() -> None:
    roster = _roster()
    for creature_id in FIVE_CREATURES:
        roster.acquire(creature_id)

    choices = roster.generate_reward_choices(RNG(1))

    assert len(choices) == 5
    assert all(choice.kind == "upgrade" for choice in choices)
    assert {choice.creature.id for choice in choices} == set(FIVE_CREATURES)
    assert all((choice.from_star, choice.to_star) == (1, 2) for choice in choices)


def test_full_team_choices_skip_maxed_members() -> None:
    members = [RosterCreature(creature_id, star=3) for creature_id in FIVE_CREATURES[:4]]
    members.append(RosterCreature("goblin", star=2))
    roster = _roster(Team(members=members))

    choices = roster.generate_reward_choices(RNG(1))

    assert [(choice.creature.id, choice.from_star, choice.to_star) for choice in choices] == [("goblin", 2, 3)]


def test_open_team_choices_mark_owned_creatures_as_upgrades() -> None:
    roster = _roster()
    roster.acquire("angel")

    for seed in range(30):
        for choice in roster.generate_reward_choices(RNG(seed)):
            expected = "upgrade" if choice.creature.id == "angel" else "new"
            assert choice.kind == expected


def test_open_team_offers_three_distinct_choices() -> None:
    choices = _roster().generate_reward_choices(RNG(9))

    assert len(choices) == 3
    assert len({choice.creature.id for choice in choices}) == 3
    assert all(choice.kind == "new" for choice in choices)


def test_available_definitions_exclude_maxed_creatures() -> None:
    roster = _roster(Team(members=[RosterCreature("angel", star=3), RosterCreature("imp", star=2)]))

    available = {creature.id for creature in roster.available_definitions()}

    assert "angel" not in available
    assert "imp" in available
    assert len(available) == 34


def test_active_synergies_group_by_race() -> None:
    roster = _roster()
    for creature_id in ["pikeman", "archer", "griffin", "skeleton"]:
        roster.acquire(creature_id)

    synergies = roster.active_synergies()

    assert [(synergy.race, synergy.count, synergy.tier) for synergy in synergies] == [("castle", 3, 3)]


def test_effective_stats_apply_star_then_synergy() -> None:
    roster = _roster()
    roster.acquire("angel")
    roster.acquire("angel")
    roster.acquire("pikeman")
    angel = roster.team.find("angel")

    stats = roster.effective_stats(angel)

    # base 250/30/20 + star2 60/10/8, then castle x2 synergy: +5% attack/defense.
    assert stats.hp == 310
    assert stats.attack == 42
    assert stats.defense == 29
    assert stats.speed == 12


def test_effective_stats_are_idempotent() -> None:
    roster = _roster()
    for creature_id in ["angel", "pikeman", "archer", "imp"]:
        roster.acquire(creature_id)
    member = roster.team.find("archer")

    assert roster.effective_stats(member) == roster.effective_stats(member)


def test_iter_members_matches_effective_stats() -> None:
    roster = _roster()
    for creature_id in ["angel", "pikeman", "imp"]:
        roster.acquire(creature_id)

    for member, creature_def, stats in roster.iter_members():
        assert creature_def.id == member.creature_id
        assert stats == roster.effective_stats(member)


def test_set_team_cap_is_clamped() -> None:
    roster = _roster()

    assert roster.set_team_cap(6) == 6
    assert roster.set_team_cap(99) == MAX_TEAM_CAP
    assert roster.set_team_cap(0) == 1


def test_set_team_cap_never_drops_below_team_size() -> None:
    roster = _roster()
    for creature_id in FIVE_CREATURES[:3]:
        roster.acquire(creature_id)

    assert roster.set_team_cap(2) == 3


def test_clear_empties_team_and_resets_cap() -> None:
    roster = _roster()
    roster.set_team_cap(7)
    roster.acquire("angel")

    roster.clear()

    assert len(roster.team) == 0
    assert roster.team.cap == DEFAULT_TEAM_CAP
    assert not roster.is_full()


def test_snapshot_and_restore() -> None:
    roster = _roster()
    roster.acquire("angel")
    roster.acquire("angel")
    roster.acquire("imp")
    roster.set_team_cap(6)
    entries, cap = roster.snapshot()

    other = _roster()
    other.restore(entries, cap)

    assert other.snapshot() == ([("angel", 2), ("imp", 1)], 6)


def test_restore_unknown_creature_raises() -> None:
    with pytest.raises(KeyError):
        _roster().restore([("unknown", 1)], 5)

from collections import Counter

from roguequest.core.types import RACES
from roguequest.data.repositories import (
    CreaturesRepository,
    EnemyBuffsRepository,
    RewardsRepository,
    SkillsRepository,
    SynergiesRepository,
)
from roguequest.domain.enemy_scaling import ELITE_THRESHOLDS


def test_catalog_has_seven_creatures_per_race() -> None:
    creatures = CreaturesRepository().all()

    assert len(creatures) == 35
    assert Counter(creature.race for creature in creatures) == {race: 7 for race in RACES}


def test_each_race_covers_tiers_one_to_seven() -> None:
    repo = CreaturesRepository()
    for race in RACES:
        assert [creature.tier for creature in repo.by_race(race)] == list(range(1, 8))


def test_star_bonuses_never_reduce_stats() -> None:
    for creature in CreaturesRepository().all():
        for bonus in creature.star_bonus.values():
            assert bonus.hp >= 0 and bonus.attack >= 0 and bonus.defense >= 0, creature.id


def test_angel_definition() -> None:
    angel = CreaturesRepository().get("angel")

    assert angel.race == "castle"
    assert angel.tier == 7
    assert (angel.base.hp, angel.base.attack, angel.base.defense, angel.base.speed) == (250, 30, 20, 12)


def test_synergy_table_uses_non_contiguous_tiers() -> None:
    repo = SynergiesRepository()

    assert repo.tiers() == [2, 3, 4, 5, 7]
    assert repo.get_level(2).bonus.attack == 0.05
    assert repo.get_level(7).bonus.hp == 0.25


def test_starting_skills() -> None:
    starting = {skill.id: skill for skill in SkillsRepository().starting_skills()}

    assert set(starting) == {"fireball", "critical_strike"}
    assert starting["fireball"].trigger_chance == 0.8
    assert starting["fireball"].cooldown == 3
    assert starting["fireball"].effect.multiplier == 1.5
    assert starting["critical_strike"].cooldown == 0


def test_rewards_reference_known_skills_and_fill_both_pools() -> None:
    skills_repo = SkillsRepository()
    repo = RewardsRepository(skills_repo=skills_repo)

    assert len(repo.for_pool("stage")) >= 3
    assert len(repo.for_pool("level_up")) >= 3
    for reward in repo.all():
        if reward.skill_id is not None:
            assert skills_repo.has(reward.skill_id)


def test_full_heal_is_offered_on_level_up_only() -> None:
    reward = RewardsRepository(skills_repo=SkillsRepository()).get("heal_full")

    assert reward.pools == ("level_up",)


def test_elite_buffs_exist_and_are_not_random() -> None:
    repo = EnemyBuffsRepository()
    random_ids = {buff.id for buff in repo.random_pool()}

    for _, buff_id in ELITE_THRESHOLDS:
        assert repo.get(buff_id).elite
        assert buff_id not in random_ids

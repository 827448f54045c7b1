import pytest

from roguequest.data.repositories import SynergiesRepository
from roguequest.domain.synergy import compute_synergies, synergy_tier_for_count


@pytest.mark.parametrize(
    ("count", "tier"),
    [(0, None), (1, None), (2, 2), (3, 3), (4, 4), (5, 5), (6, 5), (7, 7), (8, 7)],
)
def test_synergy_tier_table_is_locked(count: int, tier: int | None) -> None:
    assert synergy_tier_for_count(count) == tier


def test_six_of_a_race_gets_the_five_bonus() -> None:
    repo = SynergiesRepository()
    synergies = compute_synergies(["inferno"] * 6, repo.get_level)

    assert len(synergies) == 1
    assert synergies[0].tier == 5
    assert synergies[0].bonus == repo.get_level(5).bonus


def test_compute_synergies_skips_single_race_members() -> None:
    repo = SynergiesRepository()
    races = ["castle", "castle", "inferno", "rampart", "rampart", "rampart", "rampart"]

    synergies = compute_synergies(races, repo.get_level)

    assert [(synergy.race, synergy.tier) for synergy in synergies] == [("castle", 2), ("rampart", 4)]


def test_compute_synergies_empty_team() -> None:
    assert compute_synergies([], SynergiesRepository().get_level) == []

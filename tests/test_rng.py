import pytest

from roguequest.core.rng import RNG


def test_rng_determinism_same_seed() -> None:
    rng_a = RNG(12345)
    rng_b = RNG(12345)

    ints_a = [rng_a.randint(1, 100) for _ in range(5)]
    ints_b = [rng_b.randint(1, 100) for _ in range(5)]
    floats_a = [rng_a.random() for _ in range(5)]
    floats_b = [rng_b.random() for _ in range(5)]
    choices_a = [rng_a.choice(["a", "b", "c"]) for _ in range(5)]
    choices_b = [rng_b.choice(["a", "b", "c"]) for _ in range(5)]

    assert ints_a == ints_b
    assert floats_a == floats_b
    assert choices_a == choices_b


def test_rng_different_seed() -> None:
    rng_a = RNG(11111)
    rng_b = RNG(22222)

    draws_a = [rng_a.randint(1, 100) for _ in range(5)]
    draws_b = [rng_b.randint(1, 100) for _ in range(5)]

    assert draws_a != draws_b


def test_choice_on_empty_sequence_raises() -> None:
    with pytest.raises(ValueError):
        RNG(1).choice([])


def test_sample_is_clamped_to_population() -> None:
    rng = RNG(5)
    assert sorted(rng.sample([1, 2, 3], 10)) == [1, 2, 3]
    assert rng.sample([1, 2, 3], 0) == []
    assert len(set(rng.sample(range(20), 4))) == 4


def test_export_and_restore_state_replays_draws() -> None:
    rng = RNG(99)
    rng.random()
    snapshot = rng.export_state()
    expected = [rng.random() for _ in range(3)]

    restored = RNG(1)
    restored.restore_state(snapshot)

    assert [restored.random() for _ in range(3)] == expected
    assert snapshot["seed"] == 99


def test_restore_state_rejects_malformed_payload() -> None:
    with pytest.raises(ValueError):
        RNG(1).restore_state({"version": 3, "internal": "nope"})

"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import Any, Dict, List, MutableSequence, Sequence, TypeVar

T_co = TypeVar("T_co")

RNGStatePayload = Dict[str, Any]


class RNG:
    """Wrapper around random.Random that provides deterministic helpers."""

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._random = Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return self._random.choice(seq)

    def shuffle(self, seq: MutableSequence[T_co]) -> None:
        """Shuffle the sequence in-place."""
        self._random.shuffle(seq)

    def sample(self, seq: Sequence[T_co], k: int) -> List[T_co]:
        """Return up to k unique elements drawn from the sequence."""
        k = max(0, min(k, len(seq)))
        return self._random.sample(list(seq), k)

    def export_state(self) -> RNGStatePayload:
        """Return a JSON-serializable snapshot of the generator state."""
        version, internal, gauss_next = self._random.getstate()
        return {
            "seed": self._seed,
            "version": version,
            "internal": list(internal),
            "gauss_next": gauss_next,
        }

    def restore_state(self, payload: RNGStatePayload) -> None:
        """Restore a snapshot produced by export_state."""
        try:
            version = int(payload["version"])
            internal = tuple(int(value) for value in payload["internal"])
            gauss_next = payload.get("gauss_next")
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("RNG state payload is malformed.") from exc
        if gauss_next is not None and not isinstance(gauss_next, (int, float)):
            raise ValueError("RNG state payload is malformed.")
        try:
            self._random.setstate((version, internal, gauss_next))
        except (TypeError, ValueError) as exc:
            raise ValueError("RNG state payload is malformed.") from exc

# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Deterministic random sources for match simulation.

Every stochastic decision in the engine draws from an explicit source that is
threaded through the call chain. There is no module-level default: a caller
that wants randomness must construct a source and hand it over.

SeededRandomSource is a 32-bit linear congruential generator. Its whole state
is one unsigned integer, so a match in progress can be persisted by storing
``source.state`` and resumed with ``SeededRandomSource.from_state``.

ScriptedRandomSource replays a fixed list of draws and is meant for tests.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")

# Numerical Recipes LCG parameters
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32

_MASK32 = 0xFFFFFFFF


def mix_seed(seed: int) -> int:
    """Scramble a user-supplied seed into a well-distributed 32-bit state.

    Neighbouring seeds (1, 2, 3...) otherwise produce strongly correlated
    first draws from an LCG.
    """
    s = seed & _MASK32
    s = ((s ^ (s >> 16)) * 0x85EBCA6B) & _MASK32
    s = ((s ^ (s >> 13)) * 0xC2B2AE35) & _MASK32
    s = s ^ (s >> 16)
    return s & _MASK32


# ---------------------------------------------------------------------------
# Shared draw helpers
# ---------------------------------------------------------------------------

class _DrawMixin:
    """Integer, boolean and sequence helpers built on ``random()``."""

    def random(self) -> float:  # pragma: no cover - overridden
        raise NotImplementedError

    def random_int(self, lo: int, hi: int) -> int:
        """Return an integer in [lo, hi)."""
        return int(self.random() * (hi - lo)) + lo

    def random_int_inclusive(self, lo: int, hi: int) -> int:
        """Return an integer in [lo, hi]."""
        return int(self.random() * (hi - lo + 1)) + lo

    def next_bool(self, probability: float = 0.5) -> bool:
        return self.random() < probability

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[self.random_int(0, len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy of ``items`` (Fisher-Yates)."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.random_int(0, i + 1)
            result[i], result[j] = result[j], result[i]
        return result


# ---------------------------------------------------------------------------
# Seeded LCG source
# ---------------------------------------------------------------------------

class SeededRandomSource(_DrawMixin):
    """32-bit LCG random source.

    The constructor mixes the seed. Use ``from_state`` to rebuild a source
    from a persisted state without mixing it again.
    """

    def __init__(self, seed: int):
        self._state = mix_seed(seed)

    @classmethod
    def from_state(cls, state: int) -> SeededRandomSource:
        source = cls.__new__(cls)
        source._state = state & _MASK32
        return source

    @property
    def state(self) -> int:
        """The current 32-bit state; enough to resume the exact sequence."""
        return self._state

    def random(self) -> float:
        """Advance the generator and return a float in [0, 1)."""
        self._state = (LCG_MULTIPLIER * self._state + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def clone(self) -> SeededRandomSource:
        return SeededRandomSource.from_state(self._state)

    def __repr__(self) -> str:
        return f"SeededRandomSource(state={self._state})"


# ---------------------------------------------------------------------------
# Scripted source for tests
# ---------------------------------------------------------------------------

class ScriptedRandomSource(_DrawMixin):
    """Returns a fixed sequence of draws, cycling when exhausted."""

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("ScriptedRandomSource requires at least one value")
        self._values = list(values)
        self._index = 0
        self.call_count = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        self.call_count += 1
        return value

    def reset(self) -> None:
        self._index = 0
        self.call_count = 0

    def clone(self) -> ScriptedRandomSource:
        copy = ScriptedRandomSource(self._values)
        copy._index = self._index
        copy.call_count = self.call_count
        return copy

"""
Shared helpers for the combat reaction tests.
"""

from typing import Iterable, List


class ScriptedRandom:
    """Random stand-in that replays a fixed sequence of unit rolls in [0, 1)."""

    def __init__(self, rolls: Iterable[float]):
        self.rolls: List[float] = list(rolls)
        self.calls = 0

    def random(self) -> float:
        if self.calls >= len(self.rolls):
            raise AssertionError(f"Unexpected draw #{self.calls + 1}")
        value = self.rolls[self.calls]
        self.calls += 1
        return value

    @property
    def exhausted(self) -> bool:
        return self.calls == len(self.rolls)


def uniform_attributes(value: float) -> dict:
    return {
        name: value
        for name in (
            "vitality",
            "agility",
            "resilience",
            "strength",
            "perception",
            "stress_control",
            "handling",
            "cqc",
            "melee",
        )
    }

"""Shared test doubles: scripted random sources and a failing storage."""

import random

from crime_missions.storage import LedgerWriteFailed, Storage


class FixedRandom(random.Random):
    """random() always returns `roll`; randint() returns `pick` clamped into range."""

    def __init__(self, roll: float, pick: int = 0, seed: int = 7) -> None:
        super().__init__(seed)
        self.roll = roll
        self.pick = pick

    def random(self) -> float:
        return self.roll

    def randint(self, a: int, b: int) -> int:
        return max(a, min(b, self.pick))


class FlakyStorage(Storage):
    """Fails the next `failures` writes, then behaves normally."""

    def __init__(self, base_path, failures: int = 1) -> None:
        super().__init__(base_path)
        self.failures = failures

    def _write_json(self, path, data) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise LedgerWriteFailed(f"disk unavailable for {path.name}")
        super()._write_json(path, data)

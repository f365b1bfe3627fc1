"""Short order identifier generation.

Ids are 4 uppercase base-36 characters, about 1.7M combinations, drawn
from a non-cryptographic generator. Independent draws collide sooner
than that (birthday bound), so every draw is checked against the ids
already in use and retried.
"""

import random
import string
from collections.abc import Collection

ALPHABET = string.digits + string.ascii_uppercase


class OrderIdGenerator:
    """Produces short order ids that are unique within a given id set."""

    def __init__(
        self,
        length: int = 4,
        max_attempts: int = 1000,
        rng: random.Random | None = None,
    ):
        if length < 1:
            raise ValueError("length must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be positive")
        self.length = length
        self.max_attempts = max_attempts
        self._rng = rng or random.Random()

    def _draw(self) -> str:
        return "".join(self._rng.choice(ALPHABET) for _ in range(self.length))

    def next(self, taken: Collection[str] = ()) -> str:
        """Return a fresh id not present in ``taken``.

        Raises:
            RuntimeError: If no free id was found within max_attempts draws.
        """
        for _ in range(self.max_attempts):
            candidate = self._draw()
            if candidate not in taken:
                return candidate
        raise RuntimeError(
            f"No free order id after {self.max_attempts} attempts "
            f"({len(taken)} ids in use)"
        )

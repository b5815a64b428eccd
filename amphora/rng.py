"""A small 32-bit xorshift random number generator."""

from __future__ import annotations

import time

_MASK32 = 0xFFFFFFFF
UINT16_MAX = 0xFFFF


class XorShift32:
    """Xorshift generator giving 16-bit bounded integers and unit floats."""

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = int(time.time())
        self.state = seed & _MASK32

    def _next(self) -> int:
        s = self.state
        s ^= (s << 13) & _MASK32
        s ^= s >> 17
        s ^= (s << 5) & _MASK32
        self.state = s
        return s

    def randint(self, n: int) -> int:
        """Return a random integer in ``[0, n)``; ``n`` must fit in 16 bits."""
        if not 0 <= n <= UINT16_MAX:
            raise ValueError(f"n must be between 0 and {UINT16_MAX}, got {n}")
        return ((self._next() >> 16) * n) >> 16

    def random(self) -> float:
        """Return a random float between 0.0 and 1.0."""
        return self.randint(UINT16_MAX) / UINT16_MAX
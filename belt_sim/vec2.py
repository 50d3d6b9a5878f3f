from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple
import math

from .errors import DegenerateVector


@dataclass(frozen=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0

    ZERO: ClassVar["Vec2"]

    def add(self, v: "Vec2") -> "Vec2":
        return Vec2(self.x + v.x, self.y + v.y)

    def sub(self, v: "Vec2") -> "Vec2":
        return Vec2(self.x - v.x, self.y - v.y)

    def mul(self, s: float) -> "Vec2":
        return Vec2(self.x * s, self.y * s)

    def div(self, s: float) -> "Vec2":
        return Vec2(self.x / s, self.y / s)

    def len(self) -> float:
        if self.x == 0 and self.y == 0:
            return 0.0
        return math.sqrt(self.x * self.x + self.y * self.y)

    def norm(self) -> "Vec2":
        length = self.len()
        if length == 0:
            raise DegenerateVector(f"cannot normalize zero-length vector {self}")
        return self.div(length)

    def to_cell(self) -> Tuple[int, int]:
        """Nearest integer grid cell (x, y)."""
        return (int(round(self.x)), int(round(self.y)))

    def __add__(self, v: "Vec2") -> "Vec2":
        return self.add(v)

    def __sub__(self, v: "Vec2") -> "Vec2":
        return self.sub(v)

    def __mul__(self, s: float) -> "Vec2":
        return self.mul(s)


Vec2.ZERO = Vec2(0.0, 0.0)

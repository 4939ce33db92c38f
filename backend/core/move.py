from __future__ import annotations

from dataclasses import dataclass

Coordinate = tuple[int, int]


@dataclass(frozen=True, slots=True)
class Move:
    start: Coordinate
    end: Coordinate

    @property
    def midpoint(self) -> Coordinate:
        return ((self.start[0] + self.end[0]) // 2, (self.start[1] + self.end[1]) // 2)

    def __str__(self) -> str:
        return f"{self.start[0]},{self.start[1]} - {self.end[0]},{self.end[1]}"

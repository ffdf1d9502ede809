from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Dict, FrozenSet, Iterator, List, Optional

import numpy as np

ATTACK_POWER = 3
STARTING_HP = 200

class Direction(Enum):
    """Single orthogonal step. Declared in reading order of the cell it leads to."""
    UP = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    DOWN = (0, 1)

@total_ordering
@dataclass(frozen=True)
class Position:
    """Grid cell (x = column, y = row), ordered in reading order."""
    x: int
    y: int

    def __lt__(self, other: "Position") -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (self.y, self.x) < (other.y, other.x)

    def step(self, d: Direction) -> "Position":
        dx, dy = d.value
        return Position(self.x + dx, self.y + dy)

    def neighbors(self) -> Iterator["Position"]:
        """Orthogonal neighbours in reading order."""
        for d in Direction:
            yield self.step(d)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"

class Terrain(Enum):
    OPEN = "."
    WALL = "#"

class Faction(Enum):
    ELF = "E"
    GOBLIN = "G"

    @property
    def enemy(self) -> "Faction":
        return Faction.GOBLIN if self is Faction.ELF else Faction.ELF

@dataclass(eq=False)
class Grid:
    """Static cave map. walls[y, x] is True for blocked cells."""
    walls: np.ndarray

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return bool(np.array_equal(self.walls, other.walls))

    @property
    def width(self) -> int:
        return int(self.walls.shape[1])

    @property
    def height(self) -> int:
        return int(self.walls.shape[0])

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def terrain_at(self, pos: Position) -> Terrain:
        # Anything outside the rectangle counts as rock
        if not self.in_bounds(pos):
            return Terrain.WALL
        return Terrain.WALL if self.walls[pos.y, pos.x] else Terrain.OPEN

    def is_open(self, pos: Position) -> bool:
        """Terrain-only check, ignores units."""
        return self.terrain_at(pos) is Terrain.OPEN

@dataclass(frozen=True)
class OccupiedView:
    """Grid with the cells of living units folded in as obstacles."""
    grid: Grid
    blocked: FrozenSet[Position]

    def is_open(self, pos: Position) -> bool:
        return pos not in self.blocked and self.grid.is_open(pos)

@dataclass
class Unit:
    id: str
    faction: Faction
    pos: Position
    hp: int = STARTING_HP

    @property
    def alive(self) -> bool:
        return self.hp > 0

@dataclass
class Event:
    kind: str
    round: int
    data: Dict

@dataclass
class State:
    grid: Grid
    units: Dict[str, Unit] = field(default_factory=dict)
    rounds: int = 0

    def living(self, faction: Optional[Faction] = None) -> List[Unit]:
        return [u for u in self.units.values()
                if u.alive and (faction is None or u.faction is faction)]

    def unit_at(self, pos: Position) -> Optional[Unit]:
        """Living unit holding pos, if any."""
        for u in self.units.values():
            if u.alive and u.pos == pos:
                return u
        return None

    def occupied_view(self, exclude_id: Optional[str] = None) -> OccupiedView:
        """Fresh view of the cave where every living unit (bar exclude_id) is rock."""
        blocked = frozenset(u.pos for u in self.units.values()
                            if u.alive and u.id != exclude_id)
        return OccupiedView(self.grid, blocked)

    def total_hp(self) -> int:
        return sum(u.hp for u in self.living())

"""Reading caves from text and drawing them back."""

import sys
from typing import Dict, List

import numpy as np

from .errors import MalformedGridError
from .model import Faction, Grid, Position, State, Terrain, Unit

FACTION_CHARS = {f.value: f for f in Faction}
TERRAIN_CHARS = {t.value: t for t in Terrain}

def load_input(path: str) -> str:
    """Read raw cave text from path, or from stdin when path is '-'."""
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as fh:
        return fh.read()

def parse_input(text: str) -> State:
    """
    Build the initial State from cave text.

    '#' is rock, '.' open floor, 'E' and 'G' an elf or goblin standing on open
    floor. Units get ids E1, E2, ... and G1, G2, ... in reading order.

    Raises:
        MalformedGridError: empty input, ragged rows or an unknown character.
    """
    rows = [line.rstrip("\r") for line in text.rstrip("\r\n").split("\n")]
    if not rows or not rows[0]:
        raise MalformedGridError("Cave input is empty")

    width = len(rows[0])
    for y, row in enumerate(rows):
        if len(row) != width:
            raise MalformedGridError(
                f"Row {y} has {len(row)} cells, expected {width} like row 0")

    walls = np.zeros((len(rows), width), dtype=bool)
    units: Dict[str, Unit] = {}
    counters = {f: 0 for f in Faction}

    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch in TERRAIN_CHARS:
                walls[y, x] = TERRAIN_CHARS[ch] is Terrain.WALL
            elif ch in FACTION_CHARS:
                faction = FACTION_CHARS[ch]
                counters[faction] += 1
                uid = f"{faction.value}{counters[faction]}"
                units[uid] = Unit(id=uid, faction=faction, pos=Position(x, y))
            else:
                raise MalformedGridError(f"Unknown cave character {ch!r} at ({x},{y})")

    return State(grid=Grid(walls), units=units)

def render(state: State, hit_points: bool = False) -> str:
    """Draw the cave with living units on top, optionally listing hp per row."""
    lines: List[str] = []
    for y in range(state.grid.height):
        cells = []
        row_units = []
        for x in range(state.grid.width):
            pos = Position(x, y)
            u = state.unit_at(pos)
            if u is not None:
                cells.append(u.faction.value)
                row_units.append(u)
            else:
                cells.append(state.grid.terrain_at(pos).value)
        line = "".join(cells)
        if hit_points and row_units:
            line += "   " + ", ".join(f"{u.faction.value}({u.hp})" for u in row_units)
        lines.append(line)
    return "\n".join(lines) + "\n"

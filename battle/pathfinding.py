"""Breadth-first flood fill over an occupied cave view."""

from collections import deque
from dataclasses import dataclass
from typing import Dict

from .model import Direction, OccupiedView, Position

@dataclass(frozen=True)
class PathStep:
    distance: int
    first_step: Direction

def flood_fill(view: OccupiedView, source: Position) -> Dict[Position, PathStep]:
    """
    Measure every open cell reachable from source.

    Returns a dict mapping each reachable cell to its exact step count and the
    first step out of source that starts a shortest path to it. When several
    first steps tie, the one earliest in reading order wins. The source is
    never part of the result; unreachable cells are simply missing.
    """
    result: Dict[Position, PathStep] = {}
    frontier = deque()

    for d in Direction:
        p = source.step(d)
        if view.is_open(p):
            result[p] = PathStep(1, d)
            frontier.append(p)

    # Seeds go in reading order, so within each distance layer the queue stays
    # sorted by first step and the first parent to reach a cell has the best one.
    while frontier:
        cur = frontier.popleft()
        here = result[cur]
        for nxt in cur.neighbors():
            if nxt == source or nxt in result or not view.is_open(nxt):
                continue
            result[nxt] = PathStep(here.distance + 1, here.first_step)
            frontier.append(nxt)

    return result

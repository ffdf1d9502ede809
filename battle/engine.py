import copy
import logging
from typing import List, Tuple

from .errors import CombatOverError, StalemateError
from .model import ATTACK_POWER, Event, Faction, State, Unit
from .pathfinding import flood_fill

log = logging.getLogger(__name__)

class Engine:
    """Deterministic round engine. Owns and mutates the state it is given."""

    def __init__(self, initial_state: State):
        self.state = initial_state
        self.over = self._combat_over()

    def _combat_over(self) -> bool:
        """True once any faction has no living members."""
        return any(not self.state.living(f) for f in Faction)

    def _move(self, unit: Unit) -> List[Event]:
        """Step unit one cell toward the nearest reachable in-range cell."""
        evts: List[Event] = []
        enemies = self.state.living(unit.faction.enemy)
        if not enemies:
            return evts

        view = self.state.occupied_view(exclude_id=unit.id)
        in_range = {p for e in enemies for p in e.pos.neighbors() if view.is_open(p)}
        if unit.pos in in_range:
            return evts

        ff = flood_fill(view, unit.pos)
        candidates = [(ff[p].distance, p) for p in in_range if p in ff]
        if not candidates:
            return evts

        # Nearest first, then reading order of the destination cell
        _, target = min(candidates)
        direction = ff[target].first_step
        old_pos = unit.pos
        unit.pos = unit.pos.step(direction)
        log.debug("%s moves %s -> %s heading for %s", unit.id, old_pos, unit.pos, target)
        evts.append(Event("UnitMoved", self.state.rounds + 1,
                          {"unit_id": unit.id, "from": [old_pos.x, old_pos.y],
                           "to": [unit.pos.x, unit.pos.y], "direction": direction.name}))
        return evts

    def _attack(self, unit: Unit) -> List[Event]:
        """Hit the weakest adjacent enemy, reading order breaking ties."""
        evts: List[Event] = []
        adjacent = set(unit.pos.neighbors())
        targets = [e for e in self.state.living(unit.faction.enemy) if e.pos in adjacent]
        if not targets:
            return evts

        t = min(targets, key=lambda e: (e.hp, e.pos))
        t.hp -= ATTACK_POWER
        log.debug("%s hits %s, %d hp left", unit.id, t.id, t.hp)
        evts.append(Event("Attack", self.state.rounds + 1,
                          {"attacker": unit.id, "target": t.id, "dmg": ATTACK_POWER, "hp": t.hp}))

        if not t.alive:
            log.info("%s destroyed by %s in round %d", t.id, unit.id, self.state.rounds + 1)
            evts.append(Event("Destroyed", self.state.rounds + 1,
                              {"unit_id": t.id, "killer": unit.id,
                               "pos": [t.pos.x, t.pos.y]}))
        return evts

    def _turn(self, unit: Unit) -> List[Event]:
        evts: List[Event] = []
        evts += self._move(unit)
        evts += self._attack(unit)
        return evts

    def step(self) -> List[Event]:
        """Run one full round and return its events."""
        if self.over:
            raise CombatOverError(f"Combat already ended after {self.state.rounds} rounds")

        evts: List[Event] = []
        # Dead units stay in the order; they are skipped when their turn comes
        order = sorted(self.state.units.values(), key=lambda u: u.pos)
        for unit in order:
            if unit.alive:
                evts += self._turn(unit)

        if not evts:
            raise StalemateError(self.state.rounds + 1)

        self.state.rounds += 1
        evts.append(Event("RoundCompleted", self.state.rounds,
                          {"living": {f.name: len(self.state.living(f)) for f in Faction}}))

        self.over = self._combat_over()
        if self.over:
            winner = winning_faction(self.state)
            log.info("Combat over after %d rounds, %s win with %d hp left",
                     self.state.rounds, winner.name if winner else "nobody", self.state.total_hp())
            evts.append(Event("CombatOver", self.state.rounds,
                              {"winner": winner.name if winner else None,
                               "hp": self.state.total_hp()}))
        return evts

    def run(self) -> int:
        """Play rounds until one side is gone; return the round count."""
        while not self.over:
            self.step()
        return self.state.rounds

    def snapshot(self) -> State:
        """Return current state."""
        return self.state

def winning_faction(state: State):
    """The only faction with living units, or None if both or neither have any."""
    standing = [f for f in Faction if state.living(f)]
    return standing[0] if len(standing) == 1 else None

def simulate(state: State) -> Tuple[State, int]:
    """Fight a battle on a copy of state; the argument is left untouched."""
    eng = Engine(copy.deepcopy(state))
    rounds = eng.run()
    return eng.snapshot(), rounds

def score_combat(state: State) -> int:
    """Completed rounds times the hit points still standing."""
    hp = state.total_hp()
    if state.rounds == 0:
        # Decided before a single round was fought
        return hp
    return state.rounds * hp

def outcome(state: State) -> int:
    final, _ = simulate(state)
    return score_combat(final)

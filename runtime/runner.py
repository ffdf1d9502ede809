import copy
import logging
from typing import List
from battle.engine import Engine, score_combat
from battle.model import Event, State
from battle.parser import render
from .eventlog import EventLog

log = logging.getLogger(__name__)

class BattleRunner:
    """Drives an Engine round by round until combat is over, keeping every event."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.events = EventLog()

    @classmethod
    def from_state(cls, state: State) -> "BattleRunner":
        """Runner over a private copy of state."""
        return cls(Engine(copy.deepcopy(state)))

    def run_round(self) -> List[Event]:
        evts = self.engine.step()
        self.events.append_many(evts)
        state = self.engine.snapshot()
        if log.isEnabledFor(logging.DEBUG):
            log.debug("After round %d (%d events):\n%s",
                      state.rounds, len(evts), render(state, hit_points=True))
        return evts

    def run(self) -> State:
        """Play the battle out and return the final state."""
        while not self.engine.over:
            self.run_round()
        state = self.engine.snapshot()
        log.info("Battle finished: %d rounds, %d hp standing, score %d",
                 state.rounds, state.total_hp(), score_combat(state))
        return state

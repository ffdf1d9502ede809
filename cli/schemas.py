from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, Field
from battle.engine import score_combat, winning_faction
from battle.model import State

class UnitOut(BaseModel):
    """Surviving unit schema."""
    id: str
    faction: Literal["ELF", "GOBLIN"]
    pos: Tuple[int, int]  # (x, y) cell
    hp: int

class BattleReport(BaseModel):
    """Final battle report schema."""
    rounds: int = Field(ge=0)
    winner: Optional[Literal["ELF", "GOBLIN"]] = None
    hp_remaining: int
    score: int
    survivors: List[UnitOut] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: State) -> "BattleReport":
        winner = winning_faction(state)
        survivors = sorted(state.living(), key=lambda u: u.pos)
        return cls(
            rounds=state.rounds,
            winner=winner.name if winner else None,
            hp_remaining=state.total_hp(),
            score=score_combat(state),
            survivors=[UnitOut(id=u.id, faction=u.faction.name, pos=(u.pos.x, u.pos.y), hp=u.hp)
                       for u in survivors],
        )

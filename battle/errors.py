class BattleError(Exception):
    """Base class for everything the battle package raises."""

class MalformedGridError(BattleError, ValueError):
    """Input text does not describe a rectangular cave in the known alphabet."""

class CombatOverError(BattleError):
    """A round was requested after one faction was already wiped out."""

class StalemateError(BattleError):
    """A full round changed nothing while both factions still stand."""

    def __init__(self, rounds: int):
        super().__init__(f"No unit moved or attacked in round {rounds}; the factions cannot reach each other")
        self.rounds = rounds

"""Test movement, attacks and round scheduling."""
import pytest
from battle.engine import Engine, outcome, score_combat, simulate, winning_faction
from battle.errors import CombatOverError, StalemateError
from battle.model import Faction, Position
from battle.parser import parse_input

CORRIDOR = "#######\n#.G.E.#\n#######\n"

DUEL = "#####\n#GE.#\n#####\n"

# Goblins win with 590 hp left
SKIRMISH = """\
#######
#.G...#
#...EG#
#.#.#G#
#..G#E#
#.....#
#######
"""


def make_engine(text: str) -> Engine:
    return Engine(parse_input(text))


def test_nearest_in_range_cell_picked_by_reading_order():
    """Three cells tie at distance 2; the top one wins."""
    eng = make_engine("""\
#######
#E..G.#
#...#.#
#.G.#G#
#######
""")
    elf = eng.state.units["E1"]
    evts = eng._move(elf)
    assert elf.pos == Position(2, 1)
    assert evts[0].kind == "UnitMoved"
    assert evts[0].data["direction"] == "RIGHT"


def test_step_toward_target_prefers_reading_order():
    """Both RIGHT and DOWN start a shortest path; RIGHT is taken."""
    eng = make_engine("""\
#######
#.E...#
#.....#
#...G.#
#######
""")
    elf = eng.state.units["E1"]
    eng._move(elf)
    assert elf.pos == Position(3, 1)


def test_destination_chosen_before_first_step():
    """Two cells tie at distance 4. The upper one is only reached by going RIGHT,
    the lower one by going LEFT; the upper cell wins even though LEFT is the
    earlier step."""
    eng = make_engine("""\
########
#####.G#
#####.##
#..E..##
#.######
#.G#####
########
""")
    elf = eng.state.units["E1"]
    evts = eng._move(elf)
    assert elf.pos == Position(4, 3)
    assert evts[0].data["direction"] == "RIGHT"


def test_unit_in_range_does_not_move():
    eng = make_engine(DUEL)
    goblin = eng.state.units["G1"]
    assert eng._move(goblin) == []
    assert goblin.pos == Position(1, 1)


def test_unreachable_enemy_means_no_move():
    """Walled off from every enemy: stay put, no error."""
    eng = make_engine("#####\n#G#E#\n#####\n")
    goblin = eng.state.units["G1"]
    assert eng._move(goblin) == []
    assert goblin.pos == Position(1, 1)


def test_allies_block_the_way():
    eng = make_engine("#######\n#GG.E.#\n#######\n")
    back = eng.state.units["G1"]
    assert eng._move(back) == []
    front = eng.state.units["G2"]
    eng._move(front)
    assert front.pos == Position(3, 1)


def test_attack_prefers_fewest_hit_points():
    eng = make_engine("""\
#####
#.G.#
#GE.#
#...#
#####
""")
    eng.state.units["G2"].hp = 10
    eng._attack(eng.state.units["E1"])
    assert eng.state.units["G2"].hp == 7
    assert eng.state.units["G1"].hp == 200


def test_attack_tie_goes_to_reading_order():
    """Equal hit points: the goblin above is struck, not the one to the left."""
    eng = make_engine("""\
#####
#.G.#
#GE.#
#...#
#####
""")
    evts = eng._attack(eng.state.units["E1"])
    assert eng.state.units["G1"].hp == 197
    assert eng.state.units["G2"].hp == 200
    assert [e.kind for e in evts] == ["Attack"]
    assert evts[0].data["target"] == "G1"


def test_killing_blow_marks_target_dead():
    eng = make_engine(DUEL)
    elf = eng.state.units["E1"]
    elf.hp = 2
    evts = eng._attack(eng.state.units["G1"])
    assert not elf.alive
    assert elf.id in eng.state.units
    assert [e.kind for e in evts] == ["Attack", "Destroyed"]
    assert eng.state.living(Faction.ELF) == []


def test_first_round_in_corridor():
    """Goblin goes first in reading order: steps in, strikes, and takes a hit back."""
    eng = make_engine(CORRIDOR)
    eng.step()
    goblin = eng.state.units["G1"]
    elf = eng.state.units["E1"]
    assert goblin.pos == Position(3, 1)
    assert elf.pos == Position(4, 1)
    assert goblin.hp == 197
    assert elf.hp == 197
    assert eng.state.rounds == 1


def test_dead_unit_does_not_act():
    """The elf dies to the goblin's opening blow and never swings back."""
    eng = make_engine(DUEL)
    eng.state.units["E1"].hp = 3
    evts = eng.step()
    assert eng.state.units["G1"].hp == 200
    assert [e.kind for e in evts] == ["Attack", "Destroyed", "RoundCompleted", "CombatOver"]
    assert eng.over


def test_duel_to_the_end():
    """Goblin strikes first every round; the elf falls in round 67."""
    final, rounds = simulate(parse_input(DUEL))
    assert rounds == 67
    assert final.units["G1"].hp == 2
    assert final.units["E1"].hp == -1
    assert winning_faction(final) is Faction.GOBLIN
    assert score_combat(final) == 134


def test_round_counter_advances_by_one():
    eng = make_engine(SKIRMISH)
    seen = []
    while not eng.over:
        eng.step()
        seen.append(eng.state.rounds)
    assert seen == list(range(1, len(seen) + 1))


def test_skirmish_outcome():
    final, rounds = simulate(parse_input(SKIRMISH))
    assert winning_faction(final) is Faction.GOBLIN
    assert final.total_hp() == 590
    assert outcome(parse_input(SKIRMISH)) == rounds * 590


def test_one_faction_only():
    """Nothing to fight: zero rounds and the score is the hit points standing."""
    state = parse_input("#####\n#G.G#\n#####\n")
    eng = Engine(state)
    assert eng.over
    assert eng.run() == 0
    assert score_combat(state) == 400


def test_empty_cave_scores_zero():
    assert outcome(parse_input("###\n#.#\n###\n")) == 0


def test_step_after_combat_over_raises():
    eng = make_engine(DUEL)
    eng.run()
    with pytest.raises(CombatOverError):
        eng.step()


def test_walled_apart_factions_stalemate():
    eng = make_engine("#####\n#G#E#\n#####\n")
    with pytest.raises(StalemateError) as exc:
        eng.step()
    assert exc.value.rounds == 1
    assert eng.state.rounds == 0


def test_simulate_leaves_input_untouched():
    state = parse_input(CORRIDOR)
    simulate(state)
    assert state.rounds == 0
    assert state.units["G1"].pos == Position(2, 1)
    assert state.units["E1"].hp == 200

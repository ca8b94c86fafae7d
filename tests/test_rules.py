from cavern.combat.rules import TurnAction, apply_action, decide
from cavern.parser import parse_map


def test_equal_paths_resolve_to_earliest_cell_in_reading_order():
    # Four in-range cells sit three steps from the elf; (0,2) reads first,
    # and of the two first steps toward it (1,1) reads before (2,2).
    bf = parse_map(
        """
        .....
        ..E..
        .....
        G...G
        """
    )
    elf = bf.registry.at((2, 1))
    action = decide(bf, elf.id)
    assert action == TurnAction(unit_id=elf.id, move_to=(1, 1), target_id=None)


def test_decide_does_not_mutate_the_battlefield():
    bf = parse_map("E..G")
    before = bf.render()
    action = decide(bf, bf.registry.at((0, 0)).id)
    assert action.move_to == (1, 0)
    assert bf.render() == before


def test_adjacent_unit_attacks_without_moving():
    bf = parse_map("#EG.#")
    elf = bf.registry.at((1, 0))
    goblin = bf.registry.at((2, 0))
    action = decide(bf, elf.id)
    assert action.move_to is None
    assert action.target_id == goblin.id


def test_target_is_weakest_adjacent_enemy_then_reading_order():
    bf = parse_map(
        """
        G....
        ..G..
        ..EG.
        ..G..
        ...G.
        """
    )
    hit_points = {(0, 0): 9, (2, 1): 4, (3, 2): 2, (2, 3): 2, (3, 4): 1}
    for loc, hp in hit_points.items():
        goblin = bf.registry.at(loc)
        goblin.hit_points = hp
    elf = bf.registry.at((2, 2))
    action = decide(bf, elf.id)
    assert action.move_to is None
    assert bf.unit(action.target_id).location == (3, 2)


def test_move_then_attack_in_the_same_turn():
    bf = parse_map("E.G", hit_points=10, attack_power=3)
    elf = bf.registry.at((0, 0))
    goblin = bf.registry.at((2, 0))
    action = decide(bf, elf.id)
    assert action == TurnAction(unit_id=elf.id, move_to=(1, 0), target_id=goblin.id)
    assert apply_action(bf, action) is False
    assert elf.location == (1, 0)
    assert goblin.hit_points == 7


def test_unit_with_no_reachable_target_waits():
    bf = parse_map("E#G")
    action = decide(bf, bf.registry.at((0, 0)).id)
    assert action.idle
    assert apply_action(bf, action) is False


def test_apply_reports_kill():
    bf = parse_map("EG", hit_points=3, attack_power=3)
    action = decide(bf, bf.registry.at((0, 0)).id)
    assert apply_action(bf, action) is True
    assert bf.registry.at((1, 0)) is None

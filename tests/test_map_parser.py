import pytest

from cavern.combat.units import Faction
from cavern.errors import MapParseError
from cavern.grid.tiles import Cell
from cavern.parser import parse_map

from cave_maps import EXAMPLE_FIVE, EXAMPLE_ONE


def test_parses_units_walls_and_dimensions():
    bf = parse_map(EXAMPLE_ONE)
    assert (bf.grid.width, bf.grid.height) == (7, 7)
    assert bf.registry.count(Faction.ELF) == 6
    assert bf.registry.count(Faction.GOBLIN) == 2
    assert bf.grid.cell_at((0, 0)) == Cell.WALL
    assert bf.grid.cell_at((2, 1)) == Cell.OPEN
    goblin = bf.registry.at((1, 1))
    assert goblin.faction is Faction.GOBLIN
    assert goblin.hit_points == 200
    assert goblin.attack_power == 3
    assert bf.grid.occupant_at((1, 1)) == goblin.id


def test_unit_ids_follow_reading_order_of_the_input():
    bf = parse_map(EXAMPLE_FIVE)
    locations = [u.location for u in bf.registry.all_units()]
    assert locations == [(1, 1), (2, 2), (7, 3), (2, 6), (6, 6), (6, 7)]


def test_indentation_and_blank_lines_are_ignored():
    text = "\n\n   #####\n   #E.G#\n\n   #####   \n"
    bf = parse_map(text)
    assert bf.render() == "#####\n#E.G#\n#####"


def test_custom_starting_stats():
    bf = parse_map("EG", hit_points=10, attack_power=5)
    assert [(u.hit_points, u.attack_power) for u in bf.registry.all_units()] == [(10, 5), (10, 5)]


def test_unknown_glyph_is_fatal():
    with pytest.raises(MapParseError) as exc:
        parse_map("#####\n#E.X#\n#####")
    assert "'X'" in str(exc.value)
    assert "row 1, column 3" in str(exc.value)


def test_ragged_rows_are_rejected():
    with pytest.raises(MapParseError):
        parse_map("#####\n#E.G\n#####")


def test_empty_map_is_rejected():
    with pytest.raises(MapParseError):
        parse_map("   \n\n")


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_map("?")

from .tiles import Cell, Grid, Location, reading_key
from .pathfinding import DistanceField, choose_step, distance_field, first_step

__all__ = [
    "Cell",
    "Grid",
    "Location",
    "reading_key",
    "DistanceField",
    "distance_field",
    "first_step",
    "choose_step",
]

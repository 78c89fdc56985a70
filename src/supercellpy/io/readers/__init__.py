from .json_cell import read_json_unit_cell
from .poscar import read_poscar_unit_cell

__all__ = ["read_json_unit_cell", "read_poscar_unit_cell"]

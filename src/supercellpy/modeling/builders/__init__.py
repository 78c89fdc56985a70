from .context import ExpansionContext
from .replicate import replica_offsets, replicate_unit_cell, supercell_bounds
from .supercell_builder import build_supercell
from .tilt_box import replica_range, tilt_and_box, tilted_basis

__all__ = [
    "ExpansionContext",
    "build_supercell",
    "replicate_unit_cell",
    "replica_offsets",
    "supercell_bounds",
    "tilt_and_box",
    "tilted_basis",
    "replica_range",
]

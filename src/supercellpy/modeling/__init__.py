from .builders import (
    ExpansionContext,
    build_supercell,
    replica_offsets,
    replica_range,
    replicate_unit_cell,
    supercell_bounds,
    tilt_and_box,
    tilted_basis,
)
from .elements import ELEMENT_SYMBOLS, MAX_ATOMIC_NUMBER, get_atomic_number, get_element_symbol
from .schema import VIBRATION_MODELS, ExpansionConfig
from .validators import validate_expansion_config, validate_unit_cell

__all__ = [
    "ExpansionConfig",
    "VIBRATION_MODELS",
    "ExpansionContext",
    "build_supercell",
    "replicate_unit_cell",
    "replica_offsets",
    "supercell_bounds",
    "tilt_and_box",
    "tilted_basis",
    "replica_range",
    "ELEMENT_SYMBOLS",
    "MAX_ATOMIC_NUMBER",
    "get_atomic_number",
    "get_element_symbol",
    "validate_unit_cell",
    "validate_expansion_config",
]

from .errors import (
    ConfigurationConflictError,
    ConfigurationError,
    SpectrumFormatError,
    StructureInputError,
    SupercellError,
)
from .lattice import (
    CellMetric,
    basis_from_parameters,
    cartesian_to_fractional,
    cell_metric,
    fractional_to_cartesian,
    tilt_rotation,
)
from .occupancy import (
    SITE_TOLERANCE,
    OccupancyGroup,
    find_occupancy_groups,
    removed_count,
    resolve_group,
    resolve_occupancy,
)
from .sorting import sort_by_position, sort_by_znum
from .types import AbsoluteAtom, FractionalAtom, PhononSpectrum, Supercell, UnitCell, to_absolute

__all__ = [
    "SupercellError",
    "StructureInputError",
    "ConfigurationError",
    "ConfigurationConflictError",
    "SpectrumFormatError",
    "CellMetric",
    "cell_metric",
    "basis_from_parameters",
    "tilt_rotation",
    "fractional_to_cartesian",
    "cartesian_to_fractional",
    "SITE_TOLERANCE",
    "OccupancyGroup",
    "find_occupancy_groups",
    "resolve_occupancy",
    "resolve_group",
    "removed_count",
    "sort_by_znum",
    "sort_by_position",
    "FractionalAtom",
    "AbsoluteAtom",
    "UnitCell",
    "Supercell",
    "PhononSpectrum",
    "to_absolute",
]

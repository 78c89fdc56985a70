from .dispersion import (
    OMEGA_NOISE_FLOOR,
    NormalModeCoefficients,
    dispersion_displacement,
    draw_normal_mode_coefficients,
    mode_amplitudes,
)
from .displacement import DisplacementGenerator
from .einstein import einstein_displacement
from .statistics import DisplacementStatistics, SpeciesTable

__all__ = [
    "DisplacementGenerator",
    "DisplacementStatistics",
    "SpeciesTable",
    "einstein_displacement",
    "mode_amplitudes",
    "NormalModeCoefficients",
    "draw_normal_mode_coefficients",
    "dispersion_displacement",
    "OMEGA_NOISE_FLOOR",
]

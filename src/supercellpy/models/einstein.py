"""Independent isotropic oscillator (Einstein) displacements."""

from __future__ import annotations

import numpy as np

from supercellpy.core.units import REFERENCE_TEMPERATURE_K, debye_waller_to_rms


SQRT_THIRD = 1.0 / np.sqrt(3.0)


def einstein_displacement(
    debye_waller: float,
    rng: np.random.Generator,
    *,
    temperature: float = REFERENCE_TEMPERATURE_K,
) -> np.ndarray:
    """Return a Cartesian displacement [Angstrom] with <|u|^2> = rms^2."""

    wobble = debye_waller_to_rms(debye_waller, temperature)
    return wobble * SQRT_THIRD * rng.standard_normal(3)

"""Physical constants and unit conversions for thermal displacements."""

from __future__ import annotations

import numpy as np


# CODATA 2018 constants (SI).
HBAR_J_S = 1.054571817e-34
KB_J_K = 1.380649e-23
AMU_KG = 1.66053906660e-27
ANGSTROM_M = 1.0e-10
THZ_HZ = 1.0e12

# hbar * (1 THz) / k_B, in Kelvin.
THZ_HBAR_KB = HBAR_J_S * THZ_HZ / KB_J_K
# amu * Angstrom^2 * THz / hbar (dimensionless), so hbar/(m*omega) in Angstrom^2
# is 1 / (m[amu] * omega[THz] * THZ_AMU_HBAR).
THZ_AMU_HBAR = AMU_KG * ANGSTROM_M * ANGSTROM_M * THZ_HZ / HBAR_J_S

# Debye-Waller B = 8 pi^2 <u^2>.
DEBYE_WALLER_TO_MSD = 1.0 / (8.0 * np.pi * np.pi)
REFERENCE_TEMPERATURE_K = 300.0


def debye_waller_to_rms(debye_waller: float, temperature_k: float = REFERENCE_TEMPERATURE_K) -> float:
    """Return the Einstein-model RMS displacement [Angstrom] for a Debye-Waller value.

    The Debye-Waller value is taken at the reference temperature and scaled by
    sqrt(T / 300 K).
    """

    scale = np.sqrt(temperature_k / REFERENCE_TEMPERATURE_K)
    return float(scale * np.sqrt(debye_waller * DEBYE_WALLER_TO_MSD))


def bose_occupation(omega_thz: np.ndarray | float, temperature_k: float) -> np.ndarray | float:
    """Bose-Einstein occupation for angular frequency in THz (2 pi included)."""

    omega = np.asarray(omega_thz, dtype=float)
    if temperature_k <= 0.0:
        return np.zeros_like(omega)
    with np.errstate(divide="ignore", over="ignore"):
        return 1.0 / np.expm1(THZ_HBAR_KB * omega / temperature_k)

"""Correlated displacements from a phonon dispersion (normal-mode superposition)."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from supercellpy.core.types import PhononSpectrum
from supercellpy.core.units import THZ_AMU_HBAR, bose_occupation


Array = np.ndarray

# Frequencies at or below this are treated as numerical noise (acoustic modes at Gamma).
OMEGA_NOISE_FLOOR = 1e-4


def mode_amplitudes(spectrum: PhononSpectrum, temperature: float) -> Array:
    """Return the thermal amplitude of every (k-point, branch) pair, shape (Nk, 3Ns)."""

    omega = spectrum.frequencies
    mass = np.repeat(spectrum.masses, 3)[None, :]
    active = omega > OMEGA_NOISE_FLOOR
    safe_omega = np.where(active, omega, 1.0)
    occupation = bose_occupation(safe_omega, temperature)
    denom = 2.0 * spectrum.n_kpoints * 2.0 * mass * safe_omega * THZ_AMU_HBAR
    amp = np.sqrt((occupation + 0.5) / denom)
    return np.where(active, amp, 0.0)


@dataclass(frozen=True)
class NormalModeCoefficients:
    """Real Gaussian weights for the two quadratures of every mode, shape (Nk, 3Ns)."""

    q1: Array
    q2: Array

    @property
    def combined(self) -> Array:
        return self.q1 + 1j * self.q2


def draw_normal_mode_coefficients(amplitudes: Array, rng: np.random.Generator) -> NormalModeCoefficients:
    amp = np.asarray(amplitudes, dtype=float)
    gauss = rng.standard_normal((2,) + amp.shape)
    return NormalModeCoefficients(q1=amp * gauss[0], q2=amp * gauss[1])


def dispersion_displacement(
    spectrum: PhononSpectrum,
    coefficients: NormalModeCoefficients,
    basis_index: int,
    replica: Array,
) -> Array:
    """Return the Cartesian displacement of primitive atom ``basis_index`` in cell ``replica``.

    u = Re sum_{k, lambda} (q1 + i q2) e_{k, lambda}(atom) exp(2 pi i k.R)
    """

    if basis_index < 0 or basis_index >= spectrum.n_basis:
        raise IndexError(f"basis_index {basis_index} outside primitive basis of {spectrum.n_basis} atoms.")
    r = np.asarray(replica, dtype=float)
    phase = np.exp(2j * np.pi * (spectrum.kvectors @ r))
    vec = spectrum.eigenvectors[:, :, 3 * basis_index : 3 * basis_index + 3]
    weights = coefficients.combined * phase[:, None]
    return np.einsum("kl,klc->c", weights, vec).real

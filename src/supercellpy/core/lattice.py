"""Lattice metric and coordinate-frame helpers.

Basis convention: rows of the 3x3 basis matrix are the cell edge vectors, and
Cartesian positions are row vectors, ``r = f @ basis``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np
from scipy.spatial.transform import Rotation


Array = np.ndarray


@dataclass(frozen=True)
class CellMetric:
    """Edge lengths (Angstrom) and inter-axial angles (degrees)."""

    a: float
    b: float
    c: float
    alpha: float
    beta: float
    gamma: float

    @property
    def lengths(self) -> Array:
        return np.array([self.a, self.b, self.c], dtype=float)

    @property
    def angles(self) -> Array:
        return np.array([self.alpha, self.beta, self.gamma], dtype=float)


def cell_metric(basis: Array) -> CellMetric:
    """Return a, b, c, alpha, beta, gamma derived from the metric tensor.

    Degenerate (zero-length) edges yield NaN angles instead of raising.
    """

    mat = np.asarray(basis, dtype=float)
    if mat.shape != (3, 3):
        raise ValueError("basis must be a 3x3 array.")
    gram = mat @ mat.T
    lengths = np.sqrt(np.diag(gram))
    with np.errstate(invalid="ignore", divide="ignore"):
        cos_alpha = gram[1, 2] / (lengths[1] * lengths[2])
        cos_beta = gram[0, 2] / (lengths[0] * lengths[2])
        cos_gamma = gram[0, 1] / (lengths[0] * lengths[1])
        angles = np.degrees(np.arccos(np.clip([cos_alpha, cos_beta, cos_gamma], -1.0, 1.0)))
    return CellMetric(
        a=float(lengths[0]),
        b=float(lengths[1]),
        c=float(lengths[2]),
        alpha=float(angles[0]),
        beta=float(angles[1]),
        gamma=float(angles[2]),
    )


def basis_from_parameters(a: float, b: float, c: float, alpha: float, beta: float, gamma: float) -> Array:
    """Build a basis with a along x and b in the xy plane (angles in degrees)."""

    al, be, ga = np.radians([alpha, beta, gamma])
    cx = c * np.cos(be)
    cy = c * (np.cos(al) - np.cos(be) * np.cos(ga)) / np.sin(ga)
    cz = np.sqrt(max(c * c - cx * cx - cy * cy, 0.0))
    return np.array(
        [
            [a, 0.0, 0.0],
            [b * np.cos(ga), b * np.sin(ga), 0.0],
            [cx, cy, cz],
        ],
        dtype=float,
    )


def tilt_rotation(tilt: Iterable[float]) -> Array:
    """Return the rotation for tilts (radians) about x, then y, then z.

    The matrix acts on column vectors; row-vector positions use ``r @ R.T``.
    """

    angles = np.asarray(list(tilt), dtype=float)
    if angles.shape != (3,):
        raise ValueError("tilt must contain three angles.")
    if not np.any(angles):
        return np.eye(3)
    return Rotation.from_euler("xyz", angles).as_matrix()


def fractional_to_cartesian(frac: Array, basis: Array) -> Array:
    return np.asarray(frac, dtype=float) @ np.asarray(basis, dtype=float)


def cartesian_to_fractional(cart: Array, basis: Array) -> Array:
    return np.asarray(cart, dtype=float) @ np.linalg.inv(np.asarray(basis, dtype=float))

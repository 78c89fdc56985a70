"""Core data structures for unit cells and expanded supercells."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


Array = np.ndarray


def _as_vec3(values, name: str) -> Array:
    arr = np.asarray(values, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have exactly three components.")
    return arr


@dataclass(frozen=True)
class FractionalAtom:
    """Unit-cell site in fractional coordinates of the lattice basis."""

    znum: int
    position: Array
    occupancy: float = 1.0
    debye_waller: float = 0.0
    charge: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vec3(self.position, "position"))


@dataclass(frozen=True)
class AbsoluteAtom:
    """Resolved atom in Cartesian coordinates (Angstrom)."""

    znum: int
    position: Array
    occupancy: float = 1.0
    debye_waller: float = 0.0
    charge: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vec3(self.position, "position"))


@dataclass(frozen=True)
class UnitCell:
    """Minimal crystal description: basis rows are the cell edge vectors."""

    basis: Array
    atoms: tuple[FractionalAtom, ...]
    title: str = ""

    def __post_init__(self) -> None:
        basis = np.asarray(self.basis, dtype=float)
        if basis.shape != (3, 3):
            raise ValueError("basis must be a 3x3 array.")
        object.__setattr__(self, "basis", basis)
        object.__setattr__(self, "atoms", tuple(self.atoms))

    @property
    def n_sites(self) -> int:
        return len(self.atoms)


@dataclass(frozen=True)
class Supercell:
    """Result of one expansion pass."""

    atoms: tuple[AbsoluteAtom, ...]
    extents: Array
    mode: str
    n_removed: int = 0
    rms_displacement: dict[int, float] = field(default_factory=dict)
    pass_rms: dict[int, float] = field(default_factory=dict)

    @property
    def n_atoms(self) -> int:
        return len(self.atoms)

    def positions(self) -> Array:
        if not self.atoms:
            return np.zeros((0, 3), dtype=float)
        return np.vstack([atom.position for atom in self.atoms])

    def znums(self) -> Array:
        return np.asarray([atom.znum for atom in self.atoms], dtype=int)


def to_absolute(atom: FractionalAtom, basis: Array, shift: Array | None = None) -> AbsoluteAtom:
    """Convert a fractional site to Cartesian coordinates (row vector times basis).

    ``shift`` is an optional Cartesian translation added after the conversion.
    """

    position = np.asarray(atom.position, dtype=float) @ np.asarray(basis, dtype=float)
    if shift is not None:
        position = position + np.asarray(shift, dtype=float)
    return AbsoluteAtom(
        znum=atom.znum,
        position=position,
        occupancy=atom.occupancy,
        debye_waller=atom.debye_waller,
        charge=atom.charge,
    )


def _frozen(arr: Array, dtype) -> Array:
    out = np.array(arr, dtype=dtype, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class PhononSpectrum:
    """Eigenfrequencies and eigenvectors per k-point.

    Shapes: ``masses (Ns,)`` in amu, ``kvectors (Nk, 3)`` in reciprocal lattice
    units, ``frequencies (Nk, 3Ns)`` in THz including the 2 pi factor, and
    ``eigenvectors (Nk, 3Ns, 3Ns)`` indexed ``[k, branch, 3*atom + axis]``.
    """

    masses: Array
    kvectors: Array
    frequencies: Array
    eigenvectors: Array

    def __post_init__(self) -> None:
        masses = _frozen(self.masses, float)
        kvecs = _frozen(self.kvectors, float)
        freqs = _frozen(self.frequencies, float)
        vecs = _frozen(self.eigenvectors, np.complex128)
        if masses.ndim != 1 or masses.size == 0:
            raise ValueError("masses must be a non-empty 1D array.")
        nb = 3 * masses.size
        if kvecs.ndim != 2 or kvecs.shape[1] != 3:
            raise ValueError("kvectors must have shape (Nk, 3).")
        nk = kvecs.shape[0]
        if freqs.shape != (nk, nb):
            raise ValueError("frequencies must have shape (Nk, 3*Ns).")
        if vecs.shape != (nk, nb, nb):
            raise ValueError("eigenvectors must have shape (Nk, 3*Ns, 3*Ns).")
        object.__setattr__(self, "masses", masses)
        object.__setattr__(self, "kvectors", kvecs)
        object.__setattr__(self, "frequencies", freqs)
        object.__setattr__(self, "eigenvectors", vecs)

    @property
    def n_kpoints(self) -> int:
        return int(self.kvectors.shape[0])

    @property
    def n_basis(self) -> int:
        return int(self.masses.size)

    @property
    def n_branches(self) -> int:
        return 3 * self.n_basis

"""Validation helpers for unit-cell input."""

from __future__ import annotations

import numpy as np

from supercellpy.core.errors import StructureInputError
from supercellpy.core.types import UnitCell
from supercellpy.modeling.elements import MAX_ATOMIC_NUMBER


def validate_unit_cell(cell: UnitCell) -> None:
    basis = np.asarray(cell.basis, dtype=float)
    if basis.shape != (3, 3) or not np.all(np.isfinite(basis)):
        raise StructureInputError("Unit-cell basis must be a finite 3x3 array.")
    if abs(float(np.linalg.det(basis))) < 1e-12:
        raise StructureInputError("Unit-cell basis is singular (degenerate cell edges).")
    if cell.n_sites == 0:
        raise StructureInputError("Unit cell contains no atomic sites.")

    for i, atom in enumerate(cell.atoms):
        if atom.znum < 1 or atom.znum > MAX_ATOMIC_NUMBER:
            raise StructureInputError(
                f"Bad atomic number {atom.znum} at site {i} "
                f"({atom.position[0]:g} {atom.position[1]:g} {atom.position[2]:g})."
            )
        if not np.all(np.isfinite(atom.position)):
            raise StructureInputError(f"Site {i} has a non-finite position.")
        if not np.isfinite(atom.occupancy) or atom.occupancy <= 0.0:
            raise StructureInputError(f"Site {i} has invalid occupancy {atom.occupancy}.")
        if not np.isfinite(atom.debye_waller) or atom.debye_waller < 0.0:
            raise StructureInputError(f"Site {i} has invalid Debye-Waller value {atom.debye_waller}.")

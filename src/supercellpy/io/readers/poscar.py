"""VASP POSCAR adapter.

POSCAR files carry neither occupancies nor Debye-Waller values; every site is
fully occupied and gets ``default_debye_waller``. A VASP5 species line is
required to map sites to elements.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np

from supercellpy.core.errors import StructureInputError
from supercellpy.core.lattice import cartesian_to_fractional
from supercellpy.core.types import FractionalAtom, UnitCell
from supercellpy.modeling.elements import get_atomic_number
from supercellpy.modeling.validators import validate_unit_cell


def read_poscar_unit_cell(source: Any, *, default_debye_waller: float = 0.0) -> UnitCell:
    """Parse a POSCAR/CONTCAR file into ``UnitCell`` (fractional coordinates)."""

    path = Path(source)
    lines = path.read_text(encoding="utf-8").splitlines()
    if len(lines) < 8:
        raise StructureInputError(f"POSCAR seems too short: '{path}'")

    title = lines[0].strip()
    scale = float(lines[1].split()[0])
    lv = np.asarray([[float(x) for x in lines[2 + i].split()[:3]] for i in range(3)], dtype=float)
    # Negative scale is the target cell volume.
    factor = (-scale / abs(float(np.linalg.det(lv)))) ** (1.0 / 3.0) if scale < 0.0 else scale
    lv *= factor

    line5 = lines[5].split()
    if all(tok.lstrip("+-").isdigit() for tok in line5):
        raise StructureInputError(f"POSCAR without element symbols line is not supported: '{path}'")
    symbols = line5
    counts = [int(x) for x in lines[6].split()]
    if len(counts) != len(symbols):
        raise StructureInputError(f"POSCAR species and count lines disagree: '{path}'")
    i = 7

    if i < len(lines) and lines[i].strip().lower().startswith("s"):
        i += 1
    if i >= len(lines):
        raise StructureInputError(f"POSCAR missing coordinate mode line: '{path}'")
    coord_mode = lines[i].strip().lower()
    i += 1

    nat = sum(counts)
    if i + nat > len(lines):
        raise StructureInputError(f"POSCAR atom coordinate section is incomplete: '{path}'")

    coords = []
    for j in range(nat):
        toks = lines[i + j].split()
        if len(toks) < 3:
            raise StructureInputError(f"Invalid POSCAR coordinate line: '{lines[i + j]}'")
        coords.append([float(toks[0]), float(toks[1]), float(toks[2])])
    coords_arr = np.asarray(coords, dtype=float)

    if coord_mode.startswith("c") or coord_mode.startswith("k"):
        coords_arr = cartesian_to_fractional(coords_arr * factor, lv)
    elif not coord_mode.startswith("d"):
        raise StructureInputError(f"Unsupported POSCAR coordinate mode '{lines[i - 1].strip()}'.")

    znums: list[int] = []
    for sym, n in zip(symbols, counts):
        try:
            z = get_atomic_number(sym)
        except KeyError as exc:
            raise StructureInputError(str(exc)) from exc
        znums.extend([z] * int(n))

    atoms = tuple(
        FractionalAtom(znum=z, position=pos, debye_waller=float(default_debye_waller))
        for z, pos in zip(znums, coords_arr)
    )
    cell = UnitCell(basis=lv, atoms=atoms, title=title)
    validate_unit_cell(cell)
    return cell

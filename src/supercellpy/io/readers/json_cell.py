"""JSON unit-cell adapter.

Accepted payload (dict or path to a JSON file)::

    {
      "title": "SrTiO3",
      "basis": [[3.905, 0, 0], [0, 3.905, 0], [0, 0, 3.905]],
      "atoms": [
        {"symbol": "Sr", "position": [0, 0, 0], "debye_waller": 0.62},
        {"znum": 22, "position": [0.5, 0.5, 0.5], "occupancy": 0.9}
      ]
    }

``cell`` with ``a, b, c, alpha, beta, gamma`` (degrees) may replace ``basis``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from supercellpy.core.errors import StructureInputError
from supercellpy.core.lattice import basis_from_parameters
from supercellpy.core.types import FractionalAtom, UnitCell
from supercellpy.modeling.elements import get_atomic_number
from supercellpy.modeling.validators import validate_unit_cell


def _load_source_payload(source: Any) -> dict[str, Any]:
    if isinstance(source, dict):
        return source
    path = Path(source)
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _parse_basis(payload: dict[str, Any]) -> np.ndarray:
    if "basis" in payload:
        return np.asarray(payload["basis"], dtype=float)
    if "cell" in payload:
        cell = payload["cell"]
        return basis_from_parameters(
            float(cell["a"]),
            float(cell["b"]),
            float(cell["c"]),
            float(cell.get("alpha", 90.0)),
            float(cell.get("beta", 90.0)),
            float(cell.get("gamma", 90.0)),
        )
    raise StructureInputError("Unit-cell payload needs either 'basis' or 'cell'.")


def _parse_atom(item: dict[str, Any], default_debye_waller: float) -> FractionalAtom:
    if "znum" in item:
        znum = int(item["znum"])
    elif "symbol" in item:
        try:
            znum = get_atomic_number(str(item["symbol"]))
        except KeyError as exc:
            raise StructureInputError(str(exc)) from exc
    else:
        raise StructureInputError("Each atom needs 'znum' or 'symbol'.")
    return FractionalAtom(
        znum=znum,
        position=np.asarray(item["position"], dtype=float),
        occupancy=float(item.get("occupancy", 1.0)),
        debye_waller=float(item.get("debye_waller", default_debye_waller)),
        charge=float(item.get("charge", 0.0)),
    )


def read_json_unit_cell(source: Any, *, default_debye_waller: float = 0.0) -> UnitCell:
    """Parse a JSON unit cell (fractional coordinates) into ``UnitCell``."""

    payload = _load_source_payload(source)
    basis = _parse_basis(payload)
    atoms = tuple(_parse_atom(item, default_debye_waller) for item in payload.get("atoms", []))
    cell = UnitCell(basis=basis, atoms=atoms, title=str(payload.get("title", "")))
    validate_unit_cell(cell)
    return cell

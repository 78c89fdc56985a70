"""Total orders over unit-cell atoms.

Both orders rely on Python's stable sort, so atoms with equal keys keep their
input order.
"""

from __future__ import annotations

from typing import Iterable, TypeVar

from .types import AbsoluteAtom, FractionalAtom


AtomT = TypeVar("AtomT", FractionalAtom, AbsoluteAtom)


def znum_key(atom: FractionalAtom | AbsoluteAtom) -> int:
    return -int(atom.znum)


def zyx_key(atom: FractionalAtom | AbsoluteAtom) -> tuple[float, float, float]:
    x, y, z = (float(v) for v in atom.position)
    return (z, y, x)


def sort_by_znum(atoms: Iterable[AtomT]) -> list[AtomT]:
    """Order atoms by atomic number, heaviest first."""

    return sorted(atoms, key=znum_key)


def sort_by_position(atoms: Iterable[AtomT]) -> list[AtomT]:
    """Order atoms lexicographically on (z, y, x), ascending."""

    return sorted(atoms, key=zyx_key)

"""Partial-occupancy and co-sited atom resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .types import FractionalAtom


SITE_TOLERANCE = 1e-6


@dataclass(frozen=True)
class OccupancyGroup:
    """Run ``[start, stop)`` of sorted sites sharing one lattice position."""

    start: int
    stop: int
    occupancies: tuple[float, ...]
    sampled: bool

    @property
    def size(self) -> int:
        return self.stop - self.start

    @property
    def total_occupancy(self) -> float:
        return float(sum(self.occupancies))


def _same_site(a: FractionalAtom, b: FractionalAtom, tol: float) -> bool:
    return bool(np.all(np.abs(a.position - b.position) < tol))


def find_occupancy_groups(
    atoms: Sequence[FractionalAtom],
    *,
    handle_vacancies: bool = True,
    tol: float = SITE_TOLERANCE,
) -> list[OccupancyGroup]:
    """Split adjacent coincident sites into groups.

    The atoms are expected in (z, y, x) order; only neighbours in that order are
    compared. Without vacancy handling every site is its own group and is never
    sampled, regardless of its occupancy.
    """

    groups: list[OccupancyGroup] = []
    i = 0
    n = len(atoms)
    while i < n:
        if not handle_vacancies:
            groups.append(OccupancyGroup(start=i, stop=i + 1, occupancies=(1.0,), sampled=False))
            i += 1
            continue
        j = i + 1
        while j < n and _same_site(atoms[i], atoms[j], tol):
            j += 1
        occ = tuple(float(atoms[k].occupancy) for k in range(i, j))
        sampled = (j - i) > 1 or occ[0] < 1.0
        groups.append(OccupancyGroup(start=i, stop=j, occupancies=occ, sampled=sampled))
        i = j
    return groups


def resolve_occupancy(occupancies: Sequence[float], rng: np.random.Generator) -> int | None:
    """Pick the winning candidate of a co-sited group, or ``None`` for a vacancy.

    With total occupancy T < 1 a uniform draw in [0, 1) lands either in one
    candidate's cumulative interval or in the gap [T, 1). With T >= 1 the draw
    is scaled to [0, T), so exactly one candidate always wins.
    """

    total = float(sum(occupancies))
    choice = rng.random()
    if total >= 1.0:
        choice *= total
    last = 0.0
    for idx, occ in enumerate(occupancies):
        if last <= choice < last + occ:
            return idx
        last += occ
    if total >= 1.0:
        # choice == total is only reachable through rounding in the running sum
        return len(occupancies) - 1
    return None


def resolve_group(group: OccupancyGroup, rng: np.random.Generator) -> int | None:
    """Return the absolute site index chosen for ``group`` or ``None``."""

    if not group.sampled:
        return group.start
    winner = resolve_occupancy(group.occupancies, rng)
    if winner is None:
        return None
    return group.start + winner


def removed_count(group: OccupancyGroup, winner: int | None) -> int:
    """Number of candidates a resolution discards."""

    return group.size if winner is None else group.size - 1

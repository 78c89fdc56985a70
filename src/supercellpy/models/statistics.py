"""Per-species mean-square displacement bookkeeping."""

from __future__ import annotations

import numpy as np


class SpeciesTable:
    """Dense indices for atomic numbers, assigned in first-seen order."""

    def __init__(self) -> None:
        self._index: dict[int, int] = {}
        self._znums: list[int] = []

    def __len__(self) -> int:
        return len(self._znums)

    def __contains__(self, znum: int) -> bool:
        return int(znum) in self._index

    @property
    def znums(self) -> tuple[int, ...]:
        return tuple(self._znums)

    def index_of(self, znum: int) -> int:
        key = int(znum)
        idx = self._index.get(key)
        if idx is None:
            idx = len(self._znums)
            self._index[key] = idx
            self._znums.append(key)
        return idx

    def znum_of(self, index: int) -> int:
        return self._znums[index]

    def reset(self) -> None:
        self._index.clear()
        self._znums.clear()


class DisplacementStatistics:
    """Running RMS displacement per species.

    Squared displacements are summed per pass. ``flush`` reduces them to the
    pass RMS and folds the pass mean into a cross-pass estimate

        avg_n = sqrt(((n - 1) * avg_{n-1}**2 + mean_n) / n)

    where ``n`` counts flushed passes starting at 1. The running values are
    keyed by atomic number so they survive species-table resets.
    """

    def __init__(self) -> None:
        self._sum_u2: list[float] = []
        self._count: list[int] = []
        self.run_count = 1
        self.running_rms: dict[int, float] = {}
        self.pass_rms: dict[int, float] = {}

    def begin_pass(self) -> None:
        self._sum_u2 = []
        self._count = []

    def add(self, species_index: int, u2: float) -> None:
        if species_index >= len(self._count):
            grow = species_index + 1 - len(self._count)
            self._sum_u2.extend([0.0] * grow)
            self._count.extend([0] * grow)
        self._sum_u2[species_index] += float(u2)
        self._count[species_index] += 1

    def samples(self, species_index: int) -> int:
        if species_index >= len(self._count):
            return 0
        return self._count[species_index]

    def flush(self, species: SpeciesTable) -> dict[int, float]:
        """Finalize the current pass and return the running RMS table."""

        n = self.run_count
        self.pass_rms = {}
        for idx, (total, count) in enumerate(zip(self._sum_u2, self._count)):
            if count == 0:
                continue
            znum = species.znum_of(idx)
            mean_u2 = total / count
            old = self.running_rms.get(znum, 0.0)
            self.running_rms[znum] = float(np.sqrt(((n - 1) * old * old + mean_u2) / n))
            self.pass_rms[znum] = float(np.sqrt(mean_u2))
        self.run_count += 1
        self.begin_pass()
        return dict(self.running_rms)

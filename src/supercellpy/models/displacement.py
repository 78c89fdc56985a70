"""Per-atom thermal displacement generator shared by both builder modes."""

from __future__ import annotations

import logging

import numpy as np

from supercellpy.core.errors import StructureInputError
from supercellpy.core.lattice import cartesian_to_fractional, cell_metric
from supercellpy.core.types import PhononSpectrum

from .dispersion import (
    NormalModeCoefficients,
    dispersion_displacement,
    draw_normal_mode_coefficients,
    mode_amplitudes,
)
from .einstein import einstein_displacement
from .statistics import DisplacementStatistics, SpeciesTable


logger = logging.getLogger(__name__)

Array = np.ndarray


class DisplacementGenerator:
    """Produce fractional displacements for one unit-cell basis.

    A pass is bracketed by ``begin_pass`` and ``finish_pass``. Within a pass the
    species table and the squared-displacement sums grow; ``finish_pass`` folds
    them into ``statistics`` exactly once. The random stream and ``statistics``
    are owned by the caller and persist across passes.
    """

    def __init__(
        self,
        basis: Array,
        *,
        rng: np.random.Generator,
        vibration_model: str = "einstein",
        temperature: float = 300.0,
        enabled: bool = True,
        spectrum: PhononSpectrum | None = None,
        statistics: DisplacementStatistics | None = None,
    ) -> None:
        model = vibration_model.strip().lower()
        if model not in {"einstein", "dispersion"}:
            raise ValueError("vibration_model must be one of: einstein, dispersion.")
        if model == "dispersion" and spectrum is None:
            logger.warning("No phonon spectrum available, using Einstein displacements instead.")
            model = "einstein"

        self.basis = np.asarray(basis, dtype=float)
        self._edge_lengths = cell_metric(self.basis).lengths
        self.rng = rng
        self.model = model
        self.temperature = float(temperature)
        self.enabled = bool(enabled)
        self.spectrum = spectrum if model == "dispersion" else None
        self.statistics = statistics if statistics is not None else DisplacementStatistics()
        self.species = SpeciesTable()
        self._amplitudes = (
            mode_amplitudes(self.spectrum, self.temperature) if self.spectrum is not None else None
        )
        self._coefficients: NormalModeCoefficients | None = None
        self._pass_open = False

    @property
    def pass_open(self) -> bool:
        return self._pass_open

    def begin_pass(self) -> None:
        self.species.reset()
        self.statistics.begin_pass()
        if self.enabled and self._amplitudes is not None:
            logger.debug(
                "Drawing normal-mode coefficients for %d k-points x %d branches.",
                self._amplitudes.shape[0],
                self._amplitudes.shape[1],
            )
            self._coefficients = draw_normal_mode_coefficients(self._amplitudes, self.rng)
        self._pass_open = True

    def displace(self, site_index: int, znum: int, debye_waller: float, replica: Array) -> Array:
        """Return the displacement of one atom instance in fractional coordinates."""

        if not self.enabled:
            return np.zeros(3, dtype=float)
        if not self._pass_open:
            raise RuntimeError("begin_pass() must be called before displace().")

        species_index = self.species.index_of(znum)
        if self.spectrum is None:
            u = einstein_displacement(debye_waller, self.rng, temperature=self.temperature)
            self.statistics.add(species_index, float(u @ u))
            return cartesian_to_fractional(u, self.basis)

        if site_index >= self.spectrum.n_basis:
            raise StructureInputError(
                f"Unit-cell site {site_index} has no counterpart in the phonon spectrum "
                f"({self.spectrum.n_basis} primitive atoms)."
            )
        u = dispersion_displacement(self.spectrum, self._coefficients, site_index, replica)
        self.statistics.add(species_index, float(u @ u))
        return u / self._edge_lengths

    def finish_pass(self) -> dict[int, float]:
        """Flush the pass statistics; repeated calls within one pass do nothing."""

        if not self._pass_open:
            return dict(self.statistics.running_rms)
        self._pass_open = False
        if not self.enabled:
            return dict(self.statistics.running_rms)
        running = self.statistics.flush(self.species)
        for znum, rms in sorted(self.statistics.pass_rms.items()):
            logger.info(
                "Z=%d: sqrt(<u^2>) = %.6f A this pass, running average %.6f A",
                znum,
                rms,
                running[znum],
            )
        return running

    @property
    def pass_rms(self) -> dict[int, float]:
        """RMS displacement per atomic number of the last finished pass."""

        if not self.enabled:
            return {}
        return dict(self.statistics.pass_rms)

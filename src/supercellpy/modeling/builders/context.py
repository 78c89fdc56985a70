"""State carried across expansion passes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from supercellpy.core.types import PhononSpectrum
from supercellpy.modeling.schema import ExpansionConfig
from supercellpy.modeling.validators import validate_expansion_config
from supercellpy.models import DisplacementGenerator, DisplacementStatistics


logger = logging.getLogger(__name__)


@dataclass
class ExpansionContext:
    """Random stream, spectrum handle and running statistics for repeated passes.

    One context is created per run; every ``build_supercell`` call with it draws
    from the same random stream and extends the same running RMS estimate.
    """

    config: ExpansionConfig
    rng: np.random.Generator
    spectrum: PhononSpectrum | None = None
    statistics: DisplacementStatistics = field(default_factory=DisplacementStatistics)
    vibration_model: str = "einstein"
    passes: int = 0

    @classmethod
    def from_config(
        cls,
        config: ExpansionConfig,
        *,
        spectrum: PhononSpectrum | None = None,
        rng: np.random.Generator | None = None,
    ) -> "ExpansionContext":
        """Validate ``config`` and load its phonon spectrum unless one is given.

        Dispersion mode falls back to Einstein displacements when the spectrum
        file cannot be opened.
        """

        validate_expansion_config(config)
        model = config.vibration_model.strip().lower()
        if model == "dispersion" and spectrum is None:
            from supercellpy.io.spectrum import load_phonon_spectrum_or_fallback

            spectrum = load_phonon_spectrum_or_fallback(config.phonon_file)
            if spectrum is None:
                model = "einstein"
            else:
                logger.info(
                    "Loaded phonon spectrum: %d k-points, %d basis atoms.",
                    spectrum.n_kpoints,
                    spectrum.n_basis,
                )
        return cls(
            config=config,
            rng=rng if rng is not None else np.random.default_rng(config.seed),
            spectrum=spectrum if model == "dispersion" else None,
            vibration_model=model,
        )

    def generator(self, basis: np.ndarray) -> DisplacementGenerator:
        return DisplacementGenerator(
            basis,
            rng=self.rng,
            vibration_model=self.vibration_model,
            temperature=self.config.temperature,
            enabled=self.config.thermal_vibrations,
            spectrum=self.spectrum,
            statistics=self.statistics,
        )

    @property
    def rms_displacement(self) -> dict[int, float]:
        return dict(self.statistics.running_rms)

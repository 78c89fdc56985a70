"""Settings for one supercell expansion."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


VIBRATION_MODELS = ("einstein", "dispersion")


@dataclass(frozen=True)
class ExpansionConfig:
    """Config knobs for replication, boxing, occupancy and thermal displacement."""

    n_cells: tuple[int, int, int] = (1, 1, 1)
    box: tuple[float, float, float] = (0.0, 0.0, 0.0)
    tilt: tuple[float, float, float] = (0.0, 0.0, 0.0)
    offset: tuple[float, float] = (0.0, 0.0)
    vibration_model: str = "einstein"
    thermal_vibrations: bool = True
    temperature: float = 300.0
    handle_vacancies: bool = True
    phonon_file: str | Path | None = None
    seed: int | None = None
    per_replica_occupancy: bool = False
    default_debye_waller: float = 0.0

    @property
    def boxed(self) -> bool:
        return all(float(v) > 0.0 for v in self.box)

    @property
    def tilted(self) -> bool:
        return any(float(v) != 0.0 for v in self.tilt)

    @property
    def uses_dispersion(self) -> bool:
        return self.vibration_model.strip().lower() == "dispersion"

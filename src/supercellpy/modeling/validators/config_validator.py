"""Validation helpers for expansion settings."""

from __future__ import annotations

from supercellpy.core.errors import ConfigurationConflictError, ConfigurationError
from supercellpy.modeling.schema import VIBRATION_MODELS, ExpansionConfig


def validate_expansion_config(config: ExpansionConfig) -> None:
    if len(config.n_cells) != 3 or any(int(n) < 1 for n in config.n_cells):
        raise ConfigurationError("n_cells must contain three positive integers.")
    if len(config.box) != 3 or any(float(v) < 0.0 for v in config.box):
        raise ConfigurationError("box must contain three non-negative extents.")
    if len(config.tilt) != 3:
        raise ConfigurationError("tilt must contain three angles (radians).")
    if len(config.offset) != 2:
        raise ConfigurationError("offset must contain two components (x, y).")
    if config.temperature < 0.0:
        raise ConfigurationError("temperature must be non-negative.")
    if config.vibration_model.strip().lower() not in VIBRATION_MODELS:
        raise ConfigurationError(f"vibration_model must be one of: {', '.join(VIBRATION_MODELS)}.")
    if config.uses_dispersion and config.boxed:
        raise ConfigurationConflictError(
            "Phonon-dispersion displacements are not supported for boxed (tilt-and-box) samples."
        )

"""Entry point for one expansion pass (replication or tilt-and-box)."""

from __future__ import annotations

import logging

from supercellpy.core.errors import ConfigurationError
from supercellpy.core.lattice import cell_metric
from supercellpy.core.types import Supercell, UnitCell
from supercellpy.modeling.schema import ExpansionConfig
from supercellpy.modeling.validators import validate_expansion_config, validate_unit_cell

from .context import ExpansionContext
from .replicate import replicate_unit_cell
from .tilt_box import tilt_and_box


logger = logging.getLogger(__name__)


def build_supercell(
    cell: UnitCell,
    config: ExpansionConfig | None = None,
    *,
    context: ExpansionContext | None = None,
) -> Supercell:
    """Expand ``cell`` into a supercell with thermal displacements.

    Tilt-and-box mode is used when all three box extents are positive,
    replication mode otherwise. Pass the same ``context`` to successive calls to
    share the random stream and accumulate running RMS statistics.
    """

    if context is None:
        config = config or ExpansionConfig()
        context = ExpansionContext.from_config(config)
    elif config is None:
        config = context.config
    elif config != context.config:
        raise ConfigurationError("config differs from the one the expansion context was created with.")

    validate_expansion_config(config)
    validate_unit_cell(cell)

    metric = cell_metric(cell.basis)
    logger.info(
        "Lattice parameters: a=%g b=%g c=%g alpha=%g beta=%g gamma=%g (%d sites)",
        metric.a, metric.b, metric.c, metric.alpha, metric.beta, metric.gamma, cell.n_sites,
    )
    generator = context.generator(cell.basis)
    if config.boxed:
        logger.info("Size of box: %g x %g x %g", *config.box)
        result = tilt_and_box(cell, config, generator, context.rng)
    else:
        ncx, ncy, ncz = config.n_cells
        logger.info(
            "Size of super-lattice: %g x %g x %g (%d x %d x %d)",
            metric.a * ncx, metric.b * ncy, metric.c * ncz, ncx, ncy, ncz,
        )
        result = replicate_unit_cell(cell, config, generator, context.rng)
    context.passes += 1
    return result

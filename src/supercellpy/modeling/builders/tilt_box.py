"""Fill an explicit rectangular box with a tilted crystal."""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace

import numpy as np

from supercellpy.core.errors import ConfigurationConflictError
from supercellpy.core.lattice import cartesian_to_fractional, fractional_to_cartesian, tilt_rotation
from supercellpy.core.occupancy import find_occupancy_groups, removed_count, resolve_group
from supercellpy.core.sorting import sort_by_position
from supercellpy.core.types import AbsoluteAtom, FractionalAtom, Supercell, UnitCell, to_absolute
from supercellpy.modeling.schema import ExpansionConfig
from supercellpy.models import DisplacementGenerator


logger = logging.getLogger(__name__)

Array = np.ndarray


def tilted_basis(basis: Array, tilt: tuple[float, float, float]) -> Array:
    """Rotate the cell edge vectors (rows) by the tilt angles."""

    return np.asarray(basis, dtype=float) @ tilt_rotation(tilt).T


def replica_range(
    basis: Array,
    box: tuple[float, float, float],
    offset: Array,
) -> tuple[Array, Array]:
    """Smallest integer replica range whose cells reach every corner of the box.

    Returns inclusive ``(nmin, nmax)`` per axis.
    """

    corners = np.array(list(itertools.product(*[(0.0, float(v)) for v in box])), dtype=float)
    frac = cartesian_to_fractional(corners - offset, basis)
    nmin = np.floor(frac.min(axis=0)).astype(int)
    nmax = np.ceil(frac.max(axis=0)).astype(int)
    return nmin, nmax


def _inside(position: Array, box: Array) -> bool:
    return bool(np.all(position >= 0.0) and np.all(position <= box))


def tilt_and_box(
    cell: UnitCell,
    config: ExpansionConfig,
    generator: DisplacementGenerator,
    rng: np.random.Generator,
) -> Supercell:
    """Keep every replicated atom whose undisplaced position lies inside the box.

    Bounds are inclusive. Coincident sites are only merged within the source
    unit cell, never across periodic images.
    """

    if generator.model == "dispersion":
        raise ConfigurationConflictError(
            "Phonon-dispersion displacements are not supported for boxed (tilt-and-box) samples."
        )

    sites: list[FractionalAtom] = (
        sort_by_position(cell.atoms) if config.handle_vacancies else list(cell.atoms)
    )
    groups = find_occupancy_groups(sites, handle_vacancies=config.handle_vacancies)
    box = np.asarray(config.box, dtype=float)
    offset = np.array([float(config.offset[0]), float(config.offset[1]), 0.0])
    basis = tilted_basis(cell.basis, config.tilt)

    nmin, nmax = replica_range(basis, config.box, offset)
    logger.debug(
        "Replica range: (%d..%d, %d..%d, %d..%d)",
        nmin[0], nmax[0], nmin[1], nmax[1], nmin[2], nmax[2],
    )
    offsets = list(
        itertools.product(
            range(nmin[0], nmax[0] + 1),
            range(nmin[1], nmax[1] + 1),
            range(nmin[2], nmax[2] + 1),
        )
    )

    generator.begin_pass()
    atoms: list[AbsoluteAtom] = []
    n_removed = 0
    for group in groups:
        for replica_idx in offsets:
            replica = np.asarray(replica_idx, dtype=float)
            winner = resolve_group(group, rng)
            n_removed += removed_count(group, winner)
            if winner is None:
                continue
            site = sites[winner]
            lattice_pos = replica + site.position
            u = generator.displace(winner, site.znum, site.debye_waller, replica)
            if not _inside(fractional_to_cartesian(lattice_pos, basis) + offset, box):
                continue
            displaced = replace(site, position=lattice_pos + u, occupancy=1.0)
            atoms.append(to_absolute(displaced, basis, shift=offset))
    running = generator.finish_pass()

    if n_removed > 0:
        logger.info(
            "Removed %d atoms because of multiple occupancy or occupancy < 1.",
            n_removed,
        )
    return Supercell(
        atoms=tuple(atoms),
        extents=box.copy(),
        mode="tilt_box",
        n_removed=n_removed,
        rms_displacement=running,
        pass_rms=generator.pass_rms,
    )

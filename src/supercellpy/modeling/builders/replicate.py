"""Periodic replication of a unit cell on an Nx x Ny x Nz grid."""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace

import numpy as np

from supercellpy.core.lattice import fractional_to_cartesian, tilt_rotation
from supercellpy.core.occupancy import find_occupancy_groups, removed_count, resolve_group
from supercellpy.core.sorting import sort_by_position
from supercellpy.core.types import AbsoluteAtom, FractionalAtom, Supercell, UnitCell, to_absolute
from supercellpy.modeling.schema import ExpansionConfig
from supercellpy.models import DisplacementGenerator


logger = logging.getLogger(__name__)

Array = np.ndarray


def replica_offsets(n_cells: tuple[int, int, int]) -> list[tuple[int, int, int]]:
    """Integer cell offsets, x outermost and z innermost."""

    ncx, ncy, ncz = (int(n) for n in n_cells)
    return list(itertools.product(range(ncx), range(ncy), range(ncz)))


def supercell_bounds(basis: Array, n_cells: tuple[int, int, int], rotation: Array) -> tuple[Array, Array, Array]:
    """Return (center, box_min, box_max) of the rotated replicated cell.

    The rotation is about the geometric center of the replicated cell; the
    bounds are taken over its eight corners.
    """

    n = np.asarray(n_cells, dtype=float)
    half = 0.5 * n
    center = fractional_to_cartesian(half, basis)
    corners = np.array(list(itertools.product(*[(0.0, v) for v in n])), dtype=float)
    corner_cart = fractional_to_cartesian(corners - half, basis) @ rotation.T + center
    return center, corner_cart.min(axis=0), corner_cart.max(axis=0)


def replicate_unit_cell(
    cell: UnitCell,
    config: ExpansionConfig,
    generator: DisplacementGenerator,
    rng: np.random.Generator,
) -> Supercell:
    """Replicate, displace, tilt about the center, and re-origin to non-negative coordinates."""

    sites: list[FractionalAtom] = (
        sort_by_position(cell.atoms) if config.handle_vacancies else list(cell.atoms)
    )
    groups = find_occupancy_groups(sites, handle_vacancies=config.handle_vacancies)
    basis = np.asarray(cell.basis, dtype=float)

    generator.begin_pass()
    shared_winners = None
    if not config.per_replica_occupancy:
        shared_winners = [resolve_group(group, rng) for group in groups]

    placed: list[AbsoluteAtom] = []
    n_removed = 0
    for offset in replica_offsets(config.n_cells):
        replica = np.asarray(offset, dtype=float)
        for gi, group in enumerate(groups):
            winner = shared_winners[gi] if shared_winners is not None else resolve_group(group, rng)
            n_removed += removed_count(group, winner)
            if winner is None:
                continue
            site = sites[winner]
            u = generator.displace(winner, site.znum, site.debye_waller, replica)
            displaced = replace(site, position=site.position + replica + u, occupancy=1.0)
            placed.append(to_absolute(displaced, basis))
    running = generator.finish_pass()

    if n_removed > 0:
        logger.info(
            "Removed %d atoms because of occupancies < 1 or multiple atoms in the same place.",
            n_removed,
        )

    cart = np.array([atom.position for atom in placed], dtype=float).reshape(-1, 3)
    rotation = tilt_rotation(config.tilt)
    center, box_min, box_max = supercell_bounds(basis, config.n_cells, rotation)
    if config.tilted:
        cart = (cart - center) @ rotation.T + center
    cart = cart - box_min
    if any(float(v) != 0.0 for v in config.offset):
        cart[:, 0] += float(config.offset[0])
        cart[:, 1] += float(config.offset[1])

    atoms = tuple(replace(atom, position=pos) for atom, pos in zip(placed, cart))
    return Supercell(
        atoms=atoms,
        extents=box_max - box_min,
        mode="replicate",
        n_removed=n_removed,
        rms_displacement=running,
        pass_rms=generator.pass_rms,
    )

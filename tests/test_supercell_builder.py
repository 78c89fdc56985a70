import numpy as np
import pytest

from supercellpy import (
    ConfigurationConflictError,
    ConfigurationError,
    ExpansionConfig,
    ExpansionContext,
    FractionalAtom,
    PhononSpectrum,
    StructureInputError,
    UnitCell,
    build_supercell,
)
from supercellpy.core.lattice import basis_from_parameters, fractional_to_cartesian
from supercellpy.io import write_phonon_spectrum
from supercellpy.modeling.builders import replica_offsets, replica_range, tilt_and_box
from supercellpy.models import DisplacementGenerator


def _cubic(a: float, *atoms: FractionalAtom) -> UnitCell:
    return UnitCell(basis=np.eye(3) * a, atoms=atoms)


def _sorted_rows(arr: np.ndarray) -> np.ndarray:
    arr = np.round(np.asarray(arr, dtype=float), 9)
    return arr[np.lexsort(arr.T[::-1])]


def test_replica_offsets_order_x_outermost() -> None:
    offsets = replica_offsets((2, 1, 2))
    assert offsets == [(0, 0, 0), (0, 0, 1), (1, 0, 0), (1, 0, 1)]


def test_simple_cubic_replication_without_vibrations() -> None:
    cell = _cubic(4.0, FractionalAtom(znum=29, position=[0.0, 0.0, 0.0]))
    config = ExpansionConfig(n_cells=(2, 2, 2), thermal_vibrations=False)
    result = build_supercell(cell, config)

    assert result.mode == "replicate"
    assert result.n_atoms == 8
    assert result.n_removed == 0
    assert np.allclose(result.extents, [8.0, 8.0, 8.0])
    pos = result.positions()
    assert np.all(pos >= 0.0)
    expected = np.array([[x, y, z] for x in (0.0, 4.0) for y in (0.0, 4.0) for z in (0.0, 4.0)])
    assert np.allclose(_sorted_rows(pos), _sorted_rows(expected))
    assert result.rms_displacement == {}
    assert result.pass_rms == {}


def test_replication_z_tilt_expands_bounding_box() -> None:
    cell = _cubic(4.0, FractionalAtom(znum=14, position=[0.0, 0.0, 0.0]))
    config = ExpansionConfig(tilt=(0.0, 0.0, np.pi / 4.0), thermal_vibrations=False)
    result = build_supercell(cell, config)

    root2 = np.sqrt(2.0)
    assert np.allclose(result.extents, [4.0 * root2, 4.0 * root2, 4.0])
    assert result.n_atoms == 1
    assert np.allclose(result.positions()[0], [2.0 * root2, 0.0, 0.0], atol=1e-12)


def test_replication_offset_shifts_x_and_y_only() -> None:
    cell = _cubic(4.0, FractionalAtom(znum=14, position=[0.25, 0.25, 0.25]))
    base = build_supercell(cell, ExpansionConfig(thermal_vibrations=False))
    moved = build_supercell(cell, ExpansionConfig(offset=(1.5, -2.0), thermal_vibrations=False))
    assert np.allclose(moved.positions() - base.positions(), [[1.5, -2.0, 0.0]])
    assert np.allclose(moved.extents, base.extents)


def test_tilt_box_matches_replication_for_interior_sites() -> None:
    cell = _cubic(4.0, FractionalAtom(znum=8, position=[0.5, 0.5, 0.5]))
    replicated = build_supercell(cell, ExpansionConfig(n_cells=(2, 3, 2), thermal_vibrations=False))
    boxed = build_supercell(cell, ExpansionConfig(box=(8.0, 12.0, 8.0), thermal_vibrations=False))

    assert boxed.mode == "tilt_box"
    assert np.allclose(boxed.extents, [8.0, 12.0, 8.0])
    assert boxed.n_atoms == replicated.n_atoms == 12
    assert np.allclose(_sorted_rows(boxed.positions()), _sorted_rows(replicated.positions()))


def test_tilt_box_bounds_are_inclusive() -> None:
    cell = _cubic(2.0, FractionalAtom(znum=26, position=[0.0, 0.0, 0.0]))
    on_edge = build_supercell(cell, ExpansionConfig(box=(4.0, 4.0, 4.0), thermal_vibrations=False))
    inside = build_supercell(cell, ExpansionConfig(box=(3.0, 3.0, 3.0), thermal_vibrations=False))
    assert on_edge.n_atoms == 27
    assert inside.n_atoms == 8
    assert np.all(on_edge.positions() <= 4.0)


def test_tilt_box_offset_moves_lattice_before_clipping() -> None:
    cell = _cubic(2.0, FractionalAtom(znum=26, position=[0.0, 0.0, 0.0]))
    config = ExpansionConfig(box=(4.0, 4.0, 4.0), offset=(1.0, 0.0), thermal_vibrations=False)
    nmin, nmax = replica_range(cell.basis, config.box, np.array([1.0, 0.0, 0.0]))
    assert list(nmin) == [-1, 0, 0]
    assert list(nmax) == [2, 2, 2]

    result = build_supercell(cell, config)
    assert result.n_atoms == 18
    assert set(np.round(result.positions()[:, 0], 9)) == {1.0, 3.0}


def test_tilt_box_with_tilt_keeps_atoms_inside_box() -> None:
    cell = _cubic(3.0, FractionalAtom(znum=11, position=[0.0, 0.0, 0.0]))
    config = ExpansionConfig(box=(10.0, 10.0, 6.0), tilt=(0.0, 0.0, 0.3), thermal_vibrations=False)
    result = build_supercell(cell, config)
    pos = result.positions()
    assert result.n_atoms > 0
    assert np.all(pos >= -1e-9)
    assert np.all(pos <= np.array(config.box) + 1e-9)
    # z layers are unaffected by a rotation about z.
    assert set(np.round(pos[:, 2], 9)) == {0.0, 3.0, 6.0}


def test_shared_occupancy_applies_to_every_replica() -> None:
    cell = _cubic(3.0, FractionalAtom(znum=38, position=[0.1, 0.2, 0.3], occupancy=0.5))
    for seed in range(8):
        result = build_supercell(
            cell, ExpansionConfig(n_cells=(4, 4, 4), thermal_vibrations=False, seed=seed)
        )
        assert result.n_atoms in (0, 64)
        assert result.n_atoms + result.n_removed == 64


def test_per_replica_occupancy_draws_independently() -> None:
    cell = _cubic(3.0, FractionalAtom(znum=38, position=[0.1, 0.2, 0.3], occupancy=0.5))
    config = ExpansionConfig(
        n_cells=(4, 4, 4), thermal_vibrations=False, seed=11, per_replica_occupancy=True
    )
    result = build_supercell(cell, config)
    assert 0 < result.n_atoms < 64
    assert result.n_atoms + result.n_removed == 64


def test_co_sited_pair_keeps_one_atom_per_replica() -> None:
    cell = _cubic(
        4.0,
        FractionalAtom(znum=26, position=[0.5, 0.5, 0.5], occupancy=0.5),
        FractionalAtom(znum=27, position=[0.5, 0.5, 0.5], occupancy=0.5),
    )
    config = ExpansionConfig(n_cells=(3, 1, 1), thermal_vibrations=False, per_replica_occupancy=True, seed=2)
    result = build_supercell(cell, config)
    assert result.n_atoms == 3
    assert result.n_removed == 3
    assert set(result.znums()) <= {26, 27}


def test_vacancy_handling_off_keeps_every_site() -> None:
    cell = _cubic(
        4.0,
        FractionalAtom(znum=26, position=[0.5, 0.5, 0.5], occupancy=0.5),
        FractionalAtom(znum=27, position=[0.5, 0.5, 0.5], occupancy=0.2),
    )
    config = ExpansionConfig(n_cells=(2, 1, 1), thermal_vibrations=False, handle_vacancies=False)
    result = build_supercell(cell, config)
    assert result.n_atoms == 4
    assert result.n_removed == 0
    assert list(result.znums()) == [26, 27, 26, 27]


def test_dispersion_with_box_is_rejected() -> None:
    cell = _cubic(4.0, FractionalAtom(znum=14, position=[0.0, 0.0, 0.0]))
    config = ExpansionConfig(box=(4.0, 4.0, 4.0), vibration_model="dispersion")
    with pytest.raises(ConfigurationConflictError):
        build_supercell(cell, config)


def test_tilt_and_box_rejects_dispersion_generator() -> None:
    cell = _cubic(4.0, FractionalAtom(znum=14, position=[0.0, 0.0, 0.0]))
    spectrum = PhononSpectrum(
        masses=np.array([28.0]),
        kvectors=np.zeros((1, 3)),
        frequencies=np.full((1, 3), 2.0),
        eigenvectors=np.eye(3, dtype=np.complex128)[None, :, :],
    )
    rng = np.random.default_rng(0)
    gen = DisplacementGenerator(cell.basis, rng=rng, vibration_model="dispersion", spectrum=spectrum)
    with pytest.raises(ConfigurationConflictError):
        tilt_and_box(cell, ExpansionConfig(box=(4.0, 4.0, 4.0)), gen, rng)


@pytest.mark.parametrize(
    "atoms",
    [
        (),
        (FractionalAtom(znum=0, position=[0.0, 0.0, 0.0]),),
        (FractionalAtom(znum=104, position=[0.0, 0.0, 0.0]),),
        (FractionalAtom(znum=6, position=[0.0, 0.0, 0.0], occupancy=-0.1),),
        (FractionalAtom(znum=6, position=[0.0, 0.0, 0.0], occupancy=0.0),),
    ],
)
def test_bad_unit_cells_are_rejected(atoms) -> None:
    with pytest.raises(StructureInputError):
        build_supercell(_cubic(4.0, *atoms), ExpansionConfig())


def test_singular_basis_is_rejected() -> None:
    cell = UnitCell(
        basis=np.array([[1.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 0.0, 1.0]]),
        atoms=(FractionalAtom(znum=6, position=[0.0, 0.0, 0.0]),),
    )
    with pytest.raises(StructureInputError):
        build_supercell(cell, ExpansionConfig())


@pytest.mark.parametrize(
    "kwargs",
    [
        {"n_cells": (0, 1, 1)},
        {"box": (-1.0, 2.0, 2.0)},
        {"temperature": -5.0},
        {"vibration_model": "debye"},
    ],
)
def test_bad_configs_are_rejected(kwargs) -> None:
    cell = _cubic(4.0, FractionalAtom(znum=6, position=[0.0, 0.0, 0.0]))
    with pytest.raises(ConfigurationError):
        build_supercell(cell, ExpansionConfig(**kwargs))


def test_context_rejects_a_different_config() -> None:
    cell = _cubic(4.0, FractionalAtom(znum=6, position=[0.0, 0.0, 0.0]))
    context = ExpansionContext.from_config(ExpansionConfig(seed=1))
    with pytest.raises(ConfigurationError):
        build_supercell(cell, ExpansionConfig(seed=2), context=context)


def test_same_seed_reproduces_displacements() -> None:
    cell = _cubic(4.0, FractionalAtom(znum=29, position=[0.0, 0.0, 0.0], debye_waller=0.6))
    config = ExpansionConfig(n_cells=(2, 2, 2), seed=42)
    first = build_supercell(cell, config)
    second = build_supercell(cell, config)
    assert np.array_equal(first.positions(), second.positions())
    assert np.allclose(first.extents, [8.0, 8.0, 8.0])


def test_gamma_point_dispersion_moves_every_replica_equally() -> None:
    spectrum = PhononSpectrum(
        masses=np.array([28.0]),
        kvectors=np.zeros((1, 3)),
        frequencies=np.full((1, 3), 2.0),
        eigenvectors=np.eye(3, dtype=np.complex128)[None, :, :],
    )
    cell = _cubic(3.0, FractionalAtom(znum=14, position=[0.0, 0.0, 0.0]))
    config = ExpansionConfig(n_cells=(2, 2, 1), vibration_model="dispersion", seed=5)
    context = ExpansionContext.from_config(config, spectrum=spectrum)
    assert context.vibration_model == "dispersion"

    result = build_supercell(cell, context=context)
    lattice = np.array([[3.0 * i, 3.0 * j, 0.0] for i, j, _ in replica_offsets(config.n_cells)])
    shifts = result.positions() - lattice
    assert np.allclose(shifts, shifts[0], atol=1e-12)
    assert np.isclose(result.pass_rms[14], np.linalg.norm(shifts[0]), rtol=1e-9)


def test_dispersion_without_spectrum_falls_back_to_einstein(tmp_path, caplog) -> None:
    config = ExpansionConfig(vibration_model="dispersion", phonon_file=tmp_path / "missing.bin")
    with caplog.at_level("WARNING"):
        context = ExpansionContext.from_config(config)
    assert context.vibration_model == "einstein"
    assert context.spectrum is None
    warnings = [rec for rec in caplog.records if rec.levelname == "WARNING"]
    assert len(warnings) == 1
    assert "Einstein" in warnings[0].getMessage()


def test_configured_phonon_file_is_loaded_by_build_supercell(tmp_path, caplog) -> None:
    spectrum = PhononSpectrum(
        masses=np.array([28.0]),
        kvectors=np.zeros((1, 3)),
        frequencies=np.full((1, 3), 2.0),
        eigenvectors=np.eye(3, dtype=np.complex128)[None, :, :],
    )
    path = write_phonon_spectrum(tmp_path / "modes.bin", spectrum)
    cell = _cubic(3.0, FractionalAtom(znum=14, position=[0.0, 0.0, 0.0]))
    config = ExpansionConfig(n_cells=(2, 2, 1), vibration_model="dispersion", phonon_file=path, seed=5)

    with caplog.at_level("WARNING"):
        result = build_supercell(cell, config)
    assert not [rec for rec in caplog.records if rec.levelname == "WARNING"]

    lattice = np.array([[3.0 * i, 3.0 * j, 0.0] for i, j, _ in replica_offsets(config.n_cells)])
    shifts = result.positions() - lattice
    assert np.allclose(shifts, shifts[0], atol=1e-12)
    assert np.linalg.norm(shifts[0]) > 0.0


def test_running_rms_accumulates_across_passes() -> None:
    cell = _cubic(
        3.6,
        FractionalAtom(znum=29, position=[0.0, 0.0, 0.0], debye_waller=0.5),
        FractionalAtom(znum=29, position=[0.5, 0.5, 0.0], debye_waller=0.5),
    )
    config = ExpansionConfig(n_cells=(2, 2, 2), seed=7)
    context = ExpansionContext.from_config(config)

    passes = [build_supercell(cell, context=context) for _ in range(3)]
    assert context.passes == 3
    p1, p2, p3 = (res.pass_rms[29] for res in passes)

    avg1 = p1
    avg2 = np.sqrt((avg1 * avg1 + p2 * p2) / 2.0)
    avg3 = np.sqrt((2.0 * avg2 * avg2 + p3 * p3) / 3.0)
    assert np.isclose(passes[0].rms_displacement[29], avg1, rtol=1e-12)
    assert np.isclose(passes[1].rms_displacement[29], avg2, rtol=1e-12)
    assert np.isclose(passes[2].rms_displacement[29], avg3, rtol=1e-12)
    assert np.isclose(context.rms_displacement[29], avg3, rtol=1e-12)


def test_skewed_cell_positions_follow_row_vector_convention() -> None:
    basis = basis_from_parameters(3.0, 4.0, 5.0, 90.0, 90.0, 120.0)
    cell = UnitCell(basis=basis, atoms=(FractionalAtom(znum=6, position=[0.25, 0.5, 0.5]),))
    result = build_supercell(cell, ExpansionConfig(n_cells=(2, 1, 1), thermal_vibrations=False))

    corners = fractional_to_cartesian(
        np.array([[i, j, k] for i in (0, 2) for j in (0, 1) for k in (0, 1)], dtype=float), basis
    )
    box_min = corners.min(axis=0)
    assert np.allclose(box_min, [-2.0, 0.0, 0.0])
    expected = fractional_to_cartesian(np.array([[0.25, 0.5, 0.5], [1.25, 0.5, 0.5]]), basis) - box_min
    assert np.allclose(result.positions(), expected)
    assert np.allclose(result.extents, corners.max(axis=0) - box_min)
    assert all(atom.occupancy == 1.0 for atom in result.atoms)

"""JSON-configured supercell expansion with thermal displacements."""

from __future__ import annotations

import argparse
import json
import logging
import time
from dataclasses import fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from supercellpy.core.types import Supercell
from supercellpy.io import read_unit_cell
from supercellpy.modeling import ExpansionConfig, ExpansionContext, build_supercell, get_element_symbol


logger = logging.getLogger(__name__)

_TUPLE_FIELDS = {"n_cells", "box", "tilt", "offset"}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _resolve_path(base_dir: Path, path_like: str | Path) -> Path:
    p = Path(path_like)
    return p if p.is_absolute() else (base_dir / p)


def _to_builtin(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (np.floating, np.integer)):
        return value.item()
    if isinstance(value, dict):
        return {str(k): _to_builtin(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_builtin(v) for v in value]
    return value


def _load_json_config(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8-sig") as fh:
        cfg = json.load(fh)
    if not isinstance(cfg, dict):
        raise ValueError("Input config must be a JSON object.")
    return cfg


def _save_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(_to_builtin(payload), fh, indent=2, sort_keys=True)
        fh.write("\n")


def expansion_config_from_dict(section: dict[str, Any], base_dir: Path | None = None) -> ExpansionConfig:
    """Build ``ExpansionConfig`` from the ``expansion`` section of a run config."""

    known = {f.name for f in fields(ExpansionConfig)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown expansion options: {', '.join(sorted(unknown))}.")
    kwargs: dict[str, Any] = {}
    for key, value in section.items():
        if key in _TUPLE_FIELDS:
            value = tuple(value)
        if key == "phonon_file" and value is not None and base_dir is not None:
            value = _resolve_path(base_dir, value)
        kwargs[key] = value
    return ExpansionConfig(**kwargs)


def _save_atoms_data(path: Path, supercell: Supercell) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        ext = supercell.extents
        fh.write(f"# extents\t{ext[0]:.8f}\t{ext[1]:.8f}\t{ext[2]:.8f}\n")
        fh.write("# symbol\tznum\tx\ty\tz\tdebye_waller\tcharge\n")
        for atom in supercell.atoms:
            x, y, z = (float(v) for v in atom.position)
            fh.write(
                f"{get_element_symbol(atom.znum)}\t{atom.znum}\t{x:.8f}\t{y:.8f}\t{z:.8f}"
                f"\t{atom.debye_waller:.6f}\t{atom.charge:.6f}\n"
            )


def _plot_projection(path: Path, supercell: Supercell, *, title: str) -> None:
    import matplotlib.pyplot as plt

    path.parent.mkdir(parents=True, exist_ok=True)
    pos = supercell.positions()
    fig, ax = plt.subplots(figsize=(6.4, 6.4))
    ax.scatter(pos[:, 0], pos[:, 1], c=supercell.znums(), s=6, cmap="viridis")
    ax.set_xlim(0.0, float(supercell.extents[0]))
    ax.set_ylim(0.0, float(supercell.extents[1]))
    ax.set_aspect("equal")
    ax.set_xlabel(r"x ($\AA$)")
    ax.set_ylabel(r"y ($\AA$)")
    ax.set_title(title)
    fig.tight_layout()
    fig.savefig(path, dpi=220)
    plt.close(fig)


def _default_template() -> dict[str, Any]:
    return {
        "run": {
            "name": "supercell_run",
            "output_dir": "outputs/supercells",
            "passes": 1,
            "write_atoms": True,
            "write_report": True,
            "write_plot": False,
        },
        "structure": {
            "path": "unit_cell.json",
            "reader": "json",
        },
        "expansion": {
            "n_cells": [4, 4, 4],
            "box": [0.0, 0.0, 0.0],
            "tilt": [0.0, 0.0, 0.0],
            "offset": [0.0, 0.0],
            "vibration_model": "einstein",
            "thermal_vibrations": True,
            "temperature": 300.0,
            "handle_vacancies": True,
            "phonon_file": None,
            "seed": None,
            "per_replica_occupancy": False,
            "default_debye_waller": 0.0,
        },
    }


def write_input_template(path: str | Path) -> Path:
    out = Path(path)
    _save_json(out, _default_template())
    return out


def run_supercell(config_path: str | Path) -> dict[str, Any]:
    cfg_path = Path(config_path)
    cfg_dir = cfg_path.parent if cfg_path.parent != Path("") else Path(".")
    cfg = _load_json_config(cfg_path)
    run_cfg = dict(cfg.get("run", {}))
    structure_cfg = dict(cfg.get("structure", {}))
    if "path" not in structure_cfg:
        raise ValueError("structure.path is required.")

    run_name = str(run_cfg.get("name", cfg_path.stem))
    output_dir = _resolve_path(cfg_dir, run_cfg.get("output_dir", "outputs/supercells"))
    passes = int(run_cfg.get("passes", 1))
    if passes < 1:
        raise ValueError("run.passes must be at least 1.")
    write_atoms = bool(run_cfg.get("write_atoms", True))
    write_report = bool(run_cfg.get("write_report", True))
    write_plot = bool(run_cfg.get("write_plot", False))

    config = expansion_config_from_dict(dict(cfg.get("expansion", {})), base_dir=cfg_dir)
    structure_path = _resolve_path(cfg_dir, structure_cfg["path"])
    reader = str(structure_cfg.get("reader", "json"))

    started = _utc_now_iso()
    t0 = time.perf_counter()

    cell = read_unit_cell(structure_path, reader, default_debye_waller=config.default_debye_waller)
    context = ExpansionContext.from_config(config)

    supercell = None
    for ipass in range(passes):
        supercell = build_supercell(cell, context=context)
        logger.info("Pass %d/%d: %d atoms", ipass + 1, passes, supercell.n_atoms)

    outputs: dict[str, str] = {}
    if write_atoms:
        atoms_path = output_dir / run_cfg.get("atoms_filename", f"{run_name}_atoms.tsv")
        _save_atoms_data(atoms_path, supercell)
        outputs["atoms"] = str(atoms_path)
    if write_plot:
        plot_path = output_dir / run_cfg.get("plot_filename", f"{run_name}_xy.png")
        _plot_projection(plot_path, supercell, title=f"Supercell ({run_name})")
        outputs["plot"] = str(plot_path)

    runtime = time.perf_counter() - t0
    report = {
        "run": {
            "name": run_name,
            "input_config": str(cfg_path.resolve()),
            "started_utc": started,
            "finished_utc": _utc_now_iso(),
            "runtime_seconds": float(runtime),
            "passes": passes,
        },
        "structure": {
            "path": str(structure_path),
            "reader": reader,
            "title": cell.title,
            "n_sites": cell.n_sites,
            "basis": cell.basis,
        },
        "expansion": {
            "mode": supercell.mode,
            "vibration_model": context.vibration_model,
            "n_cells": list(config.n_cells),
            "box": list(config.box),
            "tilt": list(config.tilt),
            "offset": list(config.offset),
            "temperature": config.temperature,
            "seed": config.seed,
        },
        "result": {
            "n_atoms": supercell.n_atoms,
            "n_removed": supercell.n_removed,
            "extents": supercell.extents,
            "rms_displacement": {get_element_symbol(z): v for z, v in supercell.rms_displacement.items()},
            "pass_rms": {get_element_symbol(z): v for z, v in supercell.pass_rms.items()},
        },
        "outputs": outputs,
    }
    if write_report:
        report_path = output_dir / run_cfg.get("report_filename", f"{run_name}_report.json")
        _save_json(report_path, report)
        report["outputs"]["report"] = str(report_path)
    return report


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", type=Path, default=None, help="Path to JSON run configuration.")
    parser.add_argument("--write-template", type=Path, default=None, help="Write template config and exit.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ...).")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.write_template is not None:
        out = write_input_template(args.write_template)
        print(f"Wrote template: {out}")
        return
    if args.input is None:
        raise ValueError("Provide --input <config.json> or --write-template <path>.")

    report = run_supercell(args.input)
    print(f"Run complete: {report['run']['name']}")
    print(f"n_atoms={report['result']['n_atoms']}")
    print(f"runtime_seconds={report['run']['runtime_seconds']:.3f}")
    print(f"outputs={report['outputs']}")


if __name__ == "__main__":
    main()

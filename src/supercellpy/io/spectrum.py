"""Binary phonon-spectrum files for the dispersion displacement model.

Layout (little-endian, no header/version field)::

    int32   Nk                      number of k-points
    int32   Ns                      atoms in the primitive basis
    float32 mass[Ns]                amu
    Nk times:
        float32 k[3]
        3*Ns times:
            float32   omega         THz, 2 pi included
            complex64 e[3*Ns]       (re, im) float32 pairs, index 3*atom + axis
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from supercellpy.core.errors import SpectrumFormatError
from supercellpy.core.types import PhononSpectrum


logger = logging.getLogger(__name__)

_HEADER = np.dtype([("nk", "<i4"), ("ns", "<i4")])


def _kpoint_dtype(ns: int) -> np.dtype:
    nb = 3 * ns
    branch = np.dtype([("omega", "<f4"), ("vec", "<c8", (nb,))])
    return np.dtype([("k", "<f4", (3,)), ("branches", branch, (nb,))])


def expected_size(nk: int, ns: int) -> int:
    """File size in bytes for ``nk`` k-points and ``ns`` basis atoms."""

    return _HEADER.itemsize + 4 * ns + nk * _kpoint_dtype(ns).itemsize


def read_phonon_spectrum(source: Any) -> PhononSpectrum:
    """Read a spectrum file; any size mismatch raises ``SpectrumFormatError``."""

    path = Path(source)
    raw = path.read_bytes()
    if len(raw) < _HEADER.itemsize:
        raise SpectrumFormatError(f"Phonon file '{path}' is too short for its header.")
    header = np.frombuffer(raw, dtype=_HEADER, count=1)[0]
    nk = int(header["nk"])
    ns = int(header["ns"])
    if nk <= 0 or ns <= 0:
        raise SpectrumFormatError(f"Phonon file '{path}' declares Nk={nk}, Ns={ns}.")
    size = expected_size(nk, ns)
    if len(raw) != size:
        raise SpectrumFormatError(
            f"Phonon file '{path}' has {len(raw)} bytes, expected {size} for Nk={nk}, Ns={ns}."
        )

    offset = _HEADER.itemsize
    masses = np.frombuffer(raw, dtype="<f4", count=ns, offset=offset)
    offset += 4 * ns
    records = np.frombuffer(raw, dtype=_kpoint_dtype(ns), count=nk, offset=offset)
    return PhononSpectrum(
        masses=masses.astype(float),
        kvectors=records["k"].astype(float),
        frequencies=records["branches"]["omega"].astype(float),
        eigenvectors=records["branches"]["vec"].astype(np.complex128),
    )


def write_phonon_spectrum(path: str | Path, spectrum: PhononSpectrum) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    ns = spectrum.n_basis
    header = np.array([(spectrum.n_kpoints, ns)], dtype=_HEADER)
    records = np.zeros(spectrum.n_kpoints, dtype=_kpoint_dtype(ns))
    records["k"] = spectrum.kvectors
    records["branches"]["omega"] = spectrum.frequencies
    records["branches"]["vec"] = spectrum.eigenvectors
    with out.open("wb") as fh:
        fh.write(header.tobytes())
        fh.write(np.asarray(spectrum.masses, dtype="<f4").tobytes())
        fh.write(records.tobytes())
    return out


def load_phonon_spectrum_or_fallback(source: Any) -> PhononSpectrum | None:
    """Read a spectrum, or return ``None`` (Einstein fallback) if it cannot be opened.

    Format errors are not recovered.
    """

    if source is None:
        logger.warning("No phonon mode file configured, will use Einstein displacements.")
        return None
    try:
        return read_phonon_spectrum(source)
    except OSError as exc:
        logger.warning("Cannot open phonon mode file '%s' (%s), will use Einstein displacements.", source, exc)
        return None

from supercellpy.io.readers import read_json_unit_cell, read_poscar_unit_cell
from supercellpy.io.registry import get_reader, list_readers, read_unit_cell, register_reader
from supercellpy.io.spectrum import (
    expected_size,
    load_phonon_spectrum_or_fallback,
    read_phonon_spectrum,
    write_phonon_spectrum,
)


register_reader("json", read_json_unit_cell)
register_reader("poscar", read_poscar_unit_cell)

__all__ = [
    "register_reader",
    "get_reader",
    "list_readers",
    "read_unit_cell",
    "read_json_unit_cell",
    "read_poscar_unit_cell",
    "read_phonon_spectrum",
    "write_phonon_spectrum",
    "load_phonon_spectrum_or_fallback",
    "expected_size",
]

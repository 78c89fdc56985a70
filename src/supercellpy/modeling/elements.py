"""Element symbols for atomic numbers 1..103."""

from __future__ import annotations


MAX_ATOMIC_NUMBER = 103

ELEMENT_SYMBOLS: tuple[str, ...] = (
    "H", "He", "Li", "Be", "B", "C", "N", "O", "F", "Ne",
    "Na", "Mg", "Al", "Si", "P", "S", "Cl", "Ar", "K", "Ca",
    "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
    "Ga", "Ge", "As", "Se", "Br", "Kr", "Rb", "Sr", "Y", "Zr",
    "Nb", "Mo", "Tc", "Ru", "Rh", "Pd", "Ag", "Cd", "In", "Sn",
    "Sb", "Te", "I", "Xe", "Cs", "Ba", "La", "Ce", "Pr", "Nd",
    "Pm", "Sm", "Eu", "Gd", "Tb", "Dy", "Ho", "Er", "Tm", "Yb",
    "Lu", "Hf", "Ta", "W", "Re", "Os", "Ir", "Pt", "Au", "Hg",
    "Tl", "Pb", "Bi", "Po", "At", "Rn", "Fr", "Ra", "Ac", "Th",
    "Pa", "U", "Np", "Pu", "Am", "Cm", "Bk", "Cf", "Es", "Fm",
    "Md", "No", "Lr",
)

_ZNUM_BY_SYMBOL = {sym.lower(): z for z, sym in enumerate(ELEMENT_SYMBOLS, start=1)}


def get_atomic_number(symbol: str) -> int:
    """Atomic number for an element symbol (case-insensitive, ``Fe2+``-style suffixes ignored)."""

    key = "".join(ch for ch in symbol.strip() if ch.isalpha()).lower()
    try:
        return _ZNUM_BY_SYMBOL[key]
    except KeyError as exc:
        raise KeyError(f"Unknown element symbol '{symbol}'.") from exc


def get_element_symbol(znum: int) -> str:
    if znum < 1 or znum > MAX_ATOMIC_NUMBER:
        raise KeyError(f"Atomic number {znum} outside 1..{MAX_ATOMIC_NUMBER}.")
    return ELEMENT_SYMBOLS[znum - 1]

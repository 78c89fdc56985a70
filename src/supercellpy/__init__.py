from .core import (
    AbsoluteAtom,
    ConfigurationConflictError,
    ConfigurationError,
    FractionalAtom,
    PhononSpectrum,
    SpectrumFormatError,
    StructureInputError,
    Supercell,
    SupercellError,
    UnitCell,
    cell_metric,
)
from .modeling import ExpansionConfig, ExpansionContext, build_supercell

__all__ = [
    "FractionalAtom",
    "AbsoluteAtom",
    "UnitCell",
    "Supercell",
    "PhononSpectrum",
    "cell_metric",
    "ExpansionConfig",
    "ExpansionContext",
    "build_supercell",
    "SupercellError",
    "StructureInputError",
    "ConfigurationError",
    "ConfigurationConflictError",
    "SpectrumFormatError",
]

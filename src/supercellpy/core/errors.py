"""Exception kinds raised while building supercells."""

from __future__ import annotations


class SupercellError(Exception):
    """Base class for all supercell construction failures."""


class StructureInputError(SupercellError, ValueError):
    """Unit-cell data that cannot be expanded (no sites, bad atomic numbers, ...)."""


class ConfigurationError(SupercellError, ValueError):
    """Invalid expansion settings."""


class ConfigurationConflictError(ConfigurationError):
    """Settings that are individually valid but cannot be combined."""


class SpectrumFormatError(SupercellError, ValueError):
    """Phonon spectrum file whose content does not match the binary layout."""

from .config_validator import validate_expansion_config
from .structure_validator import validate_unit_cell

__all__ = ["validate_unit_cell", "validate_expansion_config"]

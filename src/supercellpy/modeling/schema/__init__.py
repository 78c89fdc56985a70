from .expansion_config import VIBRATION_MODELS, ExpansionConfig

__all__ = ["ExpansionConfig", "VIBRATION_MODELS"]

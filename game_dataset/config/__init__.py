from .app_config import AppConfig
from .log_config import LogConfig
from .compute_config import ComputeConfig
from .data_config import FixedEffectDataConfiguration

__all__ = [
    "AppConfig",
    "LogConfig",
    "ComputeConfig",
    "FixedEffectDataConfiguration",
]

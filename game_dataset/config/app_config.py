#!filepath: game_dataset/config/app_config.py
import os

import yaml
from pydantic import BaseModel, Field

from game_dataset.utils.logger import Logging, logs

from .log_config import LogConfig
from .compute_config import ComputeConfig
from .data_config import FixedEffectDataConfiguration


def project_root() -> str:
    """
    Project root derived from this file's location:
    game_dataset/config/app_config.py → game_dataset/config → game_dataset → project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    compute: ComputeConfig = Field(default_factory=ComputeConfig)
    fixed_effect: dict[str, FixedEffectDataConfiguration] = Field(default_factory=dict)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load YAML configuration.
        - defaults to <project_root>/game_dataset/config/base.yml
        - does not depend on the current working directory
        """
        if path is None:
            path = os.path.join(project_root(), "game_dataset/config/base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        return cls(**raw)

    def configure_logging(self, log: Logging = logs) -> Logging:
        """Attach the rotating file sink described by the ``log`` section."""
        log.configure(
            log_dir=self.log.dir,
            rotation=self.log.rotation,
            retention=self.log.retention,
            log_level=self.log.level,
        )
        return log

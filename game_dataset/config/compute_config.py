# game_dataset/config/compute_config.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


ExecutorMode = Literal["sequential", "thread", "process"]


class ComputeConfig(BaseModel):
    """
    ComputeConfig

    Controls how partitioned collections are split and evaluated.
    - default_parallelism : number of partitions for new source collections
    - executor            : how partition tasks run
    - max_workers         : pool size (None → min(cpu, partitions))
    - spill_dir           : directory for DISK storage levels (None → temp dir)
    """

    default_parallelism: int = Field(default=4, ge=1)
    executor: ExecutorMode = "thread"
    max_workers: Optional[int] = Field(default=None, ge=1)
    spill_dir: Optional[str] = None

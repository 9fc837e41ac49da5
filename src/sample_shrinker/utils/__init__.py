from .config import (
    RunMode,
    TargetConfig,
    build_target_config,
    load_target_config,
)
from .log import NOTICE, TRACE, configure_logging

__all__ = [
    "RunMode",
    "TargetConfig",
    "build_target_config",
    "load_target_config",
    "NOTICE",
    "TRACE",
    "configure_logging",
]

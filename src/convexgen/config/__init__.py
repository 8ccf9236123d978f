"""Config module exports."""

from convexgen.config.loader import load_config, write_default_config
from convexgen.config.models import (
    ConvexConfig,
    ConvexGenConfig,
    DataLayerConfig,
    GeneratorsConfig,
    ImportsConfig,
    LoggingConfig,
    SkipConfig,
)

__all__ = [
    "load_config",
    "write_default_config",
    "ConvexGenConfig",
    "ConvexConfig",
    "DataLayerConfig",
    "GeneratorsConfig",
    "ImportsConfig",
    "LoggingConfig",
    "SkipConfig",
]

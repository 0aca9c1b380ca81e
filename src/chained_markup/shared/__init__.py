"""Shared utilities for chained markup building.

This module provides the configuration objects, result types and logging
helpers used by the tree, adapter and command-line layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    TreeStatistics,
)
from .config import (
    BuilderConfig,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    RenderConfig,
    TreeConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "TreeStatistics",
    "BuilderConfig",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "RenderConfig",
    "TreeConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]

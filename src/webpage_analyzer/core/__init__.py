"""Core components of the web page analyzer.

This package contains the registry, configuration, document facade and the
concurrent coordinator that runs analyses.
"""

from .config_manager import ConfigManager, GlobalConfig
from .registry import AnalysisMetadata, AnalysisRegistry, registry

__all__ = [
    "ConfigManager",
    "GlobalConfig",
    "registry",
    "AnalysisMetadata",
    "AnalysisRegistry",
]

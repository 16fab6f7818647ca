"""Analysis registry with auto-discovery and a fixed launch order.

This module provides the central registry for all analysis plugins.
Analyses register themselves using the @registry.register decorator.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..analyses.protocol import AnalysisConfig, PageAnalysis

if TYPE_CHECKING:
    from .config_manager import ConfigManager

logger = logging.getLogger(__name__)


@dataclass
class AnalysisMetadata:
    """Metadata about a registered analysis."""

    analysis_id: str
    name: str
    description: str
    category: str
    order: int
    config_class: type[AnalysisConfig]
    plugin_class: type[PageAnalysis]


class AnalysisRegistry:
    """
    Central registry for all analysis plugins.

    Provides:
    - Auto-discovery via @registry.register decorator
    - Deterministic launch order (by each plugin's ``order``)
    - Plugin metadata storage

    Example:
        @registry.register
        class TitleAnalysis:
            analysis_id = "title"
            order = 10
            ...

        # Later:
        metadata = registry.get("title")
        instance = metadata.plugin_class(metadata.config_class())
    """

    def __init__(self):
        self._plugins: dict[str, AnalysisMetadata] = {}

    def register(self, plugin_class: type[PageAnalysis]) -> type[PageAnalysis]:
        """
        Register an analysis plugin.

        Can be used as decorator or called directly.

        Args:
            plugin_class: Analysis class to register

        Returns:
            Plugin class (for decorator usage)

        Raises:
            ValueError: If plugin is missing required attributes
            TypeError: If plugin has no callable run()
        """
        required_attrs = [
            "analysis_id",
            "name",
            "description",
            "category",
            "order",
            "config_class",
        ]
        for attr in required_attrs:
            if not hasattr(plugin_class, attr):
                raise ValueError(
                    f"Analysis {plugin_class.__name__} missing required attribute: {attr}"
                )

        if not callable(getattr(plugin_class, "run", None)):
            raise TypeError(f"Analysis {plugin_class.__name__} does not implement run()")

        analysis_id = plugin_class.analysis_id

        if analysis_id in self._plugins:
            logger.warning(f"Analysis '{analysis_id}' already registered, overwriting")

        self._plugins[analysis_id] = AnalysisMetadata(
            analysis_id=analysis_id,
            name=plugin_class.name,
            description=plugin_class.description,
            category=plugin_class.category,
            order=plugin_class.order,
            config_class=plugin_class.config_class,
            plugin_class=plugin_class,
        )
        logger.debug(f"Registered analysis: {analysis_id}")

        return plugin_class

    def get(self, analysis_id: str) -> AnalysisMetadata | None:
        """
        Get analysis metadata by ID.

        Args:
            analysis_id: Analysis ID

        Returns:
            Metadata if found, None otherwise
        """
        return self._plugins.get(analysis_id)

    def get_all(self) -> dict[str, AnalysisMetadata]:
        """
        Get all registered analyses in launch order.

        Returns:
            Dictionary of analysis_id -> metadata, ordered by ``order``
        """
        ordered = sorted(self._plugins.values(), key=lambda m: (m.order, m.analysis_id))
        return {m.analysis_id: m for m in ordered}

    def get_all_ids(self) -> list[str]:
        """
        Get all registered analysis IDs in launch order.

        Returns:
            List of analysis IDs
        """
        return list(self.get_all().keys())

    def validate_skip_list(self, skip_list: list[str]) -> tuple[bool, list[str]]:
        """
        Validate that all skip entries are known analyses.

        Args:
            skip_list: List of analysis IDs to validate

        Returns:
            Tuple of (all_valid, unknown_analyses)
        """
        unknown = [aid for aid in skip_list if aid not in self._plugins]
        return len(unknown) == 0, unknown

    def select(self, only: list[str] | None = None, skip: list[str] | None = None) -> list[str]:
        """
        Pick analysis IDs to run, preserving launch order.

        Args:
            only: If given, run just these analyses
            skip: Analyses to leave out

        Returns:
            Ordered list of analysis IDs

        Raises:
            ValueError: If an unknown analysis is named
        """
        for names in (only, skip):
            if names:
                valid, unknown = self.validate_skip_list(names)
                if not valid:
                    raise ValueError(f"Unknown analysis(es): {', '.join(unknown)}")

        selected = self.get_all_ids()
        if only:
            selected = [aid for aid in selected if aid in only]
        if skip:
            selected = [aid for aid in selected if aid not in skip]
        return selected

    def create_analyses(
        self,
        config_manager: "ConfigManager | None" = None,
        analysis_ids: list[str] | None = None,
    ) -> list[PageAnalysis]:
        """
        Instantiate enabled analyses with their configuration.

        Args:
            config_manager: Source of per-analysis config (defaults if None)
            analysis_ids: Analyses to create (all registered if None)

        Returns:
            Analysis instances in launch order
        """
        ids = self.get_all_ids()
        if analysis_ids is not None:
            valid, unknown = self.validate_skip_list(analysis_ids)
            if not valid:
                raise ValueError(f"Unknown analysis(es): {', '.join(unknown)}")
            ids = [aid for aid in ids if aid in analysis_ids]

        analyses: list[PageAnalysis] = []
        for analysis_id in ids:
            metadata = self._plugins[analysis_id]
            if config_manager is not None:
                config = config_manager.get_analysis_config(analysis_id)
            else:
                config = metadata.config_class()

            if not config.enabled:
                logger.debug(f"Analysis '{analysis_id}' disabled by config")
                continue

            analyses.append(metadata.plugin_class(config))

        return analyses


# Global registry instance
registry = AnalysisRegistry()

"""Configuration management for the analyzer.

This module handles loading and merging configuration from multiple TOML files
with proper precedence. Each analysis gets its own isolated config section.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_SEND_TIMEOUT,
    DEFAULT_USER_AGENT,
    DEFAULT_WEBSOCKET_HOST,
    DEFAULT_WEBSOCKET_PORT,
    DEFAULT_WINDOW_SIZE,
)
from .registry import registry

logger = logging.getLogger(__name__)


class GlobalConfig(BaseModel):
    """Global configuration (not analysis-specific)."""

    model_config = ConfigDict(extra="ignore")

    verbosity: str = Field(
        default="normal",
        description="Output verbosity: quiet, normal, verbose, debug",
    )
    color: bool = Field(default=True, description="Enable colored output")
    wait_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Max seconds to wait for all analyses of a run (unbounded if unset)",
    )
    send_timeout: float = Field(
        default=DEFAULT_SEND_TIMEOUT,
        gt=0,
        description="Max seconds a single websocket send may take",
    )


class FetchConfig(BaseModel):
    """Page fetching configuration."""

    model_config = ConfigDict(extra="ignore")

    fetcher: Literal["http", "browser"] = Field(
        default="http",
        description="How pages are obtained: plain HTTP or headless Chrome",
    )
    timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0, description="Fetch timeout in seconds")
    verify_tls: bool = Field(default=True, description="Verify TLS certificates for HTTP fetches")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User agent for HTTP requests")
    window_size: str = Field(default=DEFAULT_WINDOW_SIZE, description="Browser window size")


class ServerSettings(BaseSettings):
    """Websocket server settings, read from ANALYZER_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="ANALYZER_", extra="ignore")

    websocket_host: str = DEFAULT_WEBSOCKET_HOST
    websocket_port: int = DEFAULT_WEBSOCKET_PORT


class ConfigManager:
    """
    Manages configuration loading for all analyses.

    Loads from multiple sources with precedence (highest to lowest):
    1. CLI overrides (passed programmatically)
    2. Extra paths (e.g. --config)
    3. Local config (./.webpage-analyzer.toml)
    4. Home config (~/.webpage-analyzer.toml)
    5. User config (~/.config/webpage-analyzer/config.toml)
    6. System config (/etc/webpage-analyzer/config.toml)
    7. Package defaults

    Example TOML structure:
        [global]
        verbosity = "normal"
        wait_timeout = 30.0

        [fetch]
        fetcher = "browser"
        timeout = 15.0

        [login_form]
        keyword = "signin"
    """

    def __init__(self, strict: bool = False):
        """
        Initialize ConfigManager.

        Args:
            strict: If True, raise exceptions on config validation errors.
                   If False (default), log warnings and use defaults.
        """
        self.strict = strict
        self.global_config = GlobalConfig()
        self.fetch_config = FetchConfig()
        self.analysis_configs: dict[str, Any] = {}

    def load_from_files(self, extra_paths: list[Path] | None = None) -> None:
        """
        Load configuration from TOML files.

        Args:
            extra_paths: Additional config file paths to load
        """
        paths = self._get_config_paths()
        if extra_paths:
            paths.extend(extra_paths)

        merged_data: dict[str, Any] = {}

        for path in paths:
            if not path.exists():
                logger.debug(f"Config file not found: {path}")
                continue

            try:
                with open(path, "rb") as f:
                    file_data = tomllib.load(f)
                    merged_data = self._merge_dicts(merged_data, file_data)
                    logger.info(f"Loaded config from {path}")
            except Exception as e:
                if self.strict:
                    raise RuntimeError(f"Failed to load config from {path}: {e}") from e
                logger.warning(f"Failed to load config from {path}: {e}")

        self.load_from_dict(merged_data)

    def load_from_dict(self, data: dict[str, Any]) -> None:
        """
        Apply already-merged configuration data.

        Args:
            data: Mapping of section name -> section values
        """
        if "global" in data:
            try:
                self.global_config = GlobalConfig(**data["global"])
            except ValidationError as e:
                if self.strict:
                    raise
                logger.error(f"Invalid global config: {e}")

        if "fetch" in data:
            try:
                self.fetch_config = FetchConfig(**data["fetch"])
            except ValidationError as e:
                if self.strict:
                    raise
                logger.error(f"Invalid fetch config: {e}")

        for analysis_id, metadata in registry.get_all().items():
            if analysis_id in data:
                try:
                    self.analysis_configs[analysis_id] = metadata.config_class(**data[analysis_id])
                    logger.debug(f"Loaded config for {analysis_id}")
                except ValidationError as e:
                    if self.strict:
                        raise
                    logger.warning(f"Invalid config for {analysis_id}: {e}")
                    self.analysis_configs[analysis_id] = metadata.config_class()
            else:
                self.analysis_configs[analysis_id] = metadata.config_class()
                logger.debug(f"Using default config for {analysis_id}")

    def get_analysis_config(self, analysis_id: str) -> Any:
        """
        Get configuration for a specific analysis.

        Args:
            analysis_id: Analysis ID

        Returns:
            Analysis configuration (Pydantic model instance)

        Raises:
            ValueError: If the analysis is unknown
        """
        if analysis_id not in self.analysis_configs:
            metadata = registry.get(analysis_id)
            if not metadata:
                raise ValueError(f"Unknown analysis: {analysis_id}")
            self.analysis_configs[analysis_id] = metadata.config_class()

        return self.analysis_configs[analysis_id]

    def merge_cli_overrides(self, section: str, overrides: dict[str, Any]) -> None:
        """
        Merge CLI overrides into a config section.

        Args:
            section: "global", "fetch" or an analysis ID
            overrides: Dictionary of config field overrides (None values ignored)
        """
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if not overrides:
            return

        try:
            if section == "global":
                self.global_config = GlobalConfig(
                    **{**self.global_config.model_dump(), **overrides}
                )
            elif section == "fetch":
                self.fetch_config = FetchConfig(**{**self.fetch_config.model_dump(), **overrides})
            else:
                current = self.get_analysis_config(section)
                metadata = registry.get(section)
                self.analysis_configs[section] = metadata.config_class(
                    **{**current.model_dump(), **overrides}
                )
        except ValidationError as e:
            if self.strict:
                raise
            logger.error(f"Invalid CLI overrides for {section}: {e}")

    def export_to_toml(self, path: Path) -> None:
        """
        Export current config to TOML file.

        Args:
            path: Output file path
        """
        import tomli_w

        data: dict[str, Any] = {
            "global": self.global_config.model_dump(exclude_none=True),
            "fetch": self.fetch_config.model_dump(exclude_none=True),
        }
        for analysis_id, config in self.analysis_configs.items():
            data[analysis_id] = config.model_dump(exclude_none=True)

        with open(path, "wb") as f:
            tomli_w.dump(data, f)
        logger.info(f"Exported config to {path}")

    def create_default_config_file(self, path: Path) -> None:
        """
        Create a default config file with all analyses.

        Args:
            path: Output file path
        """
        for analysis_id, metadata in registry.get_all().items():
            if analysis_id not in self.analysis_configs:
                self.analysis_configs[analysis_id] = metadata.config_class()

        self.export_to_toml(path)
        logger.info(f"Created default config file: {path}")

    @staticmethod
    def _get_config_paths() -> list[Path]:
        """
        Get configuration file paths in precedence order (lowest to highest).

        Returns:
            List of config file paths
        """
        package_dir = Path(__file__).parent.parent
        return [
            package_dir / "default_config.toml",
            Path("/etc/webpage-analyzer/config.toml"),
            Path.home() / ".config" / "webpage-analyzer" / "config.toml",
            Path.home() / ".webpage-analyzer.toml",
            Path.cwd() / ".webpage-analyzer.toml",
        ]

    @staticmethod
    def _merge_dicts(base: dict, override: dict) -> dict:
        """
        Recursively merge dictionaries.

        Args:
            base: Base dictionary
            override: Dictionary to merge in (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigManager._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

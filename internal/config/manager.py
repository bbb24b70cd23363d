"""
Configuration management for Nominatim client applications.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils
from lib.nominatim import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, IdentificationMethod

logger = logging.getLogger(__name__)


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholder with actual value.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in configuration values.

    Strings, dictionaries and lists are processed, other values are returned unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Manages configuration loading for the Nominatim client, dood!

    Example config:
        [nominatim]
        user-agent = "Example Application Name"
        # referer = "https://example.com/"
        base-url = "https://nominatim.openstreetmap.org/"
        timeout = 10

        [logging]
        level = "INFO"
        console = true
    """

    def __init__(
        self,
        configPath: str = "nominatim.toml",
        configDirs: Optional[List[str]] = None,
        dotEnvFile: str = ".env",
        required: bool = True,
    ):
        """Initialize ConfigManager.

        Args:
            configPath: Main TOML config file
            configDirs: Directories to search for additional .toml files recursively
            dotEnvFile: Optional dotenv file to load into environment first
            required: Exit if there is neither config file nor config directories
        """
        self.config_path = configPath
        self.config_dirs = configDirs or []
        self.required = required
        utils.load_dotenv(path=dotEnvFile)
        self.config: Dict[str, Any] = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, dood!"""
        dirPath = Path(directory)

        if not dirPath.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping, dood!")
            return []

        if not dirPath.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping, dood!")
            return []

        tomlFiles = [p for p in dirPath.rglob("*.toml") if p.is_file()]
        for tomlFile in tomlFiles:
            logger.debug(f"Found config file: {tomlFile}")

        return sorted(tomlFiles)  # Sort for consistent ordering

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, dood!"""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """Load configuration from TOML file and optional config directories.

        Files from config directories are merged over the main config file in
        sorted order. Broken files in config directories are skipped.

        Raises:
            SystemExit: If config is required and there is nothing to load,
                        or if the main config file can't be parsed
        """
        configFile = Path(self.config_path)
        hasConfigFile = configFile.is_file()
        if not hasConfigFile and not self.config_dirs:
            if self.required:
                logger.error(f"Configuration file {self.config_path} not found!")
                sys.exit(1)
            logger.debug(f"Configuration file {self.config_path} not found, using defaults")
            return {}

        config: Dict[str, Any] = {}
        if hasConfigFile:
            try:
                with open(configFile, "rb") as f:
                    config = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                logger.error(f"Failed to load configuration {self.config_path}: {e}")
                sys.exit(1)
            logger.info(f"Loaded main config from {self.config_path}")

        for configDir in self.config_dirs:
            tomlFiles = self._findTomlFilesRecursive(configDir)
            logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")

            for tomlFile in tomlFiles:
                try:
                    with open(tomlFile, "rb") as f:
                        dirConfig = tomli.load(f)
                except (OSError, tomli.TOMLDecodeError) as e:
                    logger.error(f"Failed to load config file {tomlFile}: {e}")
                    continue

                config = self._mergeConfigs(config, dirConfig)
                logger.info(f"Merged config from {tomlFile}")

        logger.debug("Configuration loaded and merged successfully, dood!")
        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getNominatimConfig(self) -> Dict[str, Any]:
        """Get Nominatim client configuration."""
        return self.get("nominatim", {})

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getBaseUrl(self) -> str:
        """Get Nominatim server base URL (default: public OSM instance)."""
        return str(self.getNominatimConfig().get("base-url", DEFAULT_BASE_URL))

    def getTimeout(self) -> float:
        """Get request timeout in seconds (default: 10).

        Raises:
            SystemExit: If configured timeout is not a number
        """
        timeout = self.getNominatimConfig().get("timeout", DEFAULT_TIMEOUT)
        try:
            return float(timeout)
        except (TypeError, ValueError):
            logger.error(f"Invalid nominatim.timeout in configuration: {timeout!r}")
            sys.exit(1)

    def getIdentificationMethod(self) -> IdentificationMethod:
        """
        Get identification method from configuration.

        ``user-agent`` is used if both ``user-agent`` and ``referer`` are set.

        Returns:
            IdentificationMethod for the client

        Raises:
            SystemExit: If neither user-agent nor referer is configured
            InvalidHeaderValueError: If configured value can't be sent as header
        """
        nominatimConfig = self.getNominatimConfig()
        userAgent = nominatimConfig.get("user-agent", "")
        referer = nominatimConfig.get("referer", "")

        if userAgent:
            return IdentificationMethod.fromUserAgent(userAgent)
        if referer:
            return IdentificationMethod.fromReferer(referer)

        logger.error("Please set nominatim.user-agent or nominatim.referer in configuration!")
        sys.exit(1)

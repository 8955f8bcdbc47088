"""
Configuration loader for the Bitso client.

Loads configuration from:
1. YAML file (config/config.yaml)
2. Environment variables (BITSO_* prefix)
3. .env file (via python-dotenv)

Environment variables override YAML values.
API credentials MUST be set via environment (never in YAML).
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from config.settings import (
    BitsoConfig,
    ClientConfig,
    LoggingConfig,
    WebSocketConfig,
)
from bitso.api.models.types import CurrencyCatalog

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Loads and validates client configuration.

    Configuration priority (highest to lowest):
    1. Environment variables (BITSO_*)
    2. YAML config file
    3. Default values in dataclasses
    """

    ENV_PREFIX = "BITSO_"

    def __init__(
        self,
        config_path: Optional[str] = None,
        env_file: Optional[str] = None,
    ):
        """
        Initialize config loader.

        Args:
            config_path: Path to YAML config file. If None, uses config/config.yaml
            env_file: Path to .env file. If None, uses .env in the working directory
        """
        self._config_path = Path(config_path) if config_path else Path("config/config.yaml")
        self._env_file = Path(env_file) if env_file else Path(".env")

        if self._env_file.exists():
            load_dotenv(self._env_file)
            logger.debug(f"Loaded environment from {self._env_file}")

    def load(self) -> ClientConfig:
        """
        Load complete client configuration.

        Returns:
            ClientConfig with all settings populated
        """
        yaml_config = self._load_yaml()
        config = self._build_config(yaml_config)

        for error in config.validate():
            logger.warning(f"Config warning: {error}")

        return config

    def _load_yaml(self) -> Dict[str, Any]:
        """Load YAML configuration file."""
        if not self._config_path.exists():
            logger.warning(f"Config file not found: {self._config_path}, using defaults")
            return {}

        with open(self._config_path) as f:
            config = yaml.safe_load(f) or {}

        logger.info(f"Loaded config from {self._config_path}")
        return config

    def _get_env(self, key: str, default: Any = None) -> Any:
        """
        Get environment variable with BITSO_ prefix.

        The value is converted to the type of the default.
        """
        value = os.environ.get(f"{self.ENV_PREFIX}{key}")

        if value is None:
            return default

        if isinstance(default, bool):
            return value.lower() in ("true", "1", "yes")
        elif isinstance(default, int):
            return int(value)
        elif isinstance(default, float):
            return float(value)

        return value

    def _get_required_env(self, key: str) -> str:
        """
        Get required environment variable.

        Raises:
            ValueError: If variable not set
        """
        full_key = f"{self.ENV_PREFIX}{key}"
        value = os.environ.get(full_key)

        if not value:
            raise ValueError(
                f"Required environment variable {full_key} not set. "
                f"Set it in .env file or environment."
            )

        return value

    def _build_config(self, yaml_config: Dict[str, Any]) -> ClientConfig:
        """Build ClientConfig from YAML and environment."""
        api_yaml = yaml_config.get("api") or {}
        bitso = BitsoConfig(
            rest_base_url=self._get_env(
                "API_BASE_URL",
                api_yaml.get("rest_base_url", "https://bitso.com/api"),
            ),
            api_version=api_yaml.get("api_version", "v3"),
            request_timeout=self._get_env(
                "REQUEST_TIMEOUT",
                float(api_yaml.get("request_timeout", 30.0)),
            ),
            burst_rate=self._get_env(
                "BURST_RATE",
                float(api_yaml.get("burst_rate", 0.0)),
            ),
        )

        ws_yaml = yaml_config.get("websocket") or {}
        websocket = WebSocketConfig(
            url=self._get_env("WS_URL", ws_yaml.get("url", "wss://ws.bitso.com")),
            message_queue_size=ws_yaml.get("message_queue_size", 8),
            open_timeout=ws_yaml.get("open_timeout", 10.0),
            close_timeout=ws_yaml.get("close_timeout", 10.0),
            ping_interval=ws_yaml.get("ping_interval", 20.0),
        )

        logging_yaml = yaml_config.get("logging") or {}
        log_config = LoggingConfig(
            level=self._get_env("LOG_LEVEL", logging_yaml.get("level", "INFO")),
            file_path=self._get_env("LOG_FILE", logging_yaml.get("file_path")),
        )

        return ClientConfig(
            bitso=bitso,
            websocket=websocket,
            logging=log_config,
            currency_catalog_path=yaml_config.get(
                "currency_catalog_path", "config/currencies.yaml"
            ),
        )

    def get_api_credentials(self) -> Tuple[str, str]:
        """
        Get API credentials from environment.

        API credentials MUST be set via environment variables,
        never stored in config files.

        Returns:
            Tuple of (api_key, api_secret)

        Raises:
            ValueError: If credentials not set
        """
        api_key = self._get_required_env("API_KEY")
        api_secret = self._get_required_env("API_SECRET")
        return api_key, api_secret

    @staticmethod
    def load_currency_catalog(path: str = "config/currencies.yaml") -> CurrencyCatalog:
        """
        Load the versioned currency list.

        Expected format:
            version: "2024.1"
            currencies: [btc, mxn, ...]

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is missing the version or currency list
        """
        catalog_path = Path(path)
        if not catalog_path.exists():
            raise FileNotFoundError(f"Currency catalog not found: {path}")

        with open(catalog_path) as f:
            data = yaml.safe_load(f) or {}

        version = data.get("version")
        codes = data.get("currencies")
        if version is None or not isinstance(codes, list):
            raise ValueError(
                f"Currency catalog {path} needs 'version' and a 'currencies' list"
            )

        catalog = CurrencyCatalog.from_codes(version, codes)
        logger.info(f"Loaded {len(catalog)} currencies (catalog {catalog.version})")
        return catalog

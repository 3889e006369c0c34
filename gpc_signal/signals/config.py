"""Configuration for Global Privacy Control signal resolution.

Options are accepted under the documented ``experimental_gpc_*`` names used
by page initialisation scripts, under their short camelCase names, and under
the Python field names. Loading from files and environment variables follows
the usual precedence: CLI overrides > environment > config file > defaults.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from .parsing import string_to_boolean

logger = logging.getLogger(__name__)


DEFAULT_BODY_CLASS_PREFIX = "global-privacy-control_signal-"
DEFAULT_COOKIE_NAME = "_globalPrivacyControl"
DEFAULT_DNT_COOKIE_NAME = "_doNotTrack"


# Field name -> accepted option keys (documented external name first)
OPTION_ALIASES: Dict[str, List[str]] = {
    "support": ["experimental_gpc_support", "support"],
    "alter_body_class": ["experimental_gpc_alterBodyClass", "alterBodyClass", "alter_body_class"],
    "body_class_prefix": ["experimental_gpc_bodyClassPrefix", "bodyClassPrefix", "body_class_prefix"],
    "include_dnt_support": [
        "experimental_gpc_includeDNTSupport", "includeDNTSupport", "include_dnt_support"
    ],
    "cookie_name": ["experimental_gpc_cookieNameOverride", "cookieName", "cookie_name"],
    "dnt_cookie_name": [
        "experimental_gpc_DNTCookieNameOverride", "dntCookieName", "dnt_cookie_name"
    ],
}

OPTION_KEYS: Dict[str, str] = {
    alias: field_name
    for field_name, aliases in OPTION_ALIASES.items()
    for alias in aliases
}

BOOLEAN_FIELDS = ("support", "alter_body_class", "include_dnt_support")


class SignalConfig(BaseModel):
    """Settings that drive GPC/DNT resolution and body class syncing."""

    support: bool = Field(default=False, description="Enable Global Privacy Control checks")
    alter_body_class: bool = Field(default=True, description="Toggle a signal class on the body")
    body_class_prefix: str = Field(
        default=DEFAULT_BODY_CLASS_PREFIX,
        description="Prefix for the body class, suffixed with true/false"
    )
    include_dnt_support: bool = Field(
        default=False,
        description="Fall back to the legacy Do Not Track signal"
    )
    cookie_name: str = Field(default=DEFAULT_COOKIE_NAME, description="GPC fallback cookie")
    dnt_cookie_name: str = Field(default=DEFAULT_DNT_COOKIE_NAME, description="DNT fallback cookie")

    def merge(self, options: Optional[Mapping[str, Any]] = None) -> "SignalConfig":
        """Return a copy with the recognised options applied.

        Keys that are unknown or whose value is None are ignored, every
        other field keeps its current value. Values are not validated.
        """
        updates = normalize_options(options)
        if not updates:
            return self.model_copy()
        return self.model_copy(update=updates)

    def to_options(self) -> Dict[str, Any]:
        """Export as documented ``experimental_gpc_*`` options."""
        return {
            OPTION_ALIASES[field_name][0]: getattr(self, field_name)
            for field_name in OPTION_ALIASES
        }


def normalize_options(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Map option keys to field names, dropping unknown keys and None values."""
    if not options:
        return {}

    normalized = {}
    for key, value in options.items():
        field_name = OPTION_KEYS.get(key)
        if field_name is None or value is None:
            continue
        normalized[field_name] = value
    return normalized


def unknown_option_keys(options: Optional[Mapping[str, Any]]) -> List[str]:
    """List option keys that would be ignored by ``SignalConfig.merge``."""
    if not options:
        return []
    return [key for key in options if key not in OPTION_KEYS]


class SignalConfigLoader:
    """Loads and merges signal configuration from multiple sources."""

    ENV_PREFIX = "GPC_SIGNAL_"

    # Searched in order
    DEFAULT_CONFIG_FILES = [
        "gpc-signal.yaml",
        "gpc-signal.yml",
        ".gpc-signal.yaml",
        ".gpc-signal.yml",
        "gpc-signal.json",
        ".gpc-signal.json",
    ]

    # Optional top-level section holding the options
    SECTION_KEY = "gpc"

    def __init__(self):
        self.loaded_sources: List[str] = []

    def load_configuration(
        self,
        config_file: Optional[Path] = None,
        cli_overrides: Optional[Mapping[str, Any]] = None,
        search_paths: Optional[List[Path]] = None
    ) -> SignalConfig:
        """Load configuration with proper precedence.

        Args:
            config_file: Explicitly specified config file
            cli_overrides: Option overrides from the command line
            search_paths: Directories searched when no file is given

        Returns:
            Merged and validated configuration

        Raises:
            FileNotFoundError: If ``config_file`` does not exist.
            ValueError: If a config file cannot be parsed.
        """
        self.loaded_sources = ["defaults"]
        data: Dict[str, Any] = {}

        if config_file is None:
            discovered = self._discover_config_file(search_paths or [Path.cwd()])
            if discovered is not None:
                path, options = discovered
                data.update(normalize_options(options))
                self.loaded_sources.append(f"auto-discovered: {path}")
        else:
            if not config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_file}")
            data.update(normalize_options(self.load_config_file(config_file)))
            self.loaded_sources.append(f"config file: {config_file}")

        env_options = self._load_environment_variables()
        if env_options:
            data.update(env_options)
            self.loaded_sources.append("environment variables")

        overrides = normalize_options(cli_overrides)
        if overrides:
            data.update(overrides)
            self.loaded_sources.append("CLI flags")

        config = SignalConfig(**data)
        logger.info(f"Loaded signal configuration from: {', '.join(self.loaded_sources)}")
        return config

    def load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Read the option mapping stored in a YAML or JSON file."""
        suffix = config_path.suffix.lower()
        try:
            content = config_path.read_text(encoding="utf-8")
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif suffix == ".json":
                data = json.loads(content)
            else:
                raise ValueError(f"Unsupported config file format: {config_path.suffix}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")

        section = data.get(self.SECTION_KEY)
        if isinstance(section, dict):
            return section
        return data

    def _discover_config_file(self, search_paths: List[Path]):
        for search_path in search_paths:
            for filename in self.DEFAULT_CONFIG_FILES:
                config_path = search_path / filename
                if config_path.is_file():
                    return config_path, self.load_config_file(config_path)
        return None

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Read ``GPC_SIGNAL_<FIELD>`` variables."""
        options = {}
        for field_name in OPTION_ALIASES:
            env_value = os.getenv(f"{self.ENV_PREFIX}{field_name.upper()}")
            if env_value is None:
                continue
            if field_name in BOOLEAN_FIELDS:
                options[field_name] = string_to_boolean(env_value)
            else:
                options[field_name] = env_value
        return options


def load_signal_config(
    config_file: Optional[Path] = None,
    cli_overrides: Optional[Mapping[str, Any]] = None,
    search_paths: Optional[List[Path]] = None
) -> SignalConfig:
    """Convenience function to load configuration."""
    loader = SignalConfigLoader()
    return loader.load_configuration(config_file, cli_overrides, search_paths)


def validate_config_file(config_path: Path) -> List[str]:
    """Validate a signal config file.

    Returns:
        List of issues; unknown keys are prefixed with ``warning:``.
    """
    loader = SignalConfigLoader()
    try:
        options = loader.load_config_file(config_path)
        SignalConfig(**normalize_options(options))
    except Exception as e:
        return [f"error: {e}"]

    return [f"warning: unknown option '{key}' is ignored" for key in unknown_option_keys(options)]


def format_configuration(config: SignalConfig, format: str = "yaml") -> str:
    """Render configuration as documented options for display."""
    options = config.to_options()
    if format.lower() == "json":
        return json.dumps(options, indent=2)
    return yaml.safe_dump(options, default_flow_style=False, sort_keys=False)

"""Configuration loading and validation for docroutes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from scripts.docroutes.errors import ConfigError
from scripts.docroutes.groups import GROUPS_PATH
from scripts.docroutes.namespace import LIBRARY_PATH
from scripts.docroutes.resolver import UNIVERSE_URL
from scripts.docroutes.scanner import DOCS_BASE


# Default config file, looked up in the working directory
DEFAULT_CONFIG_PATH = "docroutes.yaml"

URL_PATTERN = re.compile(r"^https?://[^\s/]+")


@dataclass
class DocsConfig:
    """Complete docroutes configuration."""

    docs_base: str = DOCS_BASE
    not_found_page: str = "404.html"
    community_url: Optional[str] = None
    universe_url: str = UNIVERSE_URL
    library_path: str = str(LIBRARY_PATH)
    groups_path: str = str(GROUPS_PATH)

    @property
    def not_found_url(self) -> str:
        return self.docs_base + self.not_found_page


def get_default_config() -> DocsConfig:
    """Return the default configuration (bundled data, public docs)."""
    return DocsConfig()


def _validate_url(value: Any, key: str, config_file: Optional[str]) -> None:
    if not isinstance(value, str) or not URL_PATTERN.match(value):
        raise ConfigError(
            f"'{key}' must be an absolute http(s) URL, got {value!r}",
            file=config_file,
        )


def validate_config(config: DocsConfig, config_file: Optional[str] = None) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If configuration is invalid.
    """
    _validate_url(config.docs_base, "docs_base", config_file)
    if not config.docs_base.endswith("/"):
        raise ConfigError(
            f"'docs_base' must end with '/', got {config.docs_base!r}",
            file=config_file,
        )
    if not isinstance(config.not_found_page, str) or not config.not_found_page:
        raise ConfigError("'not_found_page' must be a non-empty string", file=config_file)

    _validate_url(config.universe_url, "universe_url", config_file)
    if config.community_url is not None:
        _validate_url(config.community_url, "community_url", config_file)

    for key in ("library_path", "groups_path"):
        value = getattr(config, key)
        if not isinstance(value, str) or not Path(value).is_file():
            raise ConfigError(f"'{key}' does not point to a file: {value!r}", file=config_file)


def load_config(config_path: Path | str) -> DocsConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the docroutes.yaml file.

    Returns:
        DocsConfig with loaded values merged with defaults.

    Raises:
        ConfigError: If the file exists but contains invalid configuration.
    """
    config_path = Path(config_path)
    config_file = str(config_path)

    # Start with defaults
    defaults = get_default_config()

    if not config_path.exists():
        return defaults

    try:
        content = config_path.read_text(encoding="utf-8")
        if not content.strip():
            return defaults

        data = yaml.safe_load(content)
        if not data:
            return defaults
        if not isinstance(data, dict):
            raise ConfigError(
                "Top-level docroutes config must be a mapping",
                file=config_file,
            )

    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", file=config_file)

    # Resource paths are relative to the config file
    def _resource(key: str, default: str) -> str:
        value = data.get(key)
        if value is None:
            return default
        path = Path(str(value))
        if not path.is_absolute():
            path = config_path.parent / path
        return str(path)

    config = DocsConfig(
        docs_base=data.get("docs_base", defaults.docs_base),
        not_found_page=data.get("not_found_page", defaults.not_found_page),
        community_url=data.get("community_url", defaults.community_url),
        universe_url=data.get("universe_url", defaults.universe_url),
        library_path=_resource("library_path", defaults.library_path),
        groups_path=_resource("groups_path", defaults.groups_path),
    )

    validate_config(config, config_file)

    return config

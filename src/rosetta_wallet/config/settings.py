"""Wallet configuration — pydantic-settings with an optional YAML base file.

Precedence, highest first:
1. Keyword arguments and ``ROSETTAWALLET_*`` variables (nested with ``__``,
   e.g. ``ROSETTAWALLET_ROSETTA__URL``)
2. The YAML file named by ``config_path`` / ``ROSETTAWALLET_CONFIG_PATH``
3. Field defaults
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class LogLevel(enum.StrEnum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ---------------------------------------------------------------------------
# Endpoint and currency sections
# ---------------------------------------------------------------------------


class RosettaConfig(BaseSettings):
    """Rosetta API endpoint settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROSETTAWALLET_ROSETTA__",
        case_sensitive=False,
    )

    url: str = "https://api.lunar.dev/v1"
    api_key: str = ""
    blockchain: str = "Bitcoin"
    network: str = "Testnet3"
    timeout: float = 30.0
    include_mempool: bool = False

    @property
    def network_identifier(self) -> dict[str, str]:
        """Rosetta ``network_identifier`` object sent with every request."""
        return {"blockchain": self.blockchain, "network": self.network}


class CurrencyConfig(BaseSettings):
    """Currency transferred by the wallet."""

    model_config = SettingsConfigDict(
        env_prefix="ROSETTAWALLET_CURRENCY__",
        case_sensitive=False,
    )

    symbol: str = "tBTC"
    decimals: int = Field(default=8, ge=0)


# ---------------------------------------------------------------------------
# YAML layering and the root config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML mapping from ``path``.

    Missing files, empty files and documents that are not a mapping all
    yield ``{}``.
    """
    source = Path(path)
    if not source.is_file():
        return {}
    with source.open(encoding="utf-8") as fh:
        loaded = yaml.safe_load(fh)
    return loaded if isinstance(loaded, dict) else {}


def _overlay(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated with ``overrides``, merging nested mappings.

    ``None`` overrides are skipped.
    """
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _overlay(current, value)
        else:
            merged[key] = value
    return merged


class AppConfig(BaseSettings):
    """Top-level wallet configuration.

    Values come from keyword arguments and ``ROSETTAWALLET_`` environment
    variables, laid over an optional YAML file and the defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROSETTAWALLET_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: LogLevel = LogLevel.INFO
    explorer_url: str = "https://blockstream.info/testnet/tx"
    config_path: str = ""

    rosetta: RosettaConfig = Field(default_factory=RosettaConfig)
    currency: CurrencyConfig = Field(default_factory=CurrencyConfig)

    @model_validator(mode="before")
    @classmethod
    def _apply_yaml_file(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Use the file named by ``config_path`` as the base layer."""
        path = values.get("config_path")
        if not path:
            return values
        return _overlay(_load_yaml(path), values)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Load configuration from a YAML file (env vars still win)."""
        return cls(config_path=str(path))

    @property
    def effective_log_level(self) -> str:
        """Log level name, forced to DEBUG when ``debug`` is set."""
        return LogLevel.DEBUG.value if self.debug else self.log_level.value

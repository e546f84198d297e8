"""Configuration system for the Sonic plugin.

Settings are read once, from whatever source the host offers (a mapping, the
runtime's ``get_setting`` accessor, or a YAML file), into a frozen
:class:`SonicSettings` value that is then passed explicitly to every action
and provider.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sonic_plugin.errors import ConfigurationError, MissingPrivateKeyError
from sonic_plugin.wallet.chains import MAINNET_RPC_URL

PRIVATE_KEY_SETTING = "SONIC_WALLET_PRIVATE_KEY"
RPC_URL_SETTING = "SONIC_RPC_URL"
WALLET_ADDRESS_SETTING = "SONIC_WALLET_ADDRESS"
# Setting name used by the standalone configuration check.
CHECK_PRIVATE_KEY_SETTING = "SONIC_PRIVATE_KEY"


# ---------------------------------------------------------------------------
# Environment-variable expansion helper
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def _expand_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with their environment values.

    If the variable is not set the placeholder is left as-is so that
    validation can catch it later.
    """

    def _replace(match: re.Match) -> str:
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    return _ENV_VAR_RE.sub(_replace, value)


def _expand_env_recursive(obj: object) -> object:
    """Walk an arbitrary nested structure and expand env vars in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _expand_env_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_recursive(item) for item in obj]
    return obj


# ---------------------------------------------------------------------------
# Pydantic v2 models
# ---------------------------------------------------------------------------


class SettingsSource(Protocol):
    """Anything exposing the host runtime's settings accessor."""

    def get_setting(self, key: str) -> Optional[str]: ...


class WalletConfig(BaseModel):
    """Inputs needed to build one wallet handle."""

    model_config = ConfigDict(frozen=True)

    private_key: str = Field(repr=False)
    rpc_url: str = MAINNET_RPC_URL


class SonicSettings(BaseModel):
    """All plugin settings, keyed by their host setting names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    private_key: str = Field(default="", alias=PRIVATE_KEY_SETTING, repr=False)
    rpc_url: str = Field(default=MAINNET_RPC_URL, alias=RPC_URL_SETTING)
    wallet_address: str = Field(default="", alias=WALLET_ADDRESS_SETTING)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> SonicSettings:
        """Build settings from a mapping of setting names to values.

        ``None`` and blank values are treated as unset, so the RPC URL falls
        back to mainnet.
        """
        cleaned = {
            key: str(value).strip()
            for key, value in values.items()
            if value is not None and str(value).strip()
        }
        try:
            return cls.model_validate(cleaned)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid Sonic settings: {exc}", exc) from exc

    @classmethod
    def from_runtime(cls, runtime: SettingsSource) -> SonicSettings:
        """Read every plugin setting from the host runtime once."""
        return cls.from_mapping(
            {
                name: runtime.get_setting(name)
                for name in (PRIVATE_KEY_SETTING, RPC_URL_SETTING, WALLET_ADDRESS_SETTING)
            }
        )

    @property
    def has_private_key(self) -> bool:
        return bool(self.private_key)

    def wallet_config(self) -> WalletConfig:
        """Return the wallet inputs. Raises if no signing key is configured."""
        if not self.has_private_key:
            raise MissingPrivateKeyError(PRIVATE_KEY_SETTING)
        return WalletConfig(private_key=self.private_key, rpc_url=self.rpc_url)


class SonicEnvironment(BaseModel):
    """Settings required by the standalone configuration check."""

    wallet_address: str = Field(alias=WALLET_ADDRESS_SETTING, min_length=1)
    private_key: str = Field(alias=CHECK_PRIVATE_KEY_SETTING, min_length=1, repr=False)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def read_settings_file(path: Path) -> dict[str, Any]:
    """Read a YAML settings file into a flat mapping.

    Environment variable placeholders (``${VAR}``) are expanded.
    """
    raw_text = path.read_text(encoding="utf-8")
    raw_data = yaml.safe_load(raw_text) or {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")
    return _expand_env_recursive(raw_data)


def load_settings(path: Path) -> SonicSettings:
    """Load plugin settings from a YAML file of setting names (``SONIC_RPC_URL`` etc.)."""
    return SonicSettings.from_mapping(read_settings_file(path))


def validate_sonic_config(
    settings: Mapping[str, Any] | SettingsSource,
    environ: Mapping[str, str] | None = None,
) -> SonicEnvironment:
    """Check that the wallet address and private key are both available.

    Each value is looked up in *settings* first and falls back to the
    process environment (or *environ*).

    Raises
    ------
    ConfigurationError
        Listing every missing setting.
    """
    env = os.environ if environ is None else environ

    def _lookup(name: str) -> str:
        if isinstance(settings, Mapping):
            value = settings.get(name)
        else:
            value = settings.get_setting(name)
        return value or env.get(name, "") or ""

    values = {
        WALLET_ADDRESS_SETTING: _lookup(WALLET_ADDRESS_SETTING),
        CHECK_PRIVATE_KEY_SETTING: _lookup(CHECK_PRIVATE_KEY_SETTING),
    }
    try:
        return SonicEnvironment.model_validate(values)
    except ValidationError as exc:
        missing = [
            f"{err['loc'][0]} is required" for err in exc.errors() if err.get("loc")
        ]
        raise ConfigurationError(
            "Invalid Sonic configuration: " + "\n".join(missing), exc
        ) from exc

"""Sonic blockchain plugin for conversational agent runtimes.

Lets an agent read native S balances and send native S transfers on the
Sonic mainnet or the Blaze testnet.
"""

from sonic_plugin.config import SonicSettings, load_settings, validate_sonic_config
from sonic_plugin.plugin import Plugin, create_sonic_plugin

__all__ = [
    "Plugin",
    "SonicSettings",
    "create_sonic_plugin",
    "load_settings",
    "validate_sonic_config",
]

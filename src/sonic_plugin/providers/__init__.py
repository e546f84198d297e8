"""Context providers exposed to the host runtime."""

from sonic_plugin.providers.wallet_status import SonicWalletStatusProvider

__all__ = ["SonicWalletStatusProvider"]

"""Exception hierarchy for the Sonic plugin.

Every error raised inside the plugin derives from :class:`SonicPluginError`.
Actions and providers catch these at their boundary and turn them into a
callback payload; nothing in this hierarchy is ever retried.
"""

from __future__ import annotations


class SonicPluginError(Exception):
    """Base class for all plugin errors.

    Parameters
    ----------
    message:
        Human-readable description, surfaced to the user as-is.
    cause:
        The underlying exception, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ConfigurationError(SonicPluginError):
    """Missing or invalid settings. Always fatal to the invocation."""


class MissingPrivateKeyError(ConfigurationError):
    def __init__(self, setting: str = "SONIC_WALLET_PRIVATE_KEY"):
        super().__init__(f"{setting} is not configured")
        self.setting = setting


class KeyFormatError(ConfigurationError):
    """The private key is not 32 bytes of hex."""


class UnsupportedChainError(ConfigurationError):
    def __init__(self, rpc_url: str, supported: list[str]):
        super().__init__(
            f"Unsupported RPC URL: {rpc_url}, we only support {', '.join(supported)}"
        )
        self.rpc_url = rpc_url
        self.supported = list(supported)


# ---------------------------------------------------------------------------
# Intent extraction
# ---------------------------------------------------------------------------

class ExtractionError(SonicPluginError):
    """The intent extractor failed to produce any fields."""


class ExtractionShapeError(ExtractionError):
    """Extracted fields are missing or malformed.

    ``reason`` is a short machine-friendly marker used in the error payload;
    ``message`` is the clarification shown to the user.
    """

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


# ---------------------------------------------------------------------------
# Chain access
# ---------------------------------------------------------------------------

class TransportError(SonicPluginError):
    """An RPC call failed (network or provider issue)."""


class RpcQueryError(TransportError):
    """A read-only RPC query failed."""


class SubmissionError(SonicPluginError):
    """The chain rejected the transaction or it failed on-chain."""


class TransferError(SubmissionError):
    """A native transfer could not be built, signed, submitted or confirmed."""

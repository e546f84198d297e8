"""Decoding of raw extractor output into typed requests.

The intent extractor returns an untyped mapping. Each request type has one
decode function that validates the shape with pydantic and returns either
``Ok(request)`` or ``ShapeError(reason, message)``; handlers never inspect
raw fields themselves.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)
from web3 import Web3

from sonic_plugin.errors import ExtractionShapeError
from sonic_plugin.models import BalanceQuery, TransferRequest
from sonic_plugin.wallet.units import parse_native, to_decimal

T = TypeVar("T")

_TEMPLATE_PLACEHOLDER_RE = re.compile(r"\{\{.*?\}\}")
_NULL_TOKENS = {"null", "none", "undefined", "n/a"}
_NATIVE_TOKENS = {"s", "sonic", "native"}

MISSING_ADDRESS_MESSAGE = (
    "I need a wallet address to check the balance. Please provide a wallet address."
)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class ShapeError:
    """Extracted fields could not be turned into a request.

    ``reason`` is the short marker placed in the error payload, ``message``
    the clarification shown to the user.
    """

    reason: str
    message: str

    def to_exception(self) -> ExtractionShapeError:
        return ExtractionShapeError(self.reason, self.message)


Decoded = Union[Ok[T], ShapeError]


def is_placeholder(value: str) -> bool:
    """True for blank, null-like, or unresolved ``{{template}}`` values."""
    text = value.strip()
    return (
        not text
        or text.lower() in _NULL_TOKENS
        or _TEMPLATE_PLACEHOLDER_RE.search(text) is not None
    )


def _looks_like_address(value: str) -> bool:
    # Checksum casing is not enforced.
    return Web3.is_address(value.lower())


# ---------------------------------------------------------------------------
# Raw field schemas
# ---------------------------------------------------------------------------


class _RawTransfer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    recipient: StrictStr = Field(
        validation_alias=AliasChoices(
            "recipient", "toAddress", "to_address", "recipientAddress", "recipient_address"
        )
    )
    amount: Union[StrictStr, StrictInt, StrictFloat]
    token: Optional[StrictStr] = Field(
        default=None,
        validation_alias=AliasChoices("token", "tokenAddress", "token_address"),
    )
    data: Optional[StrictStr] = Field(
        default=None,
        validation_alias=AliasChoices("data", "extraData", "extra_data"),
    )

    @field_validator("recipient")
    @classmethod
    def _check_recipient(cls, value: str) -> str:
        if is_placeholder(value):
            raise ValueError("recipient address is missing")
        value = value.strip()
        if not _looks_like_address(value):
            raise ValueError(f"'{value}' is not a valid address")
        return value

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: str | int | float) -> str:
        if isinstance(value, str) and is_placeholder(value):
            raise ValueError("amount is missing")
        amount = to_decimal(value)
        # Rejects digits past the 18th decimal place.
        parse_native(amount)
        return format(amount, "f")

    @field_validator("token")
    @classmethod
    def _check_token(cls, value: str | None) -> str | None:
        if value is None or is_placeholder(value) or value.strip().lower() in _NATIVE_TOKENS:
            return None
        raise ValueError("only native S transfers are supported")

    @field_validator("data")
    @classmethod
    def _check_data(cls, value: str | None) -> str | None:
        if value is None or is_placeholder(value) or value.strip() == "0x":
            return None
        Web3.to_bytes(hexstr=value.strip())
        return value.strip()


class _RawBalance(BaseModel):
    model_config = ConfigDict(extra="ignore")

    address: Optional[StrictStr] = Field(
        default=None,
        validation_alias=AliasChoices("address", "walletAddress", "wallet_address"),
    )


def _describe(exc: ValidationError) -> str:
    seen: dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else "input"
        msg = err["msg"].removeprefix("Value error, ")
        seen.setdefault(field, msg)
    return "; ".join(f"{field}: {msg}" for field, msg in seen.items())


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def decode_transfer_request(raw: Any) -> Decoded[TransferRequest]:
    """Validate extractor output for a native transfer."""
    if not isinstance(raw, Mapping):
        return ShapeError(
            "Invalid transfer content",
            "Unable to process transfer request. Invalid content provided.",
        )
    try:
        fields = _RawTransfer.model_validate(dict(raw))
    except ValidationError as exc:
        return ShapeError(
            "Invalid transfer content",
            f"Unable to process transfer request: {_describe(exc)}. "
            "Please provide a recipient address and an amount.",
        )
    return Ok(
        TransferRequest(
            recipient_address=fields.recipient,
            amount=fields.amount,
            token_address=None,
            extra_data=Web3.to_bytes(hexstr=fields.data) if fields.data else None,
        )
    )


def decode_balance_query(raw: Any) -> Decoded[BalanceQuery]:
    """Validate extractor output for a balance lookup."""
    if not isinstance(raw, Mapping):
        return ShapeError("Missing wallet address", MISSING_ADDRESS_MESSAGE)
    try:
        fields = _RawBalance.model_validate(dict(raw))
    except ValidationError:
        return ShapeError("Missing wallet address", MISSING_ADDRESS_MESSAGE)
    if fields.address is None or is_placeholder(fields.address):
        return ShapeError("Missing wallet address", MISSING_ADDRESS_MESSAGE)
    address = fields.address.strip()
    if not _looks_like_address(address):
        return ShapeError(
            "Invalid wallet address",
            f"'{address}' is not a valid Sonic wallet address. Please provide a 0x address.",
        )
    return Ok(BalanceQuery(address=address))

"""Scalar values: the closed set of leaf data kinds a Content item can hold.

Every variant is a frozen pydantic model tagged by a ``kind`` literal, so the
union is discriminated on the tag rather than on the Python type of the payload.
``to_scalar`` maps plain Python values onto the right variant.
"""

import re
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictBool, StrictBytes, StrictInt, StrictStr, field_serializer, field_validator, model_validator

from docgraph.exceptions import ContentValidationError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
CHECKSUM_LENGTH = 32
MAX_NAME_LENGTH = 64

_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9._-]*$")
_SYMBOL_PATTERN = re.compile(r"^[A-Z]{1,7}$")


def _require_utf8(v: str) -> str:
    try:
        v.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"text is not valid UTF-8 (position {e.start}): {e.reason}") from None
    return v


Utf8Str = Annotated[StrictStr, AfterValidator(_require_utf8)]
"""Strict str that is guaranteed to encode as UTF-8, so it can be hashed."""


def _fraction_digits(amount: Decimal) -> int:
    exponent = amount.as_tuple().exponent
    return max(0, -exponent) if isinstance(exponent, int) else 0


class ScalarKind(StrEnum):
    """Tag of a scalar value variant. The string values are part of the canonical form."""

    STRING = "string"
    INT64 = "int64"
    ASSET = "asset"
    TIME_POINT = "time_point"
    CHECKSUM256 = "checksum256"
    NAME = "name"
    BOOL = "bool"


class Asset(BaseModel):
    """Decimal amount of a named symbol, e.g. ``1.00 USD``.

    ``precision`` is the number of fractional digits and defaults to the
    precision of ``amount`` as written, so ``Decimal("1.0")`` and
    ``Decimal("1.00")`` produce different assets.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    amount: Decimal
    symbol: str
    precision: int = 0

    @model_validator(mode="before")
    @classmethod
    def _default_precision(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("precision") is None and "amount" in data:
            try:
                amount = data["amount"] if isinstance(data["amount"], Decimal) else Decimal(str(data["amount"]))
            except InvalidOperation:
                return data
            return {**data, "amount": amount, "precision": _fraction_digits(amount)}
        return data

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError(f"asset amount must be finite: {v}")
        if v.is_zero() and v.is_signed():
            # -0.00 equals 0.00 and must render the same
            return v.copy_abs()
        return v

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        if not _SYMBOL_PATTERN.match(v):
            raise ValueError(f"asset symbol must be 1-7 uppercase letters: {v!r}")
        return v

    @model_validator(mode="after")
    def _check_precision(self) -> "Asset":
        if self.precision < _fraction_digits(self.amount):
            raise ValueError(f"asset amount {self.amount} has more than {self.precision} fractional digits")
        return self

    @classmethod
    def parse(cls, text: str) -> "Asset":
        """Parse the ``"<amount> <SYMBOL>"`` form produced by ``str()``."""
        amount, sep, symbol = text.strip().partition(" ")
        if not sep:
            raise ValueError(f"asset must look like '<amount> <SYMBOL>': {text!r}")
        try:
            parsed = Decimal(amount)
        except InvalidOperation as e:
            raise ValueError(f"invalid asset amount: {amount!r}") from e
        return cls(amount=parsed, symbol=symbol.strip())

    def __str__(self) -> str:
        return f"{self.amount:.{self.precision}f} {self.symbol}"


class _Scalar(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class StringValue(_Scalar):
    kind: Literal[ScalarKind.STRING] = ScalarKind.STRING
    value: Utf8Str


class Int64Value(_Scalar):
    kind: Literal[ScalarKind.INT64] = ScalarKind.INT64
    value: StrictInt

    @field_validator("value")
    @classmethod
    def validate_range(cls, v: int) -> int:
        if not INT64_MIN <= v <= INT64_MAX:
            raise ValueError(f"int64 value out of range: {v}")
        return v


class AssetValue(_Scalar):
    kind: Literal[ScalarKind.ASSET] = ScalarKind.ASSET
    value: Asset

    @field_validator("value", mode="before")
    @classmethod
    def parse_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Asset.parse(v)
        return v

    @field_serializer("value", when_used="json")
    def serialize_text(self, v: Asset) -> str:
        return str(v)


class TimePointValue(_Scalar):
    """Timestamp normalized to UTC. Naive datetimes are taken to be UTC already."""

    kind: Literal[ScalarKind.TIME_POINT] = ScalarKind.TIME_POINT
    value: datetime

    @field_validator("value")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)


class Checksum256Value(_Scalar):
    kind: Literal[ScalarKind.CHECKSUM256] = ScalarKind.CHECKSUM256
    value: StrictBytes

    @field_validator("value", mode="before")
    @classmethod
    def parse_hex(cls, v: Any) -> Any:
        if isinstance(v, str):
            return bytes.fromhex(v)
        return v

    @field_validator("value")
    @classmethod
    def validate_length(cls, v: bytes) -> bytes:
        if len(v) != CHECKSUM_LENGTH:
            raise ValueError(f"checksum256 must be {CHECKSUM_LENGTH} bytes, got {len(v)}")
        return v

    @field_serializer("value", when_used="json")
    def serialize_hex(self, v: bytes) -> str:
        return v.hex()


class NameValue(_Scalar):
    """Symbolic identifier such as an account or group name."""

    kind: Literal[ScalarKind.NAME] = ScalarKind.NAME
    value: Utf8Str

    @field_validator("value")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if len(v) > MAX_NAME_LENGTH or not _NAME_PATTERN.match(v):
            raise ValueError(f"invalid name {v!r}: expected [a-z][a-z0-9._-]*, at most {MAX_NAME_LENGTH} chars")
        return v


class BoolValue(_Scalar):
    kind: Literal[ScalarKind.BOOL] = ScalarKind.BOOL
    value: StrictBool


AnyScalar = StringValue | Int64Value | AssetValue | TimePointValue | Checksum256Value | NameValue | BoolValue

ScalarValue = Annotated[
    AnyScalar,
    Field(discriminator="kind"),
]
"""Tagged union over every scalar kind."""

SCALAR_TYPES: dict[ScalarKind, type[_Scalar]] = {
    ScalarKind.STRING: StringValue,
    ScalarKind.INT64: Int64Value,
    ScalarKind.ASSET: AssetValue,
    ScalarKind.TIME_POINT: TimePointValue,
    ScalarKind.CHECKSUM256: Checksum256Value,
    ScalarKind.NAME: NameValue,
    ScalarKind.BOOL: BoolValue,
}


def to_scalar(value: Any) -> AnyScalar:
    """Wrap a plain Python value in its scalar variant.

    ``bool`` is checked before ``int`` since it is an ``int`` subclass. Names
    cannot be inferred from a plain ``str``; build a ``NameValue`` explicitly.

    Raises:
        ContentValidationError: If the value's type has no scalar kind.
    """
    if isinstance(value, _Scalar):
        return value  # type: ignore[return-value]
    if isinstance(value, bool):
        return BoolValue(value=value)
    if isinstance(value, int):
        return Int64Value(value=value)
    if isinstance(value, str):
        return StringValue(value=value)
    if isinstance(value, Asset):
        return AssetValue(value=value)
    if isinstance(value, datetime):
        return TimePointValue(value=value)
    if isinstance(value, bytes):
        return Checksum256Value(value=value)
    raise ContentValidationError(f"unsupported scalar type: {type(value).__name__}")


__all__ = [
    "AnyScalar",
    "Asset",
    "AssetValue",
    "BoolValue",
    "Checksum256Value",
    "Int64Value",
    "NameValue",
    "SCALAR_TYPES",
    "ScalarKind",
    "ScalarValue",
    "StringValue",
    "TimePointValue",
    "Utf8Str",
    "to_scalar",
]

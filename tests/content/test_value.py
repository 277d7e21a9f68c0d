"""Tests for scalar value variants."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from docgraph.content import (
    Asset,
    AssetValue,
    BoolValue,
    Checksum256Value,
    Int64Value,
    NameValue,
    ScalarKind,
    StringValue,
    TimePointValue,
    to_scalar,
)
from docgraph.exceptions import ContentValidationError


class TestToScalar:
    def test_bool_is_not_int(self):
        assert to_scalar(True) == BoolValue(value=True)
        assert to_scalar(1) == Int64Value(value=1)
        assert to_scalar(True) != to_scalar(1)

    def test_string(self):
        assert to_scalar("5").kind == ScalarKind.STRING

    def test_datetime(self):
        value = to_scalar(datetime(2024, 1, 1, tzinfo=UTC))
        assert isinstance(value, TimePointValue)

    def test_bytes_become_checksum(self):
        value = to_scalar(b"\x01" * 32)
        assert isinstance(value, Checksum256Value)

    def test_asset(self):
        value = to_scalar(Asset(amount=Decimal("1.00"), symbol="USD"))
        assert isinstance(value, AssetValue)

    def test_existing_scalar_passes_through(self):
        name = NameValue(value="alice")
        assert to_scalar(name) is name

    def test_unsupported_type(self):
        with pytest.raises(ContentValidationError, match="float"):
            to_scalar(1.5)


class TestStrictPayloads:
    def test_string_rejects_lone_surrogate(self):
        with pytest.raises(ValidationError, match="not valid UTF-8"):
            StringValue(value="bad \ud83d text")

    def test_string_accepts_non_ascii(self):
        assert StringValue(value="za\u017c\u00f3\u0142\u0107 \U0001f600").value.endswith("\U0001f600")

    def test_string_rejects_int(self):
        with pytest.raises(ValidationError):
            StringValue(value=5)  # type: ignore[arg-type]

    def test_int_rejects_bool(self):
        with pytest.raises(ValidationError):
            Int64Value(value=True)

    def test_int64_range(self):
        Int64Value(value=2**63 - 1)
        Int64Value(value=-(2**63))
        with pytest.raises(ValidationError, match="out of range"):
            Int64Value(value=2**63)

    def test_frozen(self):
        value = StringValue(value="a")
        with pytest.raises(ValidationError):
            value.value = "b"  # type: ignore[misc]


class TestAsset:
    def test_precision_from_amount(self):
        assert Asset(amount=Decimal("1.00"), symbol="USD").precision == 2
        assert Asset(amount=Decimal("7"), symbol="USD").precision == 0

    def test_precision_is_significant(self):
        assert Asset(amount=Decimal("1.0"), symbol="USD") != Asset(amount=Decimal("1.00"), symbol="USD")

    def test_str(self):
        assert str(Asset(amount=Decimal("1.5"), symbol="HUSD", precision=2)) == "1.50 HUSD"

    def test_parse_round_trip(self):
        asset = Asset.parse("12.345 TLOS")
        assert asset.amount == Decimal("12.345")
        assert asset.precision == 3
        assert str(asset) == "12.345 TLOS"

    def test_parse_rejects_missing_symbol(self):
        with pytest.raises(ValueError):
            Asset.parse("12.0")

    def test_parse_rejects_bad_amount(self):
        with pytest.raises(ValueError, match="invalid asset amount"):
            Asset.parse("abc USD")

    def test_symbol_validation(self):
        with pytest.raises(ValidationError):
            Asset(amount=Decimal("1"), symbol="usd")

    def test_precision_too_small(self):
        with pytest.raises(ValidationError):
            Asset(amount=Decimal("1.234"), symbol="USD", precision=1)

    def test_negative_zero_normalized(self):
        asset = Asset(amount=Decimal("-0.00"), symbol="USD")
        assert not asset.amount.is_signed()
        assert asset.precision == 2
        assert str(asset) == "0.00 USD"
        assert Asset.parse("-0.00 USD") == Asset.parse("0.00 USD")

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError):
            Asset(amount=Decimal("NaN"), symbol="USD")

    def test_asset_value_from_text(self):
        value = AssetValue(value="2.50 USD")  # type: ignore[arg-type]
        assert value.value == Asset(amount=Decimal("2.50"), symbol="USD")


class TestTimePoint:
    def test_naive_is_utc(self):
        value = TimePointValue(value=datetime(2024, 5, 1, 12, 0))
        assert value.value.tzinfo == UTC

    def test_normalized_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        value = TimePointValue(value=datetime(2024, 5, 1, 14, 0, tzinfo=plus_two))
        assert value.value == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert value.value.utcoffset() == timedelta(0)


class TestChecksum:
    def test_length_enforced(self):
        with pytest.raises(ValidationError, match="32 bytes"):
            Checksum256Value(value=b"\x00" * 31)

    def test_hex_input(self):
        value = Checksum256Value(value="ab" * 32)  # type: ignore[arg-type]
        assert value.value == b"\xab" * 32

    def test_json_dump_is_hex(self):
        value = Checksum256Value(value=b"\xab" * 32)
        assert value.model_dump(mode="json")["value"] == "ab" * 32


class TestName:
    @pytest.mark.parametrize("name", ["alice", "docs.hypha", "a1_b-2"])
    def test_valid(self, name: str):
        assert NameValue(value=name).value == name

    @pytest.mark.parametrize("name", ["", "Alice", "1abc", "has space", "x" * 65])
    def test_invalid(self, name: str):
        with pytest.raises(ValidationError):
            NameValue(value=name)

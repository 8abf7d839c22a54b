"""
ABI Value Encoder Test Suite

Tests for the type grammar, hex handling, value coercion and the
``(abi_type, abi_value)`` words produced for struct hashing.

Usage:
    pytest tests/test_abi.py -v
"""

import pytest
from eth_utils import keccak

from safe_digest.eip712.abi import (
    base_type_name,
    coerce_address,
    coerce_integer,
    coerce_primitive,
    encode_primitive,
    hex_to_bytes,
    is_primitive_type,
    parse_array_type,
)
from safe_digest.exceptions import InvalidFieldValue, MalformedHex, UnknownType

from test_mocks import MAIL_FROM_WALLET


# ========================================================================
# Type Grammar
# ========================================================================

class TestTypeGrammar:
    """Test primitive detection and array suffix handling."""

    @pytest.mark.parametrize("type_name", [
        "address", "bool", "string", "bytes",
        "uint8", "uint256", "int8", "int256", "uint160",
        "bytes1", "bytes20", "bytes32",
    ])
    def test_primitive_types(self, type_name):
        assert is_primitive_type(type_name)

    @pytest.mark.parametrize("type_name", [
        "uint", "uint7", "uint264", "int0", "bytes0", "bytes33", "Person", "address[]", "",
    ])
    def test_non_primitive_types(self, type_name):
        assert not is_primitive_type(type_name)

    def test_parse_array_type_strips_outermost_suffix(self):
        assert parse_array_type("Person[]") == ("Person", None)
        assert parse_array_type("Person[3]") == ("Person", 3)
        assert parse_array_type("uint256[2][]") == ("uint256[2]", None)
        assert parse_array_type("Person") is None

    def test_base_type_name(self):
        assert base_type_name("Person[][2]") == "Person"
        assert base_type_name("address") == "address"


# ========================================================================
# Hex Handling
# ========================================================================

class TestHexToBytes:
    """Test 0x hex decoding rules."""

    def test_even_length(self):
        assert hex_to_bytes("0x0a0b") == b"\x0a\x0b"

    def test_empty(self):
        assert hex_to_bytes("0x") == b""

    def test_odd_length_is_left_padded(self):
        assert hex_to_bytes("0xabc") == b"\x0a\xbc"

    def test_bytes_pass_through(self):
        assert hex_to_bytes(b"\x01\x02") == b"\x01\x02"

    def test_missing_prefix_raises(self):
        with pytest.raises(MalformedHex):
            hex_to_bytes("abcd", field_path="message.data")

    def test_non_hex_characters_raise(self):
        with pytest.raises(MalformedHex) as exc_info:
            hex_to_bytes("0xzz", field_path="message.data")
        assert exc_info.value.field_path == "message.data"

    def test_non_string_raises(self):
        with pytest.raises(MalformedHex):
            hex_to_bytes(123)


# ========================================================================
# Coercion
# ========================================================================

class TestCoercion:
    """Test value coercion against declared types."""

    def test_address_any_case(self):
        expected = bytes.fromhex(MAIL_FROM_WALLET[2:])
        assert coerce_address(MAIL_FROM_WALLET) == expected
        assert coerce_address(MAIL_FROM_WALLET.lower()) == expected
        assert coerce_address("0X" + MAIL_FROM_WALLET[2:].upper()) == expected

    @pytest.mark.parametrize("value", ["0x1234", "not-an-address", 42, None, b"\x00" * 19])
    def test_invalid_address(self, value):
        with pytest.raises(InvalidFieldValue) as exc_info:
            coerce_address(value, field_path="message.to")
        assert exc_info.value.field_path == "message.to"
        assert exc_info.value.type_name == "address"

    def test_integer_from_strings(self):
        assert coerce_integer("uint256", "42") == 42
        assert coerce_integer("uint256", "0x2a") == 42
        assert coerce_integer("int8", "-128") == -128

    def test_integer_bounds(self):
        assert coerce_integer("uint8", 255) == 255
        assert coerce_integer("int8", 127) == 127
        for type_name, value in [("uint8", 256), ("uint8", -1), ("int8", 128), ("int8", -129)]:
            with pytest.raises(InvalidFieldValue):
                coerce_integer(type_name, value)

    def test_integer_rejects_bool_and_garbage(self):
        with pytest.raises(InvalidFieldValue):
            coerce_integer("uint256", True)
        with pytest.raises(InvalidFieldValue):
            coerce_integer("uint256", "1e18")
        with pytest.raises(InvalidFieldValue):
            coerce_integer("uint256", 1.5)

    def test_fixed_bytes_size_checked(self):
        assert coerce_primitive("bytes4", "0xa9059cbb") == bytes.fromhex("a9059cbb")
        with pytest.raises(InvalidFieldValue):
            coerce_primitive("bytes32", "0x1234")

    def test_bool_must_be_bool(self):
        assert coerce_primitive("bool", False) is False
        with pytest.raises(InvalidFieldValue):
            coerce_primitive("bool", 1)

    def test_unknown_type(self):
        with pytest.raises(UnknownType) as exc_info:
            coerce_primitive("uint7", 1, field_path="message.x")
        assert exc_info.value.type_name == "uint7"


# ========================================================================
# Encoding
# ========================================================================

class TestEncodePrimitive:
    """Test the ABI words used inside struct hashes."""

    def test_string_is_hashed(self):
        assert encode_primitive("string", "Hello, Bob!") == ("bytes32", keccak(text="Hello, Bob!"))

    def test_bytes_are_hashed(self):
        assert encode_primitive("bytes", "0x") == ("bytes32", keccak(b""))
        assert encode_primitive("bytes", "0xdeadbeef") == ("bytes32", keccak(bytes.fromhex("deadbeef")))

    def test_odd_length_bytes_hashed_after_padding(self):
        assert encode_primitive("bytes", "0xabc") == ("bytes32", keccak(b"\x0a\xbc"))

    def test_atomic_types_pass_through(self):
        assert encode_primitive("uint256", "7") == ("uint256", 7)
        assert encode_primitive("bool", True) == ("bool", True)
        assert encode_primitive("address", MAIL_FROM_WALLET) == ("address", bytes.fromhex(MAIL_FROM_WALLET[2:]))

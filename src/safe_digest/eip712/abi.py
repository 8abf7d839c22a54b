"""
ABI Value Encoding for EIP-712

Turns a single typed value into the ABI word used inside a struct hash.
Atomic types (``address``, ``bool``, ``uintN``/``intN``, ``bytesN``) pass
through as one word; dynamic ``string`` / ``bytes`` values are replaced by
their Keccak-256 digest and encoded as ``bytes32``.

The ``coerce_*`` helpers are shared with the structural validator so that a
value accepted during validation is encoded exactly the same way.
"""

import re
from typing import Any, Optional, Tuple

from eth_utils import keccak

from ..exceptions import InvalidFieldValue, MalformedHex, UnknownType

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]*$")
_INTEGER_TYPE = re.compile(r"^(u?)int(\d{1,3})$")
_FIXED_BYTES_TYPE = re.compile(r"^bytes(\d{1,2})$")
_ARRAY_SUFFIX = re.compile(r"^(.+)\[(\d*)\]$")

AbiWord = Tuple[str, Any]


# ---------------------------------------------------------------------------
# Type grammar
# ---------------------------------------------------------------------------

def parse_array_type(type_name: str) -> Optional[Tuple[str, Optional[int]]]:
    """
    Split the outermost array suffix off ``type_name``.

    ``"Foo[3][]"`` gives ``("Foo[3]", None)``; ``"Foo[3]"`` gives
    ``("Foo", 3)``. Returns ``None`` for non-array types.
    """
    match = _ARRAY_SUFFIX.match(type_name)
    if match is None:
        return None
    element_type, length = match.group(1), match.group(2)
    return element_type, int(length) if length else None


def base_type_name(type_name: str) -> str:
    """Strip every array suffix: ``"Person[][2]"`` -> ``"Person"``."""
    return type_name.split("[", 1)[0].strip()


def _integer_width(type_name: str) -> Optional[Tuple[bool, int]]:
    match = _INTEGER_TYPE.match(type_name)
    if match is None:
        return None
    width = int(match.group(2))
    if width < 8 or width > 256 or width % 8:
        return None
    return match.group(1) == "u", width


def _fixed_bytes_size(type_name: str) -> Optional[int]:
    match = _FIXED_BYTES_TYPE.match(type_name)
    if match is None:
        return None
    size = int(match.group(1))
    if size < 1 or size > 32:
        return None
    return size


def is_primitive_type(type_name: str) -> bool:
    """Whether ``type_name`` is an atomic or dynamic (non-array) ABI type."""
    if type_name in ("address", "bool", "string", "bytes"):
        return True
    return _integer_width(type_name) is not None or _fixed_bytes_size(type_name) is not None


# ---------------------------------------------------------------------------
# Hex handling
# ---------------------------------------------------------------------------

def hex_to_bytes(value: Any, *, field_path: Optional[str] = None) -> bytes:
    """
    Convert a ``0x``-prefixed hex string (or raw bytes) to bytes.

    Odd-length digit strings are left-padded with a single zero nibble, the
    leniency historical EIP-712 libraries apply.

    Raises:
        MalformedHex: If ``value`` is not bytes and not valid ``0x`` hex.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise MalformedHex(f"Expected a 0x-prefixed hex string, got {type(value).__name__}", value=value, field_path=field_path)
    if not value.startswith(("0x", "0X")):
        raise MalformedHex(f"Hex value must be 0x-prefixed: {value!r}", value=value, field_path=field_path)
    digits = value[2:]
    if not _HEX_DIGITS.match(digits):
        raise MalformedHex(f"Invalid hex digits in {value!r}", value=value, field_path=field_path)
    if len(digits) % 2:
        digits = "0" + digits
    return bytes.fromhex(digits)


# ---------------------------------------------------------------------------
# Coercion (shared with validation)
# ---------------------------------------------------------------------------

def coerce_address(value: Any, *, field_path: Optional[str] = None) -> bytes:
    """Return the 20 raw bytes of an address given as hex or bytes."""
    if isinstance(value, str):
        digits = value[2:] if value.startswith(("0x", "0X")) else None
        if digits is None or len(digits) != 40 or not _HEX_DIGITS.match(digits):
            raise InvalidFieldValue(
                f"Invalid address {value!r}: expected 0x followed by 40 hex digits",
                field_path=field_path,
                type_name="address",
            )
        return bytes.fromhex(digits)
    if isinstance(value, (bytes, bytearray)) and len(value) == 20:
        return bytes(value)
    raise InvalidFieldValue(f"Invalid address value {value!r}", field_path=field_path, type_name="address")


def coerce_integer(type_name: str, value: Any, *, field_path: Optional[str] = None) -> int:
    """
    Return ``value`` as an int that fits ``type_name`` (``uintN`` / ``intN``).

    Accepts ints and decimal or ``0x`` hex strings. Booleans are rejected.
    """
    parsed = _integer_width(type_name)
    if parsed is None:
        raise UnknownType(f"Unknown integer type {type_name!r}", type_name=type_name, field_path=field_path)
    unsigned, width = parsed

    if isinstance(value, bool):
        raise InvalidFieldValue(f"Expected an integer for {type_name}, got a bool", field_path=field_path, type_name=type_name)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith(("0x", "-0x")):
                number = int(text, 16)
            else:
                number = int(text, 10)
        except ValueError:
            raise InvalidFieldValue(f"Invalid integer {value!r} for {type_name}", field_path=field_path, type_name=type_name)
    else:
        raise InvalidFieldValue(
            f"Expected an integer for {type_name}, got {type(value).__name__}",
            field_path=field_path,
            type_name=type_name,
        )

    if unsigned:
        lower, upper = 0, 2 ** width - 1
    else:
        lower, upper = -(2 ** (width - 1)), 2 ** (width - 1) - 1
    if number < lower or number > upper:
        raise InvalidFieldValue(f"Integer {number} out of range for {type_name}", field_path=field_path, type_name=type_name)
    return number


def coerce_bool(value: Any, *, field_path: Optional[str] = None) -> bool:
    if isinstance(value, bool):
        return value
    raise InvalidFieldValue(f"Expected a bool, got {value!r}", field_path=field_path, type_name="bool")


def coerce_fixed_bytes(type_name: str, value: Any, *, field_path: Optional[str] = None) -> bytes:
    """Return exactly N bytes for a ``bytesN`` value given as hex or bytes."""
    size = _fixed_bytes_size(type_name)
    if size is None:
        raise UnknownType(f"Unknown fixed bytes type {type_name!r}", type_name=type_name, field_path=field_path)
    raw = hex_to_bytes(value, field_path=field_path)
    if len(raw) != size:
        raise InvalidFieldValue(
            f"Expected {size} bytes for {type_name}, got {len(raw)}",
            field_path=field_path,
            type_name=type_name,
        )
    return raw


def coerce_string(value: Any, *, field_path: Optional[str] = None) -> str:
    if isinstance(value, str):
        return value
    raise InvalidFieldValue(f"Expected a string, got {type(value).__name__}", field_path=field_path, type_name="string")


def coerce_primitive(type_name: str, value: Any, *, field_path: Optional[str] = None) -> Any:
    """
    Validate and normalize ``value`` against a primitive ABI type.

    Returns:
        The normalized Python value (bytes for addresses and byte types).

    Raises:
        UnknownType: ``type_name`` is not a primitive ABI type.
        InvalidFieldValue: The value does not fit the type.
        MalformedHex: A byte value is not valid ``0x`` hex.
    """
    if type_name == "address":
        return coerce_address(value, field_path=field_path)
    if type_name == "bool":
        return coerce_bool(value, field_path=field_path)
    if type_name == "string":
        return coerce_string(value, field_path=field_path)
    if type_name == "bytes":
        return hex_to_bytes(value, field_path=field_path)
    if _integer_width(type_name) is not None:
        return coerce_integer(type_name, value, field_path=field_path)
    if _fixed_bytes_size(type_name) is not None:
        return coerce_fixed_bytes(type_name, value, field_path=field_path)
    raise UnknownType(f"Unknown ABI type {type_name!r}", type_name=type_name, field_path=field_path)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode_primitive(type_name: str, value: Any, *, field_path: Optional[str] = None) -> AbiWord:
    """
    Encode one primitive value as an ``(abi_type, abi_value)`` pair.

    Dynamic values are never embedded inline: ``string`` and ``bytes`` become
    ``("bytes32", keccak256(raw))``.

    Example::

        encode_primitive("string", "Hello, Bob!")
        # ("bytes32", b"\\xb5\\xaa...")
        encode_primitive("uint256", "42")
        # ("uint256", 42)
    """
    normalized = coerce_primitive(type_name, value, field_path=field_path)
    if type_name == "string":
        return "bytes32", keccak(normalized.encode("utf-8"))
    if type_name == "bytes":
        return "bytes32", keccak(normalized)
    return type_name, normalized

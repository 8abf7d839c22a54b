"""
EIP-712 Struct Hashing

``StructHasher`` implements ``encodeType`` / ``hashType`` / ``encodeData`` /
``hashStruct`` over one ``types`` map. A hasher is created per digest
computation; its ``hashType`` cache never outlives that computation.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from eth_abi import encode
from eth_utils import keccak

from ..config import resolve_max_struct_depth
from ..exceptions import DepthLimitExceeded, InvalidFieldValue, MissingFieldValue, UnknownType
from .abi import AbiWord, encode_primitive, is_primitive_type, parse_array_type
from .types_graph import TypeGraph


def _join_path(parent: str, name: str) -> str:
    return f"{parent}.{name}" if parent else name


class StructHasher:
    """
    Recursive EIP-712 struct encoder bound to a single ``types`` map.

    Args:
        types: Mapping of struct name to its ordered ``{name, type}`` fields.
        max_depth: Maximum nesting of struct/array data. Falls back to
            ``safe_digest_max_struct_depth`` when omitted.

    Example:
        hasher = StructHasher(types)
        hasher.encode_type("Mail")
        # "Mail(Person from,Person to,string contents)Person(string name,address wallet)"
        struct_hash = hasher.hash_struct("Mail", message)
    """

    def __init__(self, types: Mapping[str, Sequence[Mapping[str, str]]], max_depth: Optional[int] = None):
        self.types = types
        self.graph = TypeGraph(types)
        self.max_depth = resolve_max_struct_depth(max_depth)
        self._type_hashes: Dict[str, bytes] = {}

    # ------------------------------------------------------------------
    # Type encoding
    # ------------------------------------------------------------------

    def _require_struct(self, type_name: str, field_path: str = "") -> Sequence[Mapping[str, str]]:
        if type_name not in self.types:
            raise UnknownType(f"Unknown struct type {type_name!r}", type_name=type_name, field_path=field_path or None)
        return self.types[type_name]

    def encode_type(self, primary_type: str) -> str:
        """Concatenate ``Name(type name,...)`` for the primary type and its sorted dependencies."""
        self._require_struct(primary_type)
        parts = []
        for type_name in self.graph.resolve(primary_type):
            fields = ",".join(f"{field['type']} {field['name']}" for field in self.types[type_name])
            parts.append(f"{type_name}({fields})")
        return "".join(parts)

    def hash_type(self, primary_type: str) -> bytes:
        cached = self._type_hashes.get(primary_type)
        if cached is None:
            cached = keccak(text=self.encode_type(primary_type))
            self._type_hashes[primary_type] = cached
        return cached

    # ------------------------------------------------------------------
    # Data encoding
    # ------------------------------------------------------------------

    def encode_data(self, primary_type: str, data: Any, *, field_path: str = "", depth: int = 1) -> bytes:
        """
        ABI-encode ``hashType(primary_type)`` followed by every declared field.

        Raises:
            MissingFieldValue: A declared field is absent or ``None`` in ``data``.
            UnknownType: A field references an undeclared, non-primitive type.
            InvalidFieldValue: A value does not fit its declared type.
            DepthLimitExceeded: Nested data is deeper than ``max_depth``.
        """
        fields = self._require_struct(primary_type, field_path)
        if depth > self.max_depth:
            raise DepthLimitExceeded(
                f"Struct nesting exceeds the maximum depth of {self.max_depth}",
                max_depth=self.max_depth,
                location=field_path or primary_type,
            )
        if not isinstance(data, Mapping):
            raise InvalidFieldValue(
                f"Expected a mapping for struct {primary_type}, got {type(data).__name__}",
                field_path=field_path or None,
                type_name=primary_type,
            )

        abi_types: List[str] = ["bytes32"]
        abi_values: List[Any] = [self.hash_type(primary_type)]
        for field in fields:
            name = field["name"]
            path = _join_path(field_path, name)
            value = data.get(name)
            if value is None:
                raise MissingFieldValue(f"Missing value for field {path!r}", field_path=path)
            abi_type, abi_value = self._encode_field(field["type"], value, path, depth)
            abi_types.append(abi_type)
            abi_values.append(abi_value)
        return encode(abi_types, abi_values)

    def hash_struct(self, primary_type: str, data: Any, *, field_path: str = "", depth: int = 1) -> bytes:
        return keccak(self.encode_data(primary_type, data, field_path=field_path, depth=depth))

    def _encode_field(self, type_name: str, value: Any, field_path: str, depth: int) -> AbiWord:
        if type_name in self.types:
            return "bytes32", self.hash_struct(type_name, value, field_path=field_path, depth=depth + 1)

        array = parse_array_type(type_name)
        if array is not None:
            return "bytes32", self._hash_array(array, value, field_path, depth)

        if is_primitive_type(type_name):
            return encode_primitive(type_name, value, field_path=field_path)

        raise UnknownType(f"Unknown type {type_name!r}", type_name=type_name, field_path=field_path)

    def _hash_array(self, array: Tuple[str, Optional[int]], value: Any, field_path: str, depth: int) -> bytes:
        element_type, length = array
        if depth + 1 > self.max_depth:
            raise DepthLimitExceeded(
                f"Array nesting exceeds the maximum depth of {self.max_depth}",
                max_depth=self.max_depth,
                location=field_path,
            )
        if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Sequence):
            raise InvalidFieldValue(
                f"Expected a list for {element_type}[], got {type(value).__name__}",
                field_path=field_path,
                type_name=f"{element_type}[]",
            )
        if length is not None and len(value) != length:
            raise InvalidFieldValue(
                f"Expected {length} elements, got {len(value)}",
                field_path=field_path,
                type_name=f"{element_type}[{length}]",
            )

        words = []
        for i, item in enumerate(value):
            item_path = f"{field_path}[{i}]"
            if item is None:
                raise MissingFieldValue(f"Missing value for array element {item_path!r}", field_path=item_path)
            words.append(self._encode_field(element_type, item, item_path, depth + 1))
        return keccak(encode([w[0] for w in words], [w[1] for w in words]))

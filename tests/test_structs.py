"""
Type Graph and Struct Hasher Test Suite

Tests for dependency ordering, ``encodeType`` / ``hashType`` and recursive
``hashStruct`` over structs, arrays and nested arrays.

Usage:
    pytest tests/test_structs.py -v
"""

import pytest
from eth_abi import encode
from eth_utils import keccak

from safe_digest.eip712.structs import StructHasher
from safe_digest.eip712.types_graph import TypeGraph
from safe_digest.exceptions import DepthLimitExceeded, InvalidFieldValue, MissingFieldValue, UnknownType

from test_mocks import (
    MAIL_ENCODED_TYPE,
    MAIL_FROM_WALLET,
    MAIL_MESSAGE,
    MAIL_STRUCT_HASH,
    MAIL_TO_WALLET,
    MAIL_TYPE_HASH,
    MAIL_TYPES,
)


# ========================================================================
# TypeGraph
# ========================================================================

class TestTypeGraph:
    """Test dependency resolution order."""

    def test_primary_first_then_sorted(self):
        types = {
            "Zoo": [{"name": "b", "type": "Beta"}, {"name": "a", "type": "Alpha[]"}],
            "Beta": [{"name": "x", "type": "uint256"}],
            "Alpha": [{"name": "y", "type": "Beta"}],
        }
        assert TypeGraph(types).resolve("Zoo") == ["Zoo", "Alpha", "Beta"]

    def test_primitive_only_struct_has_no_dependencies(self):
        assert TypeGraph({"Person": [{"name": "name", "type": "string"}]}).resolve("Person") == ["Person"]

    def test_unreferenced_types_are_excluded(self):
        types = dict(MAIL_TYPES)
        assert TypeGraph(types).resolve("Person") == ["Person"]
        assert TypeGraph(types).resolve("Mail") == ["Mail", "Person"]

    def test_diamond_visits_each_type_once(self):
        types = {
            "Top": [{"name": "l", "type": "Left"}, {"name": "r", "type": "Right"}],
            "Left": [{"name": "s", "type": "Shared"}],
            "Right": [{"name": "s", "type": "Shared[2]"}],
            "Shared": [{"name": "v", "type": "bool"}],
        }
        assert TypeGraph(types).resolve("Top") == ["Top", "Left", "Right", "Shared"]

    def test_cycles_terminate(self):
        types = {
            "Node": [{"name": "children", "type": "Node[]"}, {"name": "tag", "type": "Tag"}],
            "Tag": [{"name": "owner", "type": "Node"}],
        }
        assert TypeGraph(types).resolve("Node") == ["Node", "Tag"]
        assert TypeGraph(types).resolve("Tag") == ["Tag", "Node"]

    def test_unknown_primary_type(self):
        assert TypeGraph({}).resolve("Missing") == ["Missing"]


# ========================================================================
# StructHasher
# ========================================================================

class TestStructHasher:
    """Test encodeType, hashType and hashStruct."""

    def test_mail_encode_type(self):
        hasher = StructHasher(MAIL_TYPES)
        assert hasher.encode_type("Mail") == MAIL_ENCODED_TYPE

    def test_mail_type_hash(self):
        hasher = StructHasher(MAIL_TYPES)
        assert "0x" + hasher.hash_type("Mail").hex() == MAIL_TYPE_HASH

    def test_hash_type_is_cached_per_instance(self):
        hasher = StructHasher(MAIL_TYPES)
        first = hasher.hash_type("Mail")
        assert hasher.hash_type("Mail") is first
        assert StructHasher(MAIL_TYPES)._type_hashes == {}

    def test_mail_struct_hash(self):
        hasher = StructHasher(MAIL_TYPES)
        assert "0x" + hasher.hash_struct("Mail", MAIL_MESSAGE).hex() == MAIL_STRUCT_HASH

    def test_nested_struct_matches_manual_encoding(self):
        hasher = StructHasher(MAIL_TYPES)
        person_type_hash = keccak(text="Person(string name,address wallet)")
        cow = keccak(encode(
            ["bytes32", "bytes32", "address"],
            [person_type_hash, keccak(text="Cow"), MAIL_FROM_WALLET],
        ))
        bob = keccak(encode(
            ["bytes32", "bytes32", "address"],
            [person_type_hash, keccak(text="Bob"), MAIL_TO_WALLET],
        ))
        expected = keccak(encode(
            ["bytes32", "bytes32", "bytes32", "bytes32"],
            [keccak(text=MAIL_ENCODED_TYPE), cow, bob, keccak(text="Hello, Bob!")],
        ))
        assert hasher.hash_struct("Mail", MAIL_MESSAGE) == expected

    def test_array_of_primitives(self):
        types = {"Batch": [{"name": "ids", "type": "uint256[]"}]}
        hasher = StructHasher(types)
        ids_hash = keccak(encode(["uint256", "uint256", "uint256"], [1, 2, 3]))
        expected = keccak(encode(["bytes32", "bytes32"], [keccak(text="Batch(uint256[] ids)"), ids_hash]))
        assert hasher.hash_struct("Batch", {"ids": [1, 2, 3]}) == expected

    def test_array_of_strings_hashes_each_element(self):
        types = {"Tags": [{"name": "tags", "type": "string[]"}]}
        hasher = StructHasher(types)
        tags_hash = keccak(encode(["bytes32", "bytes32"], [keccak(text="a"), keccak(text="b")]))
        expected = keccak(encode(["bytes32", "bytes32"], [keccak(text="Tags(string[] tags)"), tags_hash]))
        assert hasher.hash_struct("Tags", {"tags": ["a", "b"]}) == expected

    def test_array_of_structs(self):
        types = {
            "Group": [{"name": "members", "type": "Person[]"}],
            "Person": [{"name": "name", "type": "string"}, {"name": "wallet", "type": "address"}],
        }
        hasher = StructHasher(types)
        members = [MAIL_MESSAGE["from"], MAIL_MESSAGE["to"]]
        member_hashes = [hasher.hash_struct("Person", member) for member in members]
        expected = keccak(encode(
            ["bytes32", "bytes32"],
            [hasher.hash_type("Group"), keccak(encode(["bytes32", "bytes32"], member_hashes))],
        ))
        assert hasher.hash_struct("Group", {"members": members}) == expected

    def test_empty_array_hashes_empty_bytes(self):
        types = {"Batch": [{"name": "ids", "type": "uint256[]"}]}
        expected = keccak(encode(["bytes32", "bytes32"], [keccak(text="Batch(uint256[] ids)"), keccak(b"")]))
        assert StructHasher(types).hash_struct("Batch", {"ids": []}) == expected

    def test_nested_arrays(self):
        types = {"Grid": [{"name": "cells", "type": "uint8[2][]"}]}
        hasher = StructHasher(types)
        rows = [keccak(encode(["uint8", "uint8"], row)) for row in ([1, 2], [3, 4])]
        expected = keccak(encode(
            ["bytes32", "bytes32"],
            [keccak(text="Grid(uint8[2][] cells)"), keccak(encode(["bytes32", "bytes32"], rows))],
        ))
        assert hasher.hash_struct("Grid", {"cells": [[1, 2], [3, 4]]}) == expected

    def test_fixed_array_length_enforced(self):
        types = {"Pair": [{"name": "values", "type": "uint256[2]"}]}
        with pytest.raises(InvalidFieldValue) as exc_info:
            StructHasher(types).hash_struct("Pair", {"values": [1, 2, 3]}, field_path="message")
        assert exc_info.value.field_path == "message.values"

    def test_missing_field_raises(self):
        message = {"from": MAIL_MESSAGE["from"], "to": {"name": "Bob"}, "contents": "hi"}
        with pytest.raises(MissingFieldValue) as exc_info:
            StructHasher(MAIL_TYPES).hash_struct("Mail", message, field_path="message")
        assert exc_info.value.field_path == "message.to.wallet"

    def test_none_field_is_missing(self):
        message = dict(MAIL_MESSAGE, contents=None)
        with pytest.raises(MissingFieldValue):
            StructHasher(MAIL_TYPES).hash_struct("Mail", message)

    def test_unknown_field_type(self):
        types = {"Broken": [{"name": "x", "type": "Ghost"}]}
        with pytest.raises(UnknownType) as exc_info:
            StructHasher(types).hash_struct("Broken", {"x": {}})
        assert exc_info.value.type_name == "Ghost"

    def test_recursive_data_bounded_by_depth(self):
        types = {"Node": [{"name": "value", "type": "uint256"}, {"name": "next", "type": "Node[]"}]}
        data = {"value": 0, "next": []}
        for i in range(1, 10):
            data = {"value": i, "next": [data]}
        StructHasher(types, max_depth=32).hash_struct("Node", data)
        with pytest.raises(DepthLimitExceeded) as exc_info:
            StructHasher(types, max_depth=5).hash_struct("Node", data)
        assert exc_info.value.max_depth == 5

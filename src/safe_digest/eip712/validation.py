"""
Structural Validation for EIP-712 Typed Data

Checks a ``types`` map and a value tree before anything is hashed, so that
a bad address or an out-of-range integer is reported with its field path
(``message.wallets[1]``) instead of surfacing from inside the ABI encoder.

Functions:
    - validate_type_definitions: Reject malformed ``types`` maps
    - validate_struct_value: Walk a struct value against its declared type
"""

from typing import Any, Mapping, Optional, Sequence

from ..config import resolve_max_struct_depth
from ..exceptions import (
    DepthLimitExceeded,
    InvalidFieldValue,
    InvalidTypeDefinition,
    MissingFieldValue,
    UnknownType,
)
from .abi import base_type_name, coerce_primitive, is_primitive_type, parse_array_type


def validate_type_definitions(types: Any) -> None:
    """
    Validate the shape of a ``types`` map.

    Raises:
        InvalidTypeDefinition: Non-mapping input, malformed field entries,
            primitive-named structs or duplicate field names.
        UnknownType: A field type is neither primitive nor declared.
    """
    if not isinstance(types, Mapping):
        raise InvalidTypeDefinition("types must be a mapping of struct name to field list", field_path="types")

    for struct_name, fields in types.items():
        struct_path = f"types.{struct_name}"
        if not isinstance(struct_name, str) or not struct_name:
            raise InvalidTypeDefinition(f"Invalid struct name {struct_name!r}", field_path="types")
        if is_primitive_type(struct_name) or "[" in struct_name:
            raise InvalidTypeDefinition(
                f"Struct name {struct_name!r} collides with an ABI type name",
                field_path=struct_path,
            )
        if isinstance(fields, (str, bytes)) or not isinstance(fields, Sequence):
            raise InvalidTypeDefinition(f"Fields of {struct_name} must be a list", field_path=struct_path)

        seen = set()
        for position, field in enumerate(fields):
            if (
                not isinstance(field, Mapping)
                or not isinstance(field.get("name"), str)
                or not isinstance(field.get("type"), str)
            ):
                raise InvalidTypeDefinition(
                    f"Field #{position} of {struct_name} must have string 'name' and 'type'",
                    field_path=struct_path,
                )
            name = field["name"]
            if name in seen:
                raise InvalidTypeDefinition(
                    f"Field {name!r} declared twice in {struct_name}",
                    field_path=f"{struct_path}.{name}",
                )
            seen.add(name)

            base = base_type_name(field["type"])
            if base not in types and not is_primitive_type(base):
                raise UnknownType(
                    f"Field {name!r} of {struct_name} references unknown type {field['type']!r}",
                    type_name=field["type"],
                    field_path=f"{struct_path}.{name}",
                )


def validate_struct_value(
    types: Mapping[str, Sequence[Mapping[str, str]]],
    type_name: str,
    value: Any,
    field_path: str,
    max_depth: Optional[int] = None,
) -> None:
    """
    Check ``value`` against ``types[type_name]`` recursively.

    Args:
        types: Validated ``types`` map (see ``validate_type_definitions``).
        type_name: Struct type to validate against.
        value: Mapping holding the struct's field values.
        field_path: Path prefix for error reporting (``"domain"``, ``"message"``).
        max_depth: Maximum struct/array nesting; environment default if omitted.
    """
    limit = resolve_max_struct_depth(max_depth)
    _check_value(types, type_name, value, field_path, 1, limit)


def _check_value(types, type_name: str, value: Any, path: str, depth: int, limit: int) -> None:
    if value is None:
        raise MissingFieldValue(f"Missing value for field {path!r}", field_path=path)

    if type_name in types:
        if depth > limit:
            raise DepthLimitExceeded(f"Nesting exceeds the maximum depth of {limit}", max_depth=limit, location=path)
        if not isinstance(value, Mapping):
            raise InvalidFieldValue(
                f"Expected a mapping for struct {type_name}, got {type(value).__name__}",
                field_path=path,
                type_name=type_name,
            )
        for field in types[type_name]:
            child = f"{path}.{field['name']}" if path else field["name"]
            _check_value(types, field["type"], value.get(field["name"]), child, depth + 1, limit)
        return

    array = parse_array_type(type_name)
    if array is not None:
        if depth > limit:
            raise DepthLimitExceeded(f"Nesting exceeds the maximum depth of {limit}", max_depth=limit, location=path)
        element_type, length = array
        if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Sequence):
            raise InvalidFieldValue(
                f"Expected a list for {type_name}, got {type(value).__name__}",
                field_path=path,
                type_name=type_name,
            )
        if length is not None and len(value) != length:
            raise InvalidFieldValue(
                f"Expected {length} elements for {type_name}, got {len(value)}",
                field_path=path,
                type_name=type_name,
            )
        for i, item in enumerate(value):
            _check_value(types, element_type, item, f"{path}[{i}]", depth + 1, limit)
        return

    # raises UnknownType for anything that is not a primitive
    coerce_primitive(type_name, value, field_path=path)

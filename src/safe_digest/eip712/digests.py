"""
EIP-712 Typed Data Digests

Builds the signable digest of EIP-712 typed data:

    digest = keccak256(0x1901 || hashStruct(domain) || hashStruct(message))

When ``primaryType`` is ``EIP712Domain`` the message term is omitted and
``message`` is ignored entirely (the domain itself is being signed).

Every value is structurally validated against its declared type before any
hashing happens, so failures carry the offending field path.

Exported helpers
----------------
get_types_for_eip712_domain
    Derive the ``EIP712Domain`` field list from the populated domain keys.
hash_domain / hash_struct
    Domain separator and struct hash as ``0x`` hex.
get_typed_data_preimage / hash_typed_data
    Pre-image and digest; raise the typed errors of ``safe_digest.exceptions``.
compute_typed_data_digest
    Result-returning variant that never raises for bad input.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from eth_utils import encode_hex, keccak

from ..exceptions import BaseError, InvalidTypeDefinition, UnknownType
from ..schemas.bases import ValidationStatus
from ..utils import logger
from .constants import EIP712_DOMAIN_FIELDS, EIP712_DOMAIN_TYPE, EIP712_PREFIX
from .schemas import DigestResult, EIP712TypedData
from .structs import StructHasher
from .validation import validate_struct_value, validate_type_definitions

TypedDataInput = Union[EIP712TypedData, Mapping[str, Any]]


def get_types_for_eip712_domain(domain: Optional[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """
    Return the ``EIP712Domain`` fields for the keys present in ``domain``.

    Only populated (non-``None``) keys contribute, always in the canonical
    order ``name, version, chainId, verifyingContract, salt``.

    Example::

        get_types_for_eip712_domain({"verifyingContract": "0x...", "chainId": 1})
        # [{"name": "chainId", "type": "uint256"},
        #  {"name": "verifyingContract", "type": "address"}]
    """
    if not domain:
        return []
    return [dict(field) for field in EIP712_DOMAIN_FIELDS if domain.get(field["name"]) is not None]


def _with_domain_type(types: Mapping[str, Any], domain: Mapping[str, Any]) -> Dict[str, Any]:
    full_types = dict(types)
    if EIP712_DOMAIN_TYPE not in full_types:
        full_types[EIP712_DOMAIN_TYPE] = get_types_for_eip712_domain(domain)
    return full_types


def _unpack_typed_data(typed_data: TypedDataInput) -> Tuple[Dict[str, Any], Dict[str, Any], Any, str]:
    if isinstance(typed_data, EIP712TypedData):
        typed_data = typed_data.to_dict()
    if not isinstance(typed_data, Mapping):
        raise InvalidTypeDefinition(f"Typed data must be a mapping, got {type(typed_data).__name__}")

    domain = typed_data.get("domain") or {}
    if not isinstance(domain, Mapping):
        raise InvalidTypeDefinition("domain must be a mapping", field_path="domain")
    types = typed_data.get("types")
    validate_type_definitions(types)
    full_types = _with_domain_type(types, domain)

    primary_type = typed_data.get("primaryType")
    if primary_type is None:
        primary_type = next((name for name in types if name != EIP712_DOMAIN_TYPE), None)
    if primary_type is None:
        raise InvalidTypeDefinition("primaryType is missing and no struct type is declared", field_path="primaryType")
    if primary_type not in full_types:
        raise UnknownType(f"Primary type {primary_type!r} is not declared", type_name=primary_type, field_path="primaryType")

    return dict(domain), full_types, typed_data.get("message"), primary_type


def hash_domain(
    domain: Mapping[str, Any],
    types: Optional[Mapping[str, Any]] = None,
    *,
    max_depth: Optional[int] = None,
) -> str:
    """
    Compute the EIP-712 domain separator.

    Args:
        domain: Domain values.
        types: Optional ``types`` map; its ``EIP712Domain`` entry, when
            present, overrides the derived domain type.
        max_depth: Struct nesting limit.

    Returns:
        ``0x``-prefixed 32-byte hex string.
    """
    full_types = _with_domain_type(types or {}, domain)
    validate_type_definitions(full_types)
    validate_struct_value(full_types, EIP712_DOMAIN_TYPE, domain, "domain", max_depth)
    hasher = StructHasher(full_types, max_depth)
    return encode_hex(hasher.hash_struct(EIP712_DOMAIN_TYPE, domain, field_path="domain"))


def hash_struct(
    primary_type: str,
    data: Mapping[str, Any],
    types: Mapping[str, Any],
    *,
    max_depth: Optional[int] = None,
) -> str:
    """Validate ``data`` and return ``hashStruct(primary_type, data)`` as ``0x`` hex."""
    validate_type_definitions(types)
    validate_struct_value(types, primary_type, data, "message", max_depth)
    hasher = StructHasher(types, max_depth)
    return encode_hex(hasher.hash_struct(primary_type, data, field_path="message"))


def get_typed_data_preimage(typed_data: TypedDataInput, *, max_depth: Optional[int] = None) -> str:
    """
    Return ``0x1901 || domainSeparator || structHash`` as ``0x`` hex.

    The struct hash term is absent when the primary type is ``EIP712Domain``.

    Raises:
        MalformedHex, InvalidFieldValue, MissingFieldValue, UnknownType,
        InvalidTypeDefinition, DepthLimitExceeded: On malformed input.
    """
    domain, types, message, primary_type = _unpack_typed_data(typed_data)

    validate_struct_value(types, EIP712_DOMAIN_TYPE, domain, "domain", max_depth)
    if primary_type != EIP712_DOMAIN_TYPE:
        validate_struct_value(types, primary_type, message, "message", max_depth)

    hasher = StructHasher(types, max_depth)
    parts = [EIP712_PREFIX, hasher.hash_struct(EIP712_DOMAIN_TYPE, domain, field_path="domain")]
    if primary_type != EIP712_DOMAIN_TYPE:
        parts.append(hasher.hash_struct(primary_type, message, field_path="message"))
    return encode_hex(b"".join(parts))


def hash_typed_data(typed_data: TypedDataInput, *, max_depth: Optional[int] = None) -> str:
    """
    Compute the EIP-712 signable digest.

    Args:
        typed_data: ``EIP712TypedData`` or a ``{domain, types, message,
            primaryType?}`` mapping.
        max_depth: Struct nesting limit (environment default if omitted).

    Returns:
        66-character ``0x`` hex digest.

    Example::

        digest = hash_typed_data({
            "domain": {"name": "Ether Mail", "version": "1", "chainId": 1,
                       "verifyingContract": "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC"},
            "types": {...},
            "primaryType": "Mail",
            "message": {...},
        })
    """
    preimage = get_typed_data_preimage(typed_data, max_depth=max_depth)
    return encode_hex(keccak(hexstr=preimage))


def compute_typed_data_digest(typed_data: TypedDataInput, *, max_depth: Optional[int] = None) -> DigestResult:
    """
    Result-returning variant of ``hash_typed_data``.

    Returns:
        DigestResult with ``status=SUCCESS`` and the digest, or the failing
        status with ``error_details`` (field path, offending type).
    """

    def _fail(error: BaseError) -> DigestResult:
        logger.debug("Typed data digest rejected: %s", error.message)
        return DigestResult(
            status=ValidationStatus.from_code(error.code),
            is_valid=False,
            message=error.message,
            error_details=error.to_details(),
        )

    try:
        _, _, _, primary_type = _unpack_typed_data(typed_data)
        digest = hash_typed_data(typed_data, max_depth=max_depth)
    except BaseError as e:
        return _fail(e)

    return DigestResult(
        status=ValidationStatus.SUCCESS,
        is_valid=True,
        message="Digest computed",
        digest=digest,
        primary_type=primary_type,
    )

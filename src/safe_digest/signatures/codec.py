"""
Safe Signature Blob Codec

Structural parsing and validation of the concatenated owner signatures
accepted by ``Safe.execTransaction``:

    {65-byte slot}*N || dynamic region

Each slot is ``r (32) || s (32) || v (1)``. ``v`` selects the kind:

    v == 0   contract signature (EIP-1271); r = verifier, s = offset
    v == 1   approved hash; r = owner
    v > 30   eth_sign (v + 4)
    else     plain ECDSA (EOA)

A contract signature's offset points, from the start of the blob, at a
32-byte big-endian length ``L`` followed by ``L`` payload bytes. Payloads
may be referenced in any order and may overlap; they must fit in the blob.
Only the byte layout is certified: no signer recovery and no on-chain
``isValidSignature`` call is made.

Exported helpers
----------------
parse_signature_blob / validate_signature_blob
    Raising and result-returning parse of a full blob.
split_concatenated_signatures
    Split the proposal layout, where each contract signature is followed
    directly by its own dynamic part.
encode_signature_blob
    Assemble a blob from raw slots and ``ContractSignatureInput`` parts.
classify_signature_v / split_signature / normalize_eth_sign_signature
find_duplicate_signatures
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from eth_utils import encode_hex
from web3 import Web3

from ..config import resolve_max_signature_depth
from ..exceptions import (
    BaseError,
    ConfigurationError,
    DepthLimitExceeded,
    MalformedHex,
    OffsetOutOfBounds,
    TruncatedDynamicLengthField,
    TruncatedDynamicPayload,
    TruncatedStaticPart,
)
from ..schemas.bases import ValidationStatus
from ..utils import logger
from .constants import (
    ADDRESS_BYTES,
    APPROVED_HASH_V,
    CONTRACT_SIGNATURE_V,
    DYNAMIC_PART_LENGTH_FIELD_BYTES,
    ETH_SIGN_V_OFFSET,
    ETH_SIGN_V_THRESHOLD,
    SIGNATURE_LENGTH_BYTES,
    WORD_BYTES,
)
from .schemas import (
    ContractSignatureEntry,
    ContractSignatureInput,
    DynamicSignaturePayload,
    SignatureBlob,
    SignatureKind,
    SignatureParseResult,
    StaticSignatureEntry,
)

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]*$")

SignatureInput = Union[str, bytes]


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def _to_bytes(signature: SignatureInput) -> bytes:
    """Strict hex decoding: ``0x`` prefix, hex digits only, even length."""
    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature)
    if not isinstance(signature, str) or not signature.startswith(("0x", "0X")):
        raise MalformedHex('Invalid "0x" notated signature', value=signature)
    digits = signature[2:]
    if not _HEX_DIGITS.match(digits):
        raise MalformedHex("Signature contains non-hex characters", value=signature)
    if len(digits) % 2:
        raise MalformedHex("Invalid hex bytes length", value=signature)
    return bytes.fromhex(digits)


def _word_to_int(word: bytes) -> int:
    return int.from_bytes(word, "big")


def _owner_from_word(word: bytes) -> str:
    return Web3.to_checksum_address(encode_hex(word[WORD_BYTES - ADDRESS_BYTES:]))


def classify_signature_v(v: int) -> SignatureKind:
    """
    Map a slot's ``v`` byte to its signature kind.

    Example::

        classify_signature_v(0)   # SignatureKind.CONTRACT_SIGNATURE
        classify_signature_v(31)  # SignatureKind.ETH_SIGN
        classify_signature_v(27)  # SignatureKind.EOA
    """
    if v == CONTRACT_SIGNATURE_V:
        return SignatureKind.CONTRACT_SIGNATURE
    if v == APPROVED_HASH_V:
        return SignatureKind.APPROVED_HASH
    if v > ETH_SIGN_V_THRESHOLD:
        return SignatureKind.ETH_SIGN
    return SignatureKind.EOA


def split_signature(signature: SignatureInput) -> Tuple[str, str, int]:
    """
    Return ``(r, s, v)`` of the first 65-byte slot of ``signature``.

    Raises:
        MalformedHex: ``signature`` is not even-length ``0x`` hex.
        TruncatedStaticPart: Fewer than 65 bytes.
    """
    raw = _to_bytes(signature)
    if len(raw) < SIGNATURE_LENGTH_BYTES:
        raise TruncatedStaticPart(
            "Invalid signature length",
            byte_offset=0,
            signature_index=0,
            blob_length=len(raw),
        )
    return encode_hex(raw[0:32]), encode_hex(raw[32:64]), raw[64]


def normalize_eth_sign_signature(signature: SignatureInput) -> str:
    """
    Subtract 4 from the ``v`` of an eth_sign slot so that standard ECDSA
    recovery tooling accepts it. Other kinds are returned unchanged.
    """
    raw = _to_bytes(signature)
    _, _, v = split_signature(raw)
    if classify_signature_v(v) is SignatureKind.ETH_SIGN:
        raw = raw[:64] + bytes([v - ETH_SIGN_V_OFFSET]) + raw[SIGNATURE_LENGTH_BYTES:]
    return encode_hex(raw)


def find_duplicate_signatures(signatures: Iterable[str]) -> List[str]:
    """
    Return every signature that occurs more than once (case-insensitive),
    lowercased, in order of first repetition.
    """
    seen = set()
    duplicates: List[str] = []
    for signature in signatures:
        key = signature.lower()
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates


# ---------------------------------------------------------------------------
# Blob parsing
# ---------------------------------------------------------------------------

def _static_length(raw: bytes, required_signatures: Optional[int]) -> int:
    length = len(raw)
    if length < SIGNATURE_LENGTH_BYTES:
        raise TruncatedStaticPart(
            f"Signature blob of {length} bytes is shorter than one {SIGNATURE_LENGTH_BYTES}-byte slot",
            byte_offset=length,
            blob_length=length,
        )

    if required_signatures is not None:
        if required_signatures < 1:
            raise ConfigurationError(f"required_signatures must be a positive integer, got {required_signatures}")
        static_length = required_signatures * SIGNATURE_LENGTH_BYTES
        if static_length > length:
            raise TruncatedStaticPart(
                f"{required_signatures} signatures need {static_length} bytes, blob has {length}",
                byte_offset=length,
                signature_index=length // SIGNATURE_LENGTH_BYTES,
                blob_length=length,
            )
        return static_length

    # The static part ends where the first dynamic payload starts
    static_end = length
    index = 0
    while (index + 1) * SIGNATURE_LENGTH_BYTES <= static_end:
        start = index * SIGNATURE_LENGTH_BYTES
        end = start + SIGNATURE_LENGTH_BYTES
        if raw[end - 1] == CONTRACT_SIGNATURE_V:
            offset = _word_to_int(raw[start + 32:start + 64])
            if offset < end:
                raise OffsetOutOfBounds(
                    f"Contract signature {index} points into the static part (offset {offset})",
                    byte_offset=offset,
                    signature_index=index,
                    blob_length=length,
                )
            static_end = min(static_end, offset)
        index += 1

    static_length = index * SIGNATURE_LENGTH_BYTES
    if static_length != static_end:
        raise TruncatedStaticPart(
            f"Insufficient length for static part: {static_end} bytes is not a multiple of {SIGNATURE_LENGTH_BYTES}",
            byte_offset=static_length,
            signature_index=index,
            blob_length=length,
        )
    return static_length


def _resolve_payload(raw: bytes, index: int, offset: int, static_length: int) -> DynamicSignaturePayload:
    length = len(raw)
    if offset < static_length or offset > length:
        raise OffsetOutOfBounds(
            f"Contract signature {index} offset {offset} is outside the dynamic region "
            f"[{static_length}, {length}]",
            byte_offset=offset,
            signature_index=index,
            blob_length=length,
        )
    data_start = offset + DYNAMIC_PART_LENGTH_FIELD_BYTES
    if data_start > length:
        raise TruncatedDynamicLengthField(
            f"Insufficient length for dynamic part length field of contract signature {index}",
            byte_offset=offset,
            signature_index=index,
            blob_length=length,
        )
    payload_length = _word_to_int(raw[offset:data_start])
    if data_start + payload_length > length:
        raise TruncatedDynamicPayload(
            f"Insufficient length for dynamic part of contract signature {index}: "
            f"needs {payload_length} bytes at {data_start}, blob has {length}",
            byte_offset=data_start,
            signature_index=index,
            blob_length=length,
        )
    return DynamicSignaturePayload(
        offset=offset,
        length=payload_length,
        data=encode_hex(raw[data_start:data_start + payload_length]),
    )


def _parse(raw: bytes, required_signatures: Optional[int], recursive: bool, depth: int, max_depth: int) -> SignatureBlob:
    static_length = _static_length(raw, required_signatures)

    entries = []
    for index in range(static_length // SIGNATURE_LENGTH_BYTES):
        start = index * SIGNATURE_LENGTH_BYTES
        slot = raw[start:start + SIGNATURE_LENGTH_BYTES]
        r_word, s_word, v = slot[0:32], slot[32:64], slot[64]
        kind = classify_signature_v(v)

        if kind is not SignatureKind.CONTRACT_SIGNATURE:
            entries.append(StaticSignatureEntry(
                index=index,
                kind=kind,
                r=encode_hex(r_word),
                s=encode_hex(s_word),
                v=v,
                owner=_owner_from_word(r_word) if kind is SignatureKind.APPROVED_HASH else None,
                signature=encode_hex(slot),
            ))
            continue

        offset = _word_to_int(s_word)
        payload = _resolve_payload(raw, index, offset, static_length)
        nested = None
        if recursive:
            if depth + 1 > max_depth:
                raise DepthLimitExceeded(
                    f"Contract signature nesting exceeds the maximum depth of {max_depth}",
                    max_depth=max_depth,
                    location=f"signature[{index}]",
                )
            nested = _parse(bytes.fromhex(payload.data[2:]), None, True, depth + 1, max_depth)

        entries.append(ContractSignatureEntry(
            index=index,
            r=encode_hex(r_word),
            s=encode_hex(s_word),
            owner=_owner_from_word(r_word),
            offset=offset,
            payload=payload,
            nested=nested,
        ))

    return SignatureBlob(
        data=encode_hex(raw),
        byte_length=len(raw),
        static_length=static_length,
        entries=entries,
    )


def parse_signature_blob(
    signature: SignatureInput,
    required_signatures: Optional[int] = None,
    *,
    recursive: bool = False,
    max_depth: Optional[int] = None,
) -> SignatureBlob:
    """
    Parse and structurally validate a concatenated signature blob.

    Args:
        signature: Blob as even-length ``0x`` hex (any case) or raw bytes.
        required_signatures: Number of static slots. When omitted the static
            part is taken to end at the lowest contract-signature offset, or
            at the end of the blob when there is no contract signature.
        recursive: Also parse every contract-signature payload as a blob.
        max_depth: Nesting limit for ``recursive`` (counting this blob as 1).
            Falls back to ``safe_digest_max_signature_depth``.

    Returns:
        SignatureBlob with one entry per static slot.

    Raises:
        MalformedHex: Not ``0x`` notated, odd length or non-hex characters.
        TruncatedStaticPart: Too short for the static slots.
        OffsetOutOfBounds: A contract offset points into the static part
            or past the end of the blob.
        TruncatedDynamicLengthField: The 32-byte length word is cut off.
        TruncatedDynamicPayload: ``offset + 32 + L`` exceeds the blob.
        DepthLimitExceeded: Nested payloads go deeper than ``max_depth``.

    Example::

        blob = parse_signature_blob(safe_tx.signatures, required_signatures=2)
        for entry in blob.entries:
            print(entry.index, entry.kind, entry.owner)
    """
    raw = _to_bytes(signature)
    limit = resolve_max_signature_depth(max_depth) if recursive else 1
    return _parse(raw, required_signatures, recursive, 1, limit)


def validate_signature_blob(
    signature: SignatureInput,
    required_signatures: Optional[int] = None,
    *,
    recursive: bool = False,
    max_depth: Optional[int] = None,
) -> SignatureParseResult:
    """
    Result-returning variant of ``parse_signature_blob``.

    Any structural violation rejects the whole blob; ``error_details``
    carries the byte offset and slot index of the first violation.

    Example:
        result = validate_signature_blob(signatures, required_signatures=3)
        if not result.is_success():
            print(result.get_error_message())
    """

    def _fail(error: BaseError) -> SignatureParseResult:
        logger.debug("Signature blob rejected: %s", error.message)
        return SignatureParseResult(
            status=ValidationStatus.from_code(error.code),
            is_valid=False,
            message=error.message,
            error_details=error.to_details(),
        )

    try:
        blob = parse_signature_blob(
            signature,
            required_signatures,
            recursive=recursive,
            max_depth=max_depth,
        )
    except BaseError as e:
        return _fail(e)

    return SignatureParseResult(
        status=ValidationStatus.SUCCESS,
        is_valid=True,
        message=f"Signature blob holds {len(blob.entries)} signature(s)",
        blob=blob,
        signature_count=len(blob.entries),
    )


# ---------------------------------------------------------------------------
# Proposal layout
# ---------------------------------------------------------------------------

def split_concatenated_signatures(signatures: SignatureInput) -> List[str]:
    """
    Split signatures in which every contract signature is immediately
    followed by its own length word and payload.

    This is the layout used when confirming or proposing a transaction with
    one signature per owner, rather than the offset-addressed layout passed
    to ``execTransaction``.

    Returns:
        One ``0x`` hex string per signature; contract signatures include
        their length word and payload.

    Raises:
        MalformedHex: Not ``0x`` notated or odd length.
        TruncatedStaticPart: Insufficient length for static part.
        TruncatedDynamicLengthField: Insufficient length for dynamic part length field.
        TruncatedDynamicPayload: Insufficient length for dynamic part.
    """
    raw = _to_bytes(signatures)
    length = len(raw)
    if length < SIGNATURE_LENGTH_BYTES:
        raise TruncatedStaticPart("Invalid signature length", byte_offset=0, signature_index=0, blob_length=length)

    parts: List[str] = []
    cursor = 0
    while cursor < length:
        index = len(parts)
        static_end = cursor + SIGNATURE_LENGTH_BYTES
        if static_end > length:
            raise TruncatedStaticPart(
                "Insufficient length for static part",
                byte_offset=cursor,
                signature_index=index,
                blob_length=length,
            )
        end = static_end
        if raw[static_end - 1] == CONTRACT_SIGNATURE_V:
            length_end = static_end + DYNAMIC_PART_LENGTH_FIELD_BYTES
            if length_end > length:
                raise TruncatedDynamicLengthField(
                    "Insufficient length for dynamic part length field",
                    byte_offset=static_end,
                    signature_index=index,
                    blob_length=length,
                )
            end = length_end + _word_to_int(raw[static_end:length_end])
            if end > length:
                raise TruncatedDynamicPayload(
                    "Insufficient length for dynamic part",
                    byte_offset=length_end,
                    signature_index=index,
                    blob_length=length,
                )
        parts.append(encode_hex(raw[cursor:end]))
        cursor = end
    return parts


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _address_word(address: str) -> bytes:
    canonical = Web3.to_checksum_address(address)
    return bytes(WORD_BYTES - ADDRESS_BYTES) + bytes.fromhex(canonical[2:])


def encode_signature_blob(parts: Sequence[Union[SignatureInput, ContractSignatureInput]]) -> str:
    """
    Assemble an ``execTransaction`` signature blob.

    Raw 65-byte signatures are copied into their slots as-is. Each
    ``ContractSignatureInput`` becomes a slot ``r = verifier, s = offset,
    v = 0`` and its payload is appended to the dynamic region, in order.

    Example::

        blob = encode_signature_blob([
            eoa_signature,
            ContractSignatureInput(verifier=owner_safe, data=nested_signatures),
        ])
        parse_signature_blob(blob).owners  # [None, owner_safe]
    """
    static_length = len(parts) * SIGNATURE_LENGTH_BYTES
    static = bytearray()
    dynamic = bytearray()
    for index, part in enumerate(parts):
        if isinstance(part, ContractSignatureInput):
            payload = _to_bytes(part.data)
            offset = static_length + len(dynamic)
            static += _address_word(part.verifier)
            static += offset.to_bytes(WORD_BYTES, "big")
            static += bytes([CONTRACT_SIGNATURE_V])
            dynamic += len(payload).to_bytes(DYNAMIC_PART_LENGTH_FIELD_BYTES, "big") + payload
            continue

        raw = _to_bytes(part)
        if len(raw) != SIGNATURE_LENGTH_BYTES:
            raise TruncatedStaticPart(
                f"Signature {index} must be exactly {SIGNATURE_LENGTH_BYTES} bytes, got {len(raw)}",
                signature_index=index,
                blob_length=len(raw),
            )
        static += raw
    return encode_hex(bytes(static + dynamic))

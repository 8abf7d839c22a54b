from .exceptions import (
    BaseError,
    MalformedHex,
    TypedDataError,
    InvalidFieldValue,
    UnknownType,
    MissingFieldValue,
    InvalidTypeDefinition,
    DepthLimitExceeded,
    ConfigurationError,
    UnsupportedSafeVersion,
    SignatureBlobError,
    TruncatedStaticPart,
    TruncatedDynamicLengthField,
    TruncatedDynamicPayload,
    OffsetOutOfBounds,
)
from .eip712 import (
    EIP712TypedData,
    SafeTransactionData,
    DigestResult,
    SafeTypedDataHashes,
    get_types_for_eip712_domain,
    hash_domain,
    hash_struct,
    get_typed_data_preimage,
    hash_typed_data,
    compute_typed_data_digest,
    build_safe_tx_typed_data,
    build_safe_message_typed_data,
    build_safe_typed_data,
    get_safe_tx_hash,
    get_safe_message_hash,
    compute_safe_digest,
    get_safe_typed_data_hashes,
)
from .signatures import (
    SignatureKind,
    SignatureBlob,
    SignatureParseResult,
    ContractSignatureInput,
    parse_signature_blob,
    validate_signature_blob,
    classify_signature_v,
    split_signature,
    split_concatenated_signatures,
    normalize_eth_sign_signature,
    encode_signature_blob,
    find_duplicate_signatures,
)

__all__ = [
    "BaseError",
    "MalformedHex",
    "TypedDataError",
    "InvalidFieldValue",
    "UnknownType",
    "MissingFieldValue",
    "InvalidTypeDefinition",
    "DepthLimitExceeded",
    "ConfigurationError",
    "UnsupportedSafeVersion",
    "SignatureBlobError",
    "TruncatedStaticPart",
    "TruncatedDynamicLengthField",
    "TruncatedDynamicPayload",
    "OffsetOutOfBounds",
    "EIP712TypedData",
    "SafeTransactionData",
    "DigestResult",
    "SafeTypedDataHashes",
    "get_types_for_eip712_domain",
    "hash_domain",
    "hash_struct",
    "get_typed_data_preimage",
    "hash_typed_data",
    "compute_typed_data_digest",
    "build_safe_tx_typed_data",
    "build_safe_message_typed_data",
    "build_safe_typed_data",
    "get_safe_tx_hash",
    "get_safe_message_hash",
    "compute_safe_digest",
    "get_safe_typed_data_hashes",
    "SignatureKind",
    "SignatureBlob",
    "SignatureParseResult",
    "ContractSignatureInput",
    "parse_signature_blob",
    "validate_signature_blob",
    "classify_signature_v",
    "split_signature",
    "split_concatenated_signatures",
    "normalize_eth_sign_signature",
    "encode_signature_blob",
    "find_duplicate_signatures",
]

from .schemas import (
    SignatureKind,
    StaticSignatureEntry,
    ContractSignatureEntry,
    DynamicSignaturePayload,
    SignatureBlob,
    SignatureParseResult,
    ContractSignatureInput,
)
from .codec import (
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
    "SignatureKind",
    "StaticSignatureEntry",
    "ContractSignatureEntry",
    "DynamicSignaturePayload",
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

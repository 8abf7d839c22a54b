from .schemas import (
    TypedDataField,
    EIP712TypedData,
    Operation,
    SafeTransactionData,
    DigestResult,
    SafeTypedDataHashes,
)
from .structs import StructHasher
from .types_graph import TypeGraph
from .digests import (
    get_types_for_eip712_domain,
    hash_domain,
    hash_struct,
    get_typed_data_preimage,
    hash_typed_data,
    compute_typed_data_digest,
)
from .standards import (
    DomainWithChainId,
    DomainWithoutChainId,
    SafeTxTypedData,
    SafeMessageTypedData,
)
from .safe import (
    build_safe_tx_typed_data,
    build_safe_message_typed_data,
    build_safe_typed_data,
    get_safe_tx_hash,
    get_safe_message_hash,
    compute_safe_digest,
    get_safe_typed_data_hashes,
)

__all__ = [
    "TypedDataField",
    "EIP712TypedData",
    "Operation",
    "SafeTransactionData",
    "DigestResult",
    "SafeTypedDataHashes",
    "StructHasher",
    "TypeGraph",
    "get_types_for_eip712_domain",
    "hash_domain",
    "hash_struct",
    "get_typed_data_preimage",
    "hash_typed_data",
    "compute_typed_data_digest",
    "DomainWithChainId",
    "DomainWithoutChainId",
    "SafeTxTypedData",
    "SafeMessageTypedData",
    "build_safe_tx_typed_data",
    "build_safe_message_typed_data",
    "build_safe_typed_data",
    "get_safe_tx_hash",
    "get_safe_message_hash",
    "compute_safe_digest",
    "get_safe_typed_data_hashes",
]

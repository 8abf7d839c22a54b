from dataclasses import dataclass
from typing import Any, Dict, List, Union

from ..schemas.versions import SafeVersion
from .constants import (
    BASE_GAS_FIELD,
    EIP712_DOMAIN_TYPE,
    SAFE_MESSAGE_PRIMARY_TYPE,
    SAFE_MESSAGE_TYPE_FIELDS,
    SAFE_TX_PRIMARY_TYPE,
    safe_tx_type_fields,
)
from .schemas import EIP712TypedData


# -----------------------------
# Safe EIP-712 Domains
# -----------------------------

@dataclass(frozen=True)
class DomainWithChainId:
    """
    Domain of Safe contracts >=1.3.0: ``{chainId, verifyingContract}``.
    """
    chainId: int
    verifyingContract: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainId": self.chainId,
            "verifyingContract": self.verifyingContract,
        }

    def eip712_domain_types(self) -> List[Dict[str, str]]:
        return [
            {"name": "chainId", "type": "uint256"},
            {"name": "verifyingContract", "type": "address"},
        ]


@dataclass(frozen=True)
class DomainWithoutChainId:
    """
    Domain of Safe contracts below 1.3.0: ``{verifyingContract}`` only.

    There is no ``chainId`` key at all, neither in the value nor in the type.
    """
    verifyingContract: str

    def to_dict(self) -> Dict[str, Any]:
        return {"verifyingContract": self.verifyingContract}

    def eip712_domain_types(self) -> List[Dict[str, str]]:
        return [{"name": "verifyingContract", "type": "address"}]


SafeDomain = Union[DomainWithChainId, DomainWithoutChainId]


def build_safe_domain(version: SafeVersion, safe_address: str, chain_id: int) -> SafeDomain:
    """Pick the domain shape for ``version``; the only place the chainId gate is evaluated."""
    if version.includes_chain_id:
        return DomainWithChainId(chainId=chain_id, verifyingContract=safe_address)
    return DomainWithoutChainId(verifyingContract=safe_address)


# -----------------------------
# SafeTx
# -----------------------------

@dataclass(frozen=True)
class SafeTxMessage:
    """
    Message payload of the ``SafeTx`` struct.

    Attributes:
        to: Destination address.
        value: Wei amount.
        data: Call data (``0x`` hex).
        operation: ``0`` call, ``1`` delegatecall.
        safeTxGas: Gas forwarded to the inner call.
        baseGas: Gas independent of the inner call. Serialized as
            ``dataGas`` when ``gas_field_name`` says so (Safe <1.0.0).
        gasPrice: Refund gas price.
        gasToken: Refund token (zero address for ETH).
        refundReceiver: Refund recipient (zero address for tx.origin).
        nonce: Safe nonce.
        gas_field_name: ``baseGas`` or ``dataGas``.
    """
    to: str
    value: int
    data: str
    operation: int
    safeTxGas: int
    baseGas: int
    gasPrice: int
    gasToken: str
    refundReceiver: str
    nonce: int
    gas_field_name: str = BASE_GAS_FIELD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "to": self.to,
            "value": self.value,
            "data": self.data,
            "operation": self.operation,
            "safeTxGas": self.safeTxGas,
            self.gas_field_name: self.baseGas,
            "gasPrice": self.gasPrice,
            "gasToken": self.gasToken,
            "refundReceiver": self.refundReceiver,
            "nonce": self.nonce,
        }


@dataclass(frozen=True)
class SafeTxTypedData:
    """
    Container for ``SafeTx`` typed data.

    ``to_dict()`` returns the ``{types, primaryType, domain, message}``
    layout consumed by ``eth_account`` and ``eth_signTypedData_v4``.
    """
    domain: SafeDomain
    message: SafeTxMessage

    primary_type: str = SAFE_TX_PRIMARY_TYPE

    @property
    def types(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            EIP712_DOMAIN_TYPE: self.domain.eip712_domain_types(),
            SAFE_TX_PRIMARY_TYPE: safe_tx_type_fields(self.message.gas_field_name),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "types": self.types,
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message.to_dict(),
        }

    def to_typed_data(self) -> EIP712TypedData:
        return EIP712TypedData.model_validate(self.to_dict())


# -----------------------------
# SafeMessage
# -----------------------------

@dataclass(frozen=True)
class SafeMessageMessage:
    """
    Message payload of the ``SafeMessage`` struct.

    Attributes:
        message: Pre-hashed payload (``0x`` hex), either the EIP-191 hash of a
            string or the EIP-712 digest of nested typed data.
    """
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


@dataclass(frozen=True)
class SafeMessageTypedData:
    """Container for ``SafeMessage`` typed data (see ``SafeTxTypedData``)."""
    domain: SafeDomain
    message: SafeMessageMessage

    primary_type: str = SAFE_MESSAGE_PRIMARY_TYPE

    @property
    def types(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            EIP712_DOMAIN_TYPE: self.domain.eip712_domain_types(),
            SAFE_MESSAGE_PRIMARY_TYPE: [dict(field) for field in SAFE_MESSAGE_TYPE_FIELDS],
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "types": self.types,
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message.to_dict(),
        }

    def to_typed_data(self) -> EIP712TypedData:
        return EIP712TypedData.model_validate(self.to_dict())

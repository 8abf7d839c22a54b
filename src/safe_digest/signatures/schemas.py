"""
Signature Blob Schema Models

Pydantic models describing a parsed Safe signature blob. A blob is a run of
fixed 65-byte slots followed by a dynamic region; each slot is modelled as a
tagged variant:

    - StaticSignatureEntry: self-contained ``r, s, v`` slot (EOA, eth_sign,
      approved hash).
    - ContractSignatureEntry: EIP-1271 slot whose ``s`` word is an offset
      into the dynamic region, resolved into a ``DynamicSignaturePayload``.

Result classes:
    - SignatureBlob: Immutable parse of a whole blob.
    - SignatureParseResult: Outcome of ``validate_signature_blob``.

Input classes:
    - ContractSignatureInput: Verifier address plus payload, used when
      assembling a blob with ``encode_signature_blob``.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from ..schemas.bases import BaseValidationResult, CanonicalModel


class SignatureKind(str, Enum):
    """Signature kind, discriminated by the slot's ``v`` byte."""
    CONTRACT_SIGNATURE = "contract_signature"
    APPROVED_HASH = "approved_hash"
    ETH_SIGN = "eth_sign"
    EOA = "eoa"


class DynamicSignaturePayload(CanonicalModel):
    """
    Out-of-line payload of a contract signature.

    Attributes:
        offset: Byte offset of the length word from the start of the blob.
        length: Payload length ``L`` read from the length word.
        data: The ``L`` payload bytes as ``0x`` hex.
    """

    offset: int = Field(..., ge=0)
    length: int = Field(..., ge=0)
    data: str = Field(..., description="Payload bytes (0x hex)")

    @property
    def end(self) -> int:
        """Exclusive end offset of the payload within the blob."""
        return self.offset + 32 + self.length

    def decode_nested(self, *, max_depth: Optional[int] = None) -> "SignatureBlob":
        """
        Parse the payload as a signature blob of its own (Safe owned by a Safe).

        Nested payloads are parsed recursively up to ``max_depth`` levels.

        Raises:
            SignatureBlobError, MalformedHex: The payload is not a valid blob.
            DepthLimitExceeded: Nesting goes deeper than ``max_depth``.
        """
        from .codec import parse_signature_blob

        return parse_signature_blob(self.data, recursive=True, max_depth=max_depth)


class StaticSignatureEntry(CanonicalModel):
    """
    Self-contained 65-byte signature slot.

    Attributes:
        index: Position in the static part.
        kind: ``EOA``, ``ETH_SIGN`` or ``APPROVED_HASH``.
        r, s: 32-byte words as ``0x`` hex.
        v: Recovery byte (or kind marker).
        owner: Owner taken from ``r`` for approved hashes, otherwise ``None``
            (recovering EOA signers needs cryptography and is not done here).
        signature: The raw 65-byte slot as ``0x`` hex.
    """

    entry_type: Literal["static"] = "static"
    index: int = Field(..., ge=0)
    kind: SignatureKind
    r: str
    s: str
    v: int = Field(..., ge=0, le=255)
    owner: Optional[str] = None
    signature: str


class ContractSignatureEntry(CanonicalModel):
    """
    EIP-1271 contract signature slot (``v == 0``).

    Attributes:
        index: Position in the static part.
        kind: Always ``CONTRACT_SIGNATURE``.
        r, s: Raw slot words; ``r`` holds the verifier, ``s`` the offset.
        v: Always ``0``.
        owner: Verifier contract address (low 20 bytes of ``r``).
        offset: Dynamic-part offset decoded from ``s``.
        payload: The resolved dynamic payload.
        nested: Parsed payload when recursive validation was requested.
    """

    entry_type: Literal["contract"] = "contract"
    index: int = Field(..., ge=0)
    kind: Literal[SignatureKind.CONTRACT_SIGNATURE] = SignatureKind.CONTRACT_SIGNATURE
    r: str
    s: str
    v: int = 0
    owner: str
    offset: int = Field(..., ge=0)
    payload: DynamicSignaturePayload
    nested: Optional["SignatureBlob"] = None


SignatureEntry = Annotated[
    Union[StaticSignatureEntry, ContractSignatureEntry],
    Field(discriminator="entry_type"),
]


class SignatureBlob(CanonicalModel):
    """
    Structurally valid concatenated signature blob.

    Attributes:
        data: Whole blob as lowercase ``0x`` hex.
        byte_length: Total length in bytes.
        static_length: Length of the static part (``65 * len(entries)``).
        entries: Slots in static order.

    Example::

        blob = parse_signature_blob(signatures)
        [entry.kind for entry in blob.entries]
        # [SignatureKind.EOA, SignatureKind.CONTRACT_SIGNATURE]
    """

    data: str
    byte_length: int = Field(..., ge=0)
    static_length: int = Field(..., ge=0)
    entries: List[SignatureEntry] = Field(default_factory=list)

    @property
    def dynamic_region(self) -> str:
        """Bytes after the static part as ``0x`` hex (``"0x"`` when empty)."""
        return "0x" + self.data[2 + self.static_length * 2:]

    @property
    def owners(self) -> List[Optional[str]]:
        """Structurally known owner per slot (``None`` for EOA / eth_sign)."""
        return [entry.owner for entry in self.entries]

    @property
    def contract_signatures(self) -> List[ContractSignatureEntry]:
        return [entry for entry in self.entries if isinstance(entry, ContractSignatureEntry)]


ContractSignatureEntry.model_rebuild()
SignatureBlob.model_rebuild()


class SignatureParseResult(BaseValidationResult):
    """
    Signature blob validation outcome.

    There is no partial success: either ``blob`` holds every slot or the
    whole blob was rejected.

    Attributes:
        blob: Parsed blob on success, ``None`` on failure.
        signature_count: Number of static slots on success.
    """

    blob: Optional[SignatureBlob] = None
    signature_count: int = 0


class ContractSignatureInput(CanonicalModel):
    """
    A contract signature to place into a blob.

    Attributes:
        verifier: Address of the EIP-1271 contract (owner of the slot).
        data: Signature payload passed to ``isValidSignature`` (``0x`` hex).
    """

    verifier: str
    data: str = "0x"

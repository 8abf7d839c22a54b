"""
Exception and Error Definitions Module

Defines the error taxonomy for typed-data hashing, Safe typed-data assembly
and signature blob parsing. Every error carries enough context (field path,
byte offset) for a caller to build a user-facing message; the
result-returning helpers convert them into result models via ``to_details()``.

Exception Hierarchy:
    BaseError (root)
    ├── MalformedHex
    ├── TypedDataError
    │   ├── InvalidFieldValue
    │   ├── UnknownType
    │   ├── MissingFieldValue
    │   └── InvalidTypeDefinition
    ├── DepthLimitExceeded
    ├── ConfigurationError
    │   └── UnsupportedSafeVersion
    └── SignatureBlobError
        ├── TruncatedStaticPart
        ├── TruncatedDynamicLengthField
        ├── TruncatedDynamicPayload
        └── OffsetOutOfBounds
"""

from typing import Any, Dict, Optional


class BaseError(Exception):
    """
    Root exception class for all project-specific exceptions.

    All custom exceptions inherit from this class to enable unified
    exception handling and conversion into result models.

    Attributes:
        code: Stable machine-readable identifier of the error kind.
        message: Human-readable description.
    """

    code: str = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_details(self) -> Dict[str, Any]:
        """Return the error context as a plain dict (always includes ``code``)."""
        return {"code": self.code}


class MalformedHex(BaseError):
    """
    Raised when a value is not a well-formed ``0x``-prefixed hex string.

    This includes scenarios such as:
    - Missing ``0x`` prefix
    - Non-hexadecimal characters
    - Odd digit count where whole bytes are required (signature blobs)

    Attributes:
        value: The offending value (truncated for long inputs)
        field_path: Field path when the value belongs to typed data
    """

    code = "malformed_hex"

    def __init__(self, message: str, *, value: Any = None, field_path: Optional[str] = None):
        super().__init__(message)
        self.value = value
        self.field_path = field_path

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        if self.field_path is not None:
            details["field_path"] = self.field_path
        if isinstance(self.value, str):
            details["value"] = self.value if len(self.value) <= 80 else self.value[:80] + "..."
        return details


class TypedDataError(BaseError):
    """
    Base exception for EIP-712 typed-data errors.

    Attributes:
        field_path: Dotted path of the offending field (e.g. ``message.to``)
    """

    code = "typed_data_error"

    def __init__(self, message: str, *, field_path: Optional[str] = None):
        super().__init__(message)
        self.field_path = field_path

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        if self.field_path is not None:
            details["field_path"] = self.field_path
        return details


class InvalidFieldValue(TypedDataError):
    """
    Raised when a domain or message value violates its declared ABI type.

    This includes scenarios such as:
    - Non-address string where ``address`` is expected
    - Integer outside the declared bit width
    - ``bytesN`` value of the wrong size
    - Fixed-size array of the wrong length
    """

    code = "invalid_field_value"

    def __init__(self, message: str, *, field_path: Optional[str] = None, type_name: Optional[str] = None):
        super().__init__(message, field_path=field_path)
        self.type_name = type_name

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        if self.type_name is not None:
            details["type"] = self.type_name
        return details


class UnknownType(TypedDataError):
    """
    Raised when a type string is neither a primitive ABI type nor a
    declared custom struct (or an array of either).
    """

    code = "unknown_type"

    def __init__(self, message: str, *, type_name: str, field_path: Optional[str] = None):
        super().__init__(message, field_path=field_path)
        self.type_name = type_name

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        details["type"] = self.type_name
        return details


class MissingFieldValue(TypedDataError):
    """
    Raised when a field declared in a struct type has no value in the data.

    Missing values are never silently defaulted.
    """

    code = "missing_field_value"


class InvalidTypeDefinition(TypedDataError):
    """
    Raised when the ``types`` map itself is malformed.

    This includes scenarios such as:
    - A struct named like a primitive ABI type (e.g. ``address``)
    - The same field name declared twice in one struct
    - Field entries missing ``name`` or ``type``
    """

    code = "invalid_type_definition"


class DepthLimitExceeded(BaseError):
    """
    Raised when nested data (structs, arrays or contract-signature payloads)
    exceeds the configured maximum depth.

    Attributes:
        max_depth: The limit that was exceeded
        location: Field path or byte offset where the limit was hit
    """

    code = "depth_limit_exceeded"

    def __init__(self, message: str, *, max_depth: int, location: Optional[str] = None):
        super().__init__(message)
        self.max_depth = max_depth
        self.location = location

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        details["max_depth"] = self.max_depth
        if self.location is not None:
            details["location"] = self.location
        return details


class ConfigurationError(BaseError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Non-integer or non-positive depth limits in the environment
    - Unparsable Safe version strings
    """

    code = "configuration_error"


class UnsupportedSafeVersion(ConfigurationError):
    """
    Raised when a Safe version string cannot be parsed as a semantic version.

    The version gate never falls back to either domain shape for such input.

    Attributes:
        version: The rejected version string
    """

    code = "unsupported_safe_version"

    def __init__(self, message: str, *, version: Any):
        super().__init__(message)
        self.version = version

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        details["version"] = str(self.version)
        return details


class SignatureBlobError(BaseError):
    """
    Base exception for structural signature blob errors.

    Attributes:
        byte_offset: Offset (from the start of the blob) where the problem was found
        signature_index: Index of the static slot involved, if any
        blob_length: Total blob length in bytes
    """

    code = "signature_blob_error"

    def __init__(
        self,
        message: str,
        *,
        byte_offset: Optional[int] = None,
        signature_index: Optional[int] = None,
        blob_length: Optional[int] = None,
    ):
        super().__init__(message)
        self.byte_offset = byte_offset
        self.signature_index = signature_index
        self.blob_length = blob_length

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        if self.byte_offset is not None:
            details["byte_offset"] = self.byte_offset
        if self.signature_index is not None:
            details["signature_index"] = self.signature_index
        if self.blob_length is not None:
            details["blob_length"] = self.blob_length
        return details


class TruncatedStaticPart(SignatureBlobError):
    """Raised when the blob is too short for its fixed 65-byte slots."""

    code = "truncated_static_part"


class TruncatedDynamicLengthField(SignatureBlobError):
    """Raised when a contract signature's 32-byte length word is incomplete."""

    code = "truncated_dynamic_length_field"


class TruncatedDynamicPayload(SignatureBlobError):
    """Raised when ``offset + 32 + length`` exceeds the blob length."""

    code = "truncated_dynamic_payload"


class OffsetOutOfBounds(SignatureBlobError):
    """
    Raised when a contract signature offset points into the static part or
    past the end of the blob.
    """

    code = "offset_out_of_bounds"

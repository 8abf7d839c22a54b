"""
Base Schema Models for safe-digest

This module defines the base classes that all other schema models inherit
from. It provides deterministic serialization and the common shape of every
result returned by the result-oriented helpers.

Core Classes:
    - CanonicalModel: Pydantic base model with canonical JSON serialization
    - ValidationStatus: Outcome of a digest computation or blob validation
    - BaseValidationResult: Abstract result model (status, message, details)

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from abc import ABC
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CanonicalModel(BaseModel):
    """
    Pydantic base model with canonical JSON serialization.

    Models are frozen: once built from their inputs they are never mutated,
    which keeps them safe to share between threads or tasks.

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        canonical_json = model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a canonical JSON string.

        Keys are sorted and separators carry no whitespace, so equal models
        always serialize to identical strings.

        Returns:
            str: Canonical JSON representation (aliases applied).
        """
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all model fields, keyed by alias.
        """
        return self.model_dump(by_alias=True)


class ValidationStatus(str, Enum):
    """
    Enumeration of possible result statuses.

    ``SUCCESS`` plus one member per error kind of the exception taxonomy;
    member values equal the ``code`` of the matching exception class.
    """
    SUCCESS = "success"
    MALFORMED_HEX = "malformed_hex"
    INVALID_FIELD_VALUE = "invalid_field_value"
    UNKNOWN_TYPE = "unknown_type"
    MISSING_FIELD_VALUE = "missing_field_value"
    INVALID_TYPE_DEFINITION = "invalid_type_definition"
    DEPTH_LIMIT_EXCEEDED = "depth_limit_exceeded"
    CONFIGURATION_ERROR = "configuration_error"
    UNSUPPORTED_SAFE_VERSION = "unsupported_safe_version"
    TRUNCATED_STATIC_PART = "truncated_static_part"
    TRUNCATED_DYNAMIC_LENGTH_FIELD = "truncated_dynamic_length_field"
    TRUNCATED_DYNAMIC_PAYLOAD = "truncated_dynamic_payload"
    OFFSET_OUT_OF_BOUNDS = "offset_out_of_bounds"

    @classmethod
    def from_code(cls, code: str) -> "ValidationStatus":
        """Map an exception ``code`` to its status member."""
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown error code: {code}")


class BaseValidationResult(CanonicalModel, ABC):
    """
    Abstract base class for digest and signature-blob results.

    Attributes:
        status: Result status (ValidationStatus enum)
        is_valid: Whether the input was well-formed and processed
        message: Human-readable status message
        error_details: Error context (field path, byte offset, ...) on failure

    Methods:
        is_success: Check if processing succeeded
        get_error_message: Get formatted error message
    """

    status: ValidationStatus = Field(..., description="Result status")
    is_valid: bool = Field(..., description="Whether the input was well-formed")
    message: str = Field(..., description="Human-readable status message")
    error_details: Optional[Dict[str, Any]] = Field(None, description="Detailed error information")

    def is_success(self) -> bool:
        """
        Check if processing was successful.

        Returns:
            bool: True if the input was accepted, False otherwise.
        """
        return self.is_valid and self.status == ValidationStatus.SUCCESS

    def get_error_message(self) -> Optional[str]:
        """
        Get formatted error message from the result.

        Returns:
            Optional[str]: Error message on failure, None on success.

        Example:
            result = validate_signature_blob(signature)
            if not result.is_success():
                print(result.get_error_message())
        """
        if self.is_success():
            return None

        error_msg = f"Validation failed: {self.message}"
        if self.error_details:
            details_str = json.dumps(self.error_details, indent=2, sort_keys=True)
            error_msg += f"\nDetails: {details_str}"
        return error_msg

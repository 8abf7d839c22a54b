from .bases import CanonicalModel, ValidationStatus, BaseValidationResult
from .versions import SafeVersion, CHAIN_ID_DOMAIN_VERSION, BASE_GAS_SAFE_TX_VERSION

__all__ = [
    "CanonicalModel",
    "ValidationStatus",
    "BaseValidationResult",
    "SafeVersion",
    "CHAIN_ID_DOMAIN_VERSION",
    "BASE_GAS_SAFE_TX_VERSION",
]

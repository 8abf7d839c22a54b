import re
from dataclasses import dataclass
from typing import Optional

from packaging.version import Version

from ..exceptions import UnsupportedSafeVersion

_SEMVER_PATTERN = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

# >=1.3.0 Safe contracts include the `chainId` in the domain separator
CHAIN_ID_DOMAIN_VERSION = Version("1.3.0")
# >=1.0.0 Safe contracts use `baseGas` instead of `dataGas`
BASE_GAS_SAFE_TX_VERSION = Version("1.0.0")


@dataclass(frozen=True)
class SafeVersion:
    """
    Parsed semantic version of a Safe contract (e.g. ``1.3.0`` or ``1.3.0+L2``).

    Range checks follow node-semver defaults: build metadata is ignored and a
    pre-release never satisfies a ``>=X.Y.Z`` range.
    """

    raw: str
    release: Version
    prerelease: Optional[str] = None
    build: Optional[str] = None

    @classmethod
    def from_string(cls, value) -> "SafeVersion":
        if not isinstance(value, str):
            raise UnsupportedSafeVersion(f"Unsupported Safe version: {value!r}", version=value)
        match = _SEMVER_PATTERN.match(value.strip())
        if match is None:
            raise UnsupportedSafeVersion(f"Unsupported Safe version: {value!r}", version=value)
        release = Version(f"{match['major']}.{match['minor']}.{match['patch']}")
        return cls(raw=value, release=release, prerelease=match["prerelease"], build=match["build"])

    def satisfies_minimum(self, minimum: Version) -> bool:
        if self.prerelease is not None:
            return False
        return self.release >= minimum

    @property
    def includes_chain_id(self) -> bool:
        return self.satisfies_minimum(CHAIN_ID_DOMAIN_VERSION)

    @property
    def uses_base_gas(self) -> bool:
        return self.satisfies_minimum(BASE_GAS_SAFE_TX_VERSION)

    def __str__(self) -> str:
        return self.raw

"""Kubernetes version handling and the master version registry."""

import re
from functools import total_ordering

from pydantic import BaseModel

from hostplane.core.exceptions import ConfigurationError

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)(?:\.(\d+))?(?:[-+].*)?$")


@total_ordering
class KubernetesVersion:
    """A parsed major.minor.patch Kubernetes version.

    Accepts an optional leading ``v`` and ignores pre-release or build
    suffixes when comparing.
    """

    def __init__(self, major: int, minor: int, patch: int = 0):
        self.major = major
        self.minor = minor
        self.patch = patch

    @classmethod
    def parse(cls, value: "str | KubernetesVersion") -> "KubernetesVersion":
        """Parse a version string such as ``1.9.0`` or ``v1.9.6``.

        Args:
            value: Version string (or an already parsed version)

        Returns:
            KubernetesVersion instance

        Raises:
            ConfigurationError: If the string is not a valid version
        """
        if isinstance(value, KubernetesVersion):
            return value

        match = _VERSION_RE.match(value.strip())
        if not match:
            raise ConfigurationError(f"invalid kubernetes version {value!r}")

        major, minor, patch = match.groups()
        return cls(int(major), int(minor), int(patch or 0))

    def at_least(self, other: "str | KubernetesVersion") -> bool:
        """Check whether this version is greater than or equal to ``other``."""
        return self >= KubernetesVersion.parse(other)

    def _key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KubernetesVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "KubernetesVersion") -> bool:
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def __repr__(self) -> str:
        return f"KubernetesVersion('{self}')"


class MasterVersion(BaseModel):
    """A control plane version offered to tenants."""

    version: str
    default: bool = False

    @property
    def parsed(self) -> KubernetesVersion:
        return KubernetesVersion.parse(self.version)


class VersionRegistry:
    """Supported master versions with exactly one default."""

    def __init__(self, versions: list[MasterVersion]):
        """Initialize the registry.

        Args:
            versions: Supported master versions

        Raises:
            ConfigurationError: If the list is empty or does not carry exactly one default
        """
        if not versions:
            raise ConfigurationError("no master versions configured")

        defaults = [v.version for v in versions if v.default]
        if len(defaults) != 1:
            raise ConfigurationError(
                f"exactly one default master version required, got: [{' '.join(sorted(defaults))}]",
                fields=defaults,
            )

        self._versions = sorted(versions, key=lambda v: v.parsed)

    def list_versions(self) -> list[MasterVersion]:
        """List all master versions in ascending order."""
        return list(self._versions)

    def default(self) -> MasterVersion:
        """Get the default master version."""
        return next(v for v in self._versions if v.default)

    def get(self, version: str) -> MasterVersion | None:
        """Look up a master version, ignoring a leading ``v``.

        Args:
            version: Version string

        Returns:
            MasterVersion if supported, None otherwise
        """
        wanted = KubernetesVersion.parse(version)
        return next((v for v in self._versions if v.parsed == wanted), None)

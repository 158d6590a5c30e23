"""Unit tests for Kubernetes versions and the master version registry."""

import pytest

from hostplane.core.exceptions import ConfigurationError
from hostplane.core.versions import KubernetesVersion, MasterVersion, VersionRegistry


class TestKubernetesVersion:
    """Tests for version parsing and comparison."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1.9.0", "1.9.0"),
            ("v1.9.6", "1.9.6"),
            ("1.10", "1.10.0"),
            ("1.12.0-rc.1", "1.12.0"),
        ],
    )
    def test_parse(self, value: str, expected: str) -> None:
        assert str(KubernetesVersion.parse(value)) == expected

    @pytest.mark.parametrize("value", ["", "latest", "1", "1.x.0"])
    def test_parse_invalid(self, value: str) -> None:
        with pytest.raises(ConfigurationError, match="invalid kubernetes version"):
            KubernetesVersion.parse(value)

    def test_ordering_is_numeric(self) -> None:
        """Test that 1.10 sorts after 1.9."""
        assert KubernetesVersion.parse("1.10.0") > KubernetesVersion.parse("1.9.0")
        assert KubernetesVersion.parse("v1.9.6") == KubernetesVersion(1, 9, 6)

    def test_at_least_is_inclusive(self) -> None:
        version = KubernetesVersion.parse("1.10.0")

        assert version.at_least("1.10.0")
        assert version.at_least("1.9.0")
        assert not version.at_least("1.12.0")

    def test_hashable(self) -> None:
        assert len({KubernetesVersion.parse("1.9.0"), KubernetesVersion.parse("v1.9")}) == 1


class TestVersionRegistry:
    """Tests for VersionRegistry."""

    def test_list_versions_sorted_ascending(self) -> None:
        registry = VersionRegistry(
            [
                MasterVersion(version="1.10.0", default=True),
                MasterVersion(version="1.9.0"),
                MasterVersion(version="1.12.0"),
            ]
        )

        assert [v.version for v in registry.list_versions()] == ["1.9.0", "1.10.0", "1.12.0"]

    def test_default(self) -> None:
        registry = VersionRegistry(
            [MasterVersion(version="1.9.0"), MasterVersion(version="1.10.0", default=True)]
        )
        assert registry.default().version == "1.10.0"

    def test_get_ignores_leading_v(self) -> None:
        registry = VersionRegistry([MasterVersion(version="1.9.0", default=True)])

        assert registry.get("v1.9.0") is not None
        assert registry.get("1.8.0") is None

    def test_empty_registry_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="no master versions"):
            VersionRegistry([])

    def test_requires_exactly_one_default(self) -> None:
        with pytest.raises(ConfigurationError, match="exactly one default"):
            VersionRegistry([MasterVersion(version="1.9.0"), MasterVersion(version="1.10.0")])

        with pytest.raises(ConfigurationError, match=r"got: \[1.10.0 1.9.0\]"):
            VersionRegistry(
                [
                    MasterVersion(version="1.9.0", default=True),
                    MasterVersion(version="1.10.0", default=True),
                ]
            )

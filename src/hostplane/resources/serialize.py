"""Deterministic YAML serialization of compiled objects."""

from typing import Any

import yaml


class _NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that writes repeated values out instead of as anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def to_yaml(obj: dict[str, Any]) -> str:
    """Serialize an object with sorted keys and no line folding."""
    return yaml.dump(
        obj,
        Dumper=_NoAliasDumper,
        sort_keys=True,
        default_flow_style=False,
        width=4096,
    )


def from_yaml(text: str) -> dict[str, Any]:
    """Parse a serialized object."""
    return yaml.safe_load(text)


def object_identity(kind: str, provider: str, version: str, component: str) -> str:
    """Get the stable identity of a compiled object.

    Example: ``deployment-aws-1.9.0-apiserver``.
    """
    return f"{kind.lower()}-{provider}-{version}-{component}"

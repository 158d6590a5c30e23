"""Merge a desired object into the live object it replaces.

Creators own the desired state; external controllers own the rest. Merging
keeps the fields the API server and controllers maintain and lets the desired
object win everywhere else.
"""

import copy
from typing import Any

PRESERVED_METADATA = ("resourceVersion", "uid", "creationTimestamp")


def merge_object(desired: dict[str, Any], existing: dict[str, Any] | None) -> dict[str, Any]:
    """Merge a desired object with the existing one.

    Args:
        desired: Object produced by a creator
        existing: Live object, if any

    Returns:
        A new object; neither input is modified
    """
    merged = copy.deepcopy(desired)
    if not existing:
        return merged

    existing_meta = existing.get("metadata", {})
    metadata = merged.setdefault("metadata", {})

    for key in PRESERVED_METADATA:
        if key in existing_meta and key not in metadata:
            metadata[key] = copy.deepcopy(existing_meta[key])

    for key in ("labels", "annotations"):
        if existing_meta.get(key):
            combined = dict(existing_meta[key])
            combined.update(metadata.get(key, {}))
            metadata[key] = combined

    if "status" in existing:
        merged["status"] = copy.deepcopy(existing["status"])

    if merged.get("kind") == "Service":
        _preserve_service_allocations(merged, existing)

    return merged


def _preserve_service_allocations(merged: dict[str, Any], existing: dict[str, Any]) -> None:
    spec = merged.setdefault("spec", {})
    existing_spec = existing.get("spec", {})

    if "clusterIP" not in spec and existing_spec.get("clusterIP"):
        spec["clusterIP"] = existing_spec["clusterIP"]

    allocated = {
        _port_key(port): port["nodePort"]
        for port in existing_spec.get("ports", [])
        if port.get("nodePort")
    }
    for port in spec.get("ports", []):
        if "nodePort" not in port and _port_key(port) in allocated:
            port["nodePort"] = allocated[_port_key(port)]


def _port_key(port: dict[str, Any]) -> tuple[Any, ...]:
    return (port.get("name"), port.get("port"), port.get("protocol", "TCP"))

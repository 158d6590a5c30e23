"""Exceptions for interface implementations."""


class InterfaceError(Exception):
    """Base exception for all interface-related errors."""


class ClusterStoreError(InterfaceError):
    """Exception for cluster store queries."""


class SeedStoreError(InterfaceError):
    """Exception for seed store operations."""


class ServiceAccountStoreError(InterfaceError):
    """Exception for service account store operations."""


class SnapshotError(InterfaceError):
    """Exception for snapshot loading or reads."""

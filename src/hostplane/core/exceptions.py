"""Custom exceptions for hostplane."""


class HostplaneError(Exception):
    """Base exception for all hostplane errors."""

    status_code = 500


class ConfigurationError(HostplaneError):
    """A provider union is set zero or several times, providers disagree, or a network range is unusable.

    Attributes:
        fields: Offending union field names in sorted order
    """

    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = sorted(fields or [])


class ImmutabilityError(HostplaneError):
    """An immutable field (e.g. a datacenter's provider) was changed."""

    status_code = 400


class DuplicateError(HostplaneError):
    """A name is already taken (datacenter across seeds, service account, ...)."""

    status_code = 409


class ReferentialIntegrityError(HostplaneError):
    """A datacenter or seed is still referenced by existing clusters."""

    status_code = 400


class NotFoundError(HostplaneError):
    """Resource is absent or not visible to the caller."""

    status_code = 404


class AuthorizationError(HostplaneError):
    """Caller is not allowed to perform the operation."""

    status_code = 403


class PreconditionError(HostplaneError):
    """A snapshot entry expected from an earlier provisioning phase is missing."""

    status_code = 412


class ValidationFailedError(HostplaneError):
    """Request validation failed, including fail-closed query failures."""

    status_code = 400


class KubernetesError(HostplaneError):
    """A Kubernetes API call failed."""

    status_code = 502

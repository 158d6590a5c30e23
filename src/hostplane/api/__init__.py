"""Boundary services for datacenters and service accounts."""

from hostplane.api.datacenters import (
    CreateDatacenterRequest,
    DatacenterService,
    resolve_datacenter,
)
from hostplane.api.serviceaccounts import ServiceAccountService

__all__ = [
    "CreateDatacenterRequest",
    "DatacenterService",
    "ServiceAccountService",
    "resolve_datacenter",
]

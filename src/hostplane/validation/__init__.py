"""Admission validation."""

from hostplane.validation.admission import (
    AdmissionRequest,
    AdmissionResponse,
    SeedAdmissionHandler,
    build_seed_admission,
)
from hostplane.validation.chain import (
    Operation,
    ValidateFunc,
    ValidationContext,
    combine_validate_funcs,
)
from hostplane.validation.seed import (
    DEFAULT_SEED_NAME,
    SeedValidator,
    single_seed_validate_func,
)

__all__ = [
    "DEFAULT_SEED_NAME",
    "AdmissionRequest",
    "AdmissionResponse",
    "Operation",
    "SeedAdmissionHandler",
    "SeedValidator",
    "ValidateFunc",
    "ValidationContext",
    "build_seed_admission",
    "combine_validate_funcs",
    "single_seed_validate_func",
]

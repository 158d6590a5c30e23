"""Seed admission request handling."""

from hostplane.core.config import HostplaneConfig
from hostplane.core.exceptions import HostplaneError
from hostplane.core.models import Seed
from hostplane.core.providers import WireModel
from hostplane.interfaces.cluster_store import ClusterStore
from hostplane.interfaces.seed_store import SeedStore
from hostplane.utils.logging import get_logger, log_error
from hostplane.validation.chain import (
    Operation,
    ValidateFunc,
    ValidationContext,
    combine_validate_funcs,
)
from hostplane.validation.seed import SeedValidator, single_seed_validate_func

logger = get_logger(__name__)


class AdmissionRequest(WireModel):
    """An admission request for a seed."""

    operation: Operation
    proposed_object: Seed
    previous_object: Seed | None = None


class AdmissionResponse(WireModel):
    """Admission verdict."""

    allowed: bool
    message: str | None = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SeedAdmissionHandler:
    """Turns admission requests into verdicts.

    Domain errors become denials carrying the error message. Any other
    failure is logged and denied as well, so a broken validator never
    admits a change.
    """

    def __init__(self, validate: ValidateFunc[Seed]):
        self.validate = validate

    async def handle(self, request: AdmissionRequest) -> AdmissionResponse:
        """Validate an admission request.

        Args:
            request: Admission request

        Returns:
            AdmissionResponse; denied responses carry the reason
        """
        seed = request.proposed_object
        ctx = ValidationContext(previous=request.previous_object)

        try:
            await self.validate(ctx, seed, request.operation)
        except HostplaneError as e:
            logger.info(
                "seed_admission_denied",
                seed=seed.name,
                operation=request.operation.value,
                error_type=type(e).__name__,
                reason=str(e),
            )
            return AdmissionResponse(allowed=False, message=str(e))
        except Exception as e:
            log_error(logger, e, operation="seed_admission", seed=seed.name)
            return AdmissionResponse(allowed=False, message=f"internal error: {e}")

        logger.info("seed_admission_allowed", seed=seed.name, operation=request.operation.value)
        return AdmissionResponse(allowed=True)


def build_seed_admission(
    config: HostplaneConfig,
    cluster_store: ClusterStore,
    seed_store: SeedStore,
) -> SeedAdmissionHandler:
    """Assemble the seed admission chain from configuration.

    Args:
        config: hostplane configuration
        cluster_store: Cluster store
        seed_store: Seed store

    Returns:
        SeedAdmissionHandler running the single-seed constraint (if enabled)
        followed by the seed topology checks
    """
    funcs: list[ValidateFunc[Seed]] = []
    if config.seed.single_seed:
        funcs.append(single_seed_validate_func(config.seed.namespace, config.seed.name))
    funcs.append(
        SeedValidator(
            cluster_store,
            seed_store,
            timeout_seconds=config.seed.admission_timeout_seconds,
        )
    )
    return SeedAdmissionHandler(combine_validate_funcs(*funcs))

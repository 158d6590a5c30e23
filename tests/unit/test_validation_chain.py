"""Unit tests for combining validation functions."""

import pytest

from hostplane.core.exceptions import ValidationFailedError
from hostplane.core.models import Seed
from hostplane.validation import Operation, ValidationContext, combine_validate_funcs


class RecordingValidator:
    """Builds validate funcs from a pattern such as ``S -> S -> F``."""

    def __init__(self) -> None:
        self.success_count = 0

    async def success(self, ctx: ValidationContext, seed: Seed, operation: Operation) -> None:
        self.success_count += 1

    async def failure(self, ctx: ValidationContext, seed: Seed, operation: Operation) -> None:
        raise ValidationFailedError("Validation failed")

    def funcs(self, pattern: str) -> list:
        steps = [step.strip().upper() for step in pattern.split("->")]
        return [self.success if step == "S" else self.failure for step in steps]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("pattern", "want_error", "expected_successes"),
    [
        ("S -> S -> S -> S", False, 4),
        ("S -> S -> S -> S -> F", True, 4),
        ("S -> S -> F -> S -> S", True, 2),
        ("F -> S -> S -> S -> S", True, 0),
    ],
)
async def test_combined_funcs_stop_at_first_failure(
    pattern: str, want_error: bool, expected_successes: int
) -> None:
    validator = RecordingValidator()
    combined = combine_validate_funcs(*validator.funcs(pattern))

    if want_error:
        with pytest.raises(ValidationFailedError, match="Validation failed"):
            await combined(ValidationContext(), Seed(), Operation.CREATE)
    else:
        await combined(ValidationContext(), Seed(), Operation.CREATE)

    assert validator.success_count == expected_successes


@pytest.mark.asyncio
async def test_empty_chain_allows_everything() -> None:
    await combine_validate_funcs()(ValidationContext(), Seed(), Operation.DELETE)


@pytest.mark.asyncio
async def test_context_is_passed_to_every_func() -> None:
    seen = []

    async def record(ctx: ValidationContext, seed: Seed, operation: Operation) -> None:
        seen.append((ctx.previous, seed.name, operation))

    previous = Seed(name="old")
    await combine_validate_funcs(record, record)(ValidationContext(previous=previous), Seed(name="new"), Operation.UPDATE)

    assert seen == [(previous, "new", Operation.UPDATE)] * 2

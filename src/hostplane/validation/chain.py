"""Composable admission validation functions."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

T = TypeVar("T")


class Operation(str, Enum):
    """Admission operation."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass
class ValidationContext:
    """Request-scoped inputs shared by the functions of a chain.

    Attributes:
        previous: The object as it was before the request, if known
        extra: Additional request metadata
    """

    previous: Any | None = None
    extra: dict[str, Any] = field(default_factory=dict)


ValidateFunc = Callable[[ValidationContext, T, Operation], Awaitable[None]]


def combine_validate_funcs(*funcs: ValidateFunc[T]) -> ValidateFunc[T]:
    """Combine validation functions into one that runs them in order.

    The combined function stops at the first function that raises and
    propagates its exception.
    """

    async def combined(ctx: ValidationContext, obj: T, operation: Operation) -> None:
        for func in funcs:
            await func(ctx, obj, operation)

    return combined
